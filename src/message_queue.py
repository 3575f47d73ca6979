import threading
from queue import Queue, Empty
from typing import Optional

from models import Transaction


class ShardQueue:
    """
    Thread-safe FIFO feeding one shard consumer.
    Messages come out in publish order; there is no retry or reordering.
    """

    DEFAULT_TIMEOUT = 0.1

    def __init__(self):
        self._queue: Queue[Transaction] = Queue()
        self._shutdown_event = threading.Event()

    def publish_message(self, message: Transaction) -> None:
        """Add message to the queue. Thread-safe."""
        self._queue.put(message)

    def consume_message(self) -> Optional[Transaction]:
        """
        Get next message from the queue.
        Returns None if queue is empty after timeout.
        """
        try:
            return self._queue.get(timeout=self.DEFAULT_TIMEOUT)
        except Empty:
            return None

    def is_empty(self) -> bool:
        return self._queue.empty()

    def size(self) -> int:
        """Return approximate queue size."""
        return self._queue.qsize()

    def shutdown(self) -> None:
        """Signal no more messages will be published."""
        self._shutdown_event.set()

    def is_shutdown(self) -> bool:
        return self._shutdown_event.is_set()

    def is_drained(self) -> bool:
        return self.is_shutdown() and self.is_empty()
