import itertools
import logging
import threading
from typing import Iterable, Iterator, List, Optional

from errors import BalanceInvariantError
from ledger import Ledger
from message_queue import ShardQueue
from models import Transaction, AccountSnapshot, ProcessingStats

logger = logging.getLogger(__name__)


class ShardedLedger:
    """
    Replays transactions across independent ledgers partitioned by client id.
    Each shard has its own FIFO and exactly one consumer thread, so all
    transactions of one client are applied in input order by one ledger.
    """

    def __init__(self, num_shards: int = 4, stats: Optional[ProcessingStats] = None):
        if num_shards < 1:
            raise ValueError(f"num_shards must be at least 1, got {num_shards}")
        self._num_shards = num_shards
        self.stats = stats if stats is not None else ProcessingStats()
        self._ledgers = [Ledger(self.stats) for _ in range(num_shards)]
        self._queues: List[ShardQueue] = []
        self._failures: List[BaseException] = []
        self._failures_lock = threading.Lock()

    def shard_for(self, client_id: int) -> int:
        return client_id % self._num_shards

    def process(self, transactions: Iterable[Transaction]) -> "ShardedLedger":
        """Publish all transactions, wait for every shard to drain."""
        logger.info(f"Starting sharded replay with {self._num_shards} shards")
        # Queues are single-use once shut down; every replay gets its own.
        self._queues = [ShardQueue() for _ in range(self._num_shards)]

        consumer_threads = []
        for shard in range(self._num_shards):
            consumer_thread = threading.Thread(target=self._consume_transactions, args=(shard,))
            consumer_thread.start()
            consumer_threads.append(consumer_thread)

        try:
            for transaction in transactions:
                self._queues[self.shard_for(transaction.client_id)].publish_message(transaction)
        finally:
            for queue in self._queues:
                queue.shutdown()
            for consumer_thread in consumer_threads:
                consumer_thread.join()

        if self._failures:
            raise self._failures[0]

        logger.info("Sharded replay complete")
        return self

    def _consume_transactions(self, shard: int) -> None:
        """Consumer loop: pull from this shard's queue and replay into its ledger."""
        queue = self._queues[shard]
        ledger = self._ledgers[shard]
        while True:
            transaction = queue.consume_message()
            if transaction is None:
                if queue.is_drained():
                    break
                continue

            try:
                ledger.replay(transaction)
            except BalanceInvariantError as e:
                logger.error(f"Shard {shard} stopped: {e}")
                with self._failures_lock:
                    self._failures.append(e)
                return

    def accounts(self) -> Iterator[AccountSnapshot]:
        return itertools.chain.from_iterable(ledger.accounts() for ledger in self._ledgers)

    def __len__(self) -> int:
        return sum(len(ledger) for ledger in self._ledgers)
