import logging
from typing import Iterable, Iterator, Optional

from errors import TransactionError
from models import Transaction, AccountSnapshot, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class Ledger:
    """
    Single-threaded ledger engine: replays transactions in the order given
    and keeps the resulting account balances in memory.
    """

    def __init__(self, stats: Optional[ProcessingStats] = None):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self.stats = stats if stats is not None else ProcessingStats()

    @classmethod
    def from_sequence(cls, transactions: Iterable[Transaction], stats: Optional[ProcessingStats] = None) -> "Ledger":
        """
        Build a ledger and replay every transaction.
        Rejected transactions are logged at DEBUG and dropped; the replay never stops on them.
        """
        ledger = cls(stats)
        for transaction in transactions:
            ledger.replay(transaction)
        return ledger

    def apply(self, transaction: Transaction) -> None:
        """Apply one transaction. Raises TransactionError if it is rejected."""
        self._processor.process_transaction(transaction)

    def replay(self, transaction: Transaction) -> bool:
        """Apply one transaction, recording the outcome instead of raising it."""
        try:
            self.apply(transaction)
        except TransactionError as e:
            self.stats.record_failure(e.kind.value)
            logger.debug(f"Rejected {transaction}: {e}")
            return False
        self.stats.record_success()
        return True

    def accounts(self) -> Iterator[AccountSnapshot]:
        """Yield a snapshot of every account. Call again to restart."""
        for account in self._state.iter_accounts():
            yield account.snapshot()

    def get_account(self, client_id: int) -> Optional[AccountSnapshot]:
        account = self._state.get_account(client_id)
        return account.snapshot() if account is not None else None

    def __len__(self) -> int:
        return len(self._state)
