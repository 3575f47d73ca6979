from typing import Dict, Iterator, Optional

from models import Transaction, ClientAccount, DisputableTransaction


class StateManager:
    """
    Owns client accounts and the cache of deposits that can still be disputed.
    Not thread-safe: one StateManager belongs to exactly one ledger.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._disputable: Dict[int, DisputableTransaction] = {}
        # Withdrawal tx id -> owning client id, so disputes against them get a precise error.
        self._withdrawals: Dict[int, int] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def cache_deposit(self, transaction: Transaction) -> None:
        """Store deposit for future dispute lookups."""
        self._disputable[transaction.transaction_id] = DisputableTransaction(transaction)

    def get_disputable(self, transaction_id: int) -> Optional[DisputableTransaction]:
        return self._disputable.get(transaction_id)

    def evict(self, transaction_id: int) -> None:
        """Drop a deposit whose dispute reached a terminal outcome."""
        self._disputable.pop(transaction_id, None)

    def record_withdrawal(self, transaction: Transaction) -> None:
        self._withdrawals[transaction.transaction_id] = transaction.client_id

    def get_withdrawal_owner(self, transaction_id: int) -> Optional[int]:
        return self._withdrawals.get(transaction_id)

    def iter_accounts(self) -> Iterator[ClientAccount]:
        return iter(list(self._accounts.values()))

    def __len__(self) -> int:
        return len(self._accounts)
