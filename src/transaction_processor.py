import logging

from errors import (
    AccountLocked,
    BalanceInvariantError,
    InternalError,
    InvalidDispute,
    NotEnoughFunds,
    TxAlreadyDisputed,
    TxDoesntExist,
    TxNotUnderDispute,
    Unauthorized,
)
from models import Transaction, TransactionType, ClientAccount, DisputableTransaction, DisputeState
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions against state, one at a time.
    Every check runs before any mutation, so a raised TransactionError leaves
    balances and the dispute cache untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        """
        Apply a single transaction.

        Raises:
            TransactionError: the transaction was rejected (state unchanged).
            BalanceInvariantError: total drifted from available + held.
        """
        if transaction.transaction_type.carries_amount:
            if transaction.amount is None or transaction.amount < 0:
                raise InternalError(transaction.transaction_id, f"amount {transaction.amount}")

        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            raise AccountLocked(transaction.transaction_id, f"client {transaction.client_id}")

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(account, transaction)

        if not account.is_balanced():
            raise BalanceInvariantError(
                f"client {account.client_id}: total {account.total} != "
                f"available {account.available} + held {account.held} after {transaction}"
            )

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> None:
        account.credit(transaction.amount)
        self._state.cache_deposit(transaction)

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> None:
        if account.available < transaction.amount:
            raise NotEnoughFunds(
                transaction.transaction_id,
                f"available {account.available}, requested {transaction.amount}",
            )
        account.debit(transaction.amount)
        self._state.record_withdrawal(transaction)

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> None:
        disputed = self._lookup_disputable(transaction)

        if disputed.state is not None:
            raise TxAlreadyDisputed(transaction.transaction_id)

        account.hold(disputed.transaction.amount)
        disputed.state = DisputeState.DISPUTED

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> None:
        disputed = self._lookup_disputable(transaction)

        if disputed.state is not DisputeState.DISPUTED:
            raise TxNotUnderDispute(transaction.transaction_id)

        account.release_hold(disputed.transaction.amount)
        disputed.state = DisputeState.RESOLVED
        self._state.evict(transaction.transaction_id)

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> None:
        disputed = self._lookup_disputable(transaction)

        if disputed.state is not DisputeState.DISPUTED:
            raise TxNotUnderDispute(transaction.transaction_id)

        account.charge_back(disputed.transaction.amount)
        disputed.state = DisputeState.RESOLVED
        self._state.evict(transaction.transaction_id)
        logger.info(f"Client {account.client_id} locked after chargeback of tx {transaction.transaction_id}")

    def _lookup_disputable(self, transaction: Transaction) -> DisputableTransaction:
        """Find the referenced deposit and check the requesting client owns it."""
        disputed = self._state.get_disputable(transaction.transaction_id)

        if disputed is None:
            # Only deposits are disputable; name the withdrawal case explicitly.
            owner = self._state.get_withdrawal_owner(transaction.transaction_id)
            if owner is None:
                raise TxDoesntExist(transaction.transaction_id)
            if owner != transaction.client_id:
                raise Unauthorized(transaction.transaction_id, f"owned by client {owner}")
            raise InvalidDispute(transaction.transaction_id, "withdrawals cannot be disputed")

        if disputed.transaction.client_id != transaction.client_id:
            raise Unauthorized(
                transaction.transaction_id,
                f"owned by client {disputed.transaction.client_id}, requested by {transaction.client_id}",
            )

        return disputed
