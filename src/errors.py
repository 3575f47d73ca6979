from enum import Enum


class ErrorKind(Enum):
    NOT_ENOUGH_FUNDS = "not_enough_funds"
    TX_DOESNT_EXIST = "tx_doesnt_exist"
    INVALID_DISPUTE = "invalid_dispute"
    UNAUTHORIZED = "unauthorized"
    TX_ALREADY_DISPUTED = "tx_already_disputed"
    TX_NOT_UNDER_DISPUTE = "tx_not_under_dispute"
    INTERNAL_ERROR = "internal_error"
    ACCOUNT_LOCKED = "account_locked"


class TransactionError(Exception):
    """
    A transaction was rejected. The ledger state is unchanged.
    Subclasses set `kind` and a default message.
    """

    kind: ErrorKind
    message = "Transaction rejected"

    def __init__(self, transaction_id: int, detail: str = ""):
        self.transaction_id = transaction_id
        self.detail = detail
        text = f"tx {transaction_id}: {self.message}"
        if detail:
            text += f" ({detail})"
        super().__init__(text)


class NotEnoughFunds(TransactionError):
    kind = ErrorKind.NOT_ENOUGH_FUNDS
    message = "Account doesn't have enough funds"


class TxDoesntExist(TransactionError):
    kind = ErrorKind.TX_DOESNT_EXIST
    message = "Requested transaction doesn't exist"


class InvalidDispute(TransactionError):
    kind = ErrorKind.INVALID_DISPUTE
    message = "Only deposits can be disputed"


class Unauthorized(TransactionError):
    kind = ErrorKind.UNAUTHORIZED
    message = "Cannot dispute a transaction the client doesn't own"


class TxAlreadyDisputed(TransactionError):
    kind = ErrorKind.TX_ALREADY_DISPUTED
    message = "Transaction is already under dispute"


class TxNotUnderDispute(TransactionError):
    kind = ErrorKind.TX_NOT_UNDER_DISPUTE
    message = "Transaction must be under dispute"


class InternalError(TransactionError):
    kind = ErrorKind.INTERNAL_ERROR
    message = "Invalid transaction amount"


class AccountLocked(TransactionError):
    kind = ErrorKind.ACCOUNT_LOCKED
    message = "Account is locked"


class BalanceInvariantError(AssertionError):
    """total != available + held after a mutation. The state machine itself is broken."""
