import threading
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    DISPUTED = "disputed"
    RESOLVED = "resolved"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class DisputableTransaction:
    """A cached deposit together with its dispute state (None if never disputed)."""

    transaction: Transaction
    state: Optional[DisputeState] = None


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    locked: bool = False

    def credit(self, amount: Decimal) -> None:
        self.available += amount
        self.total += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount
        self.total -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def charge_back(self, amount: Decimal) -> None:
        self.held -= amount
        self.total -= amount
        self.locked = True

    def is_balanced(self) -> bool:
        return self.total == self.available + self.held

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


class ProcessingStats:
    """Thread-safe counters for tracking processing statistics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.applied = 0
        self.rejected = 0
        self._rejected_by_kind: Counter = Counter()

    def record_success(self):
        with self._lock:
            self.applied += 1

    def record_failure(self, kind: str):
        with self._lock:
            self.rejected += 1
            self._rejected_by_kind[kind] += 1

    def rejected_by_kind(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._rejected_by_kind)

    def summary(self) -> str:
        breakdown = ", ".join(f"{kind}={count}" for kind, count in sorted(self.rejected_by_kind().items()))
        line = f"Applied: {self.applied}, Rejected: {self.rejected}"
        if breakdown:
            line += f" ({breakdown})"
        return line
