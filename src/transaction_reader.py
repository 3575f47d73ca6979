import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional, TextIO

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """Read CSV file lazily and yield transactions in file order."""
    # Undecodable bytes become U+FFFD, which fails field parsing and skips the row.
    with open(filepath, "r", encoding="utf-8", errors="replace", newline="") as f:
        yield from parse_transactions(f)


def parse_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """Parse CSV rows (header first); malformed rows are logged and skipped."""
    reader = csv.DictReader(lines, skipinitialspace=True)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.warning(f"Failed to read CSV line {reader.line_num}: {e}")
            continue
        transaction = parse_csv_row(row)
        if transaction:
            yield transaction


def parse_csv_row(row: Dict[Optional[str], object]) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    try:
        normalized = {
            k.strip(): (v or "").strip()
            for k, v in row.items()
            if isinstance(k, str) and not isinstance(v, list)
        }

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")

        amount = None
        if transaction_type.carries_amount:
            amount_str = normalized.get("amount", "")
            if not amount_str:
                raise ValueError(f"{transaction_type.value} requires an amount")
            amount = Decimal(amount_str)
            if not amount.is_finite():
                raise ValueError(f"amount must be finite, got {amount_str}")

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e!r}")
        return None


def _parse_id(value: str, upper_bound: int, field: str) -> int:
    parsed = int(value)
    if not 0 <= parsed <= upper_bound:
        raise ValueError(f"{field} {parsed} out of range 0..{upper_bound}")
    return parsed


def write_transactions(transactions: Iterable[Transaction], stream: TextIO) -> int:
    """Write transactions in the same CSV layout read_transactions accepts. Returns row count."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["type", "client", "tx", "amount"])
    count = 0
    for transaction in transactions:
        amount = "" if transaction.amount is None else f"{transaction.amount:f}"
        writer.writerow([transaction.transaction_type.value, transaction.client_id, transaction.transaction_id, amount])
        count += 1
    return count
