import csv
from decimal import Decimal
from typing import Iterable, TextIO

from models import AccountSnapshot

REPORT_FIELDS = ("client", "available", "held", "total", "locked")


def format_decimal(value: Decimal) -> str:
    """Format decimal without exponent, removing trailing zeros."""
    normalized = value.normalize()
    if normalized.is_zero():
        return "0"
    return f"{normalized:f}"


def format_account(account: AccountSnapshot) -> list:
    return [
        account.client_id,
        format_decimal(account.available),
        format_decimal(account.held),
        format_decimal(account.total),
        str(account.locked).lower(),
    ]


def write_accounts(accounts: Iterable[AccountSnapshot], stream: TextIO, sorted_output: bool = True) -> int:
    """Write the account report as CSV. Returns the number of accounts written."""
    if sorted_output:
        accounts = sorted(accounts, key=lambda account: account.client_id)

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_FIELDS)
    count = 0
    for account in accounts:
        writer.writerow(format_account(account))
        count += 1
    return count
