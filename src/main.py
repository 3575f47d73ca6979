import sys
import logging
from typing import List, Optional, TextIO

from pydantic import ValidationError

from account_report import write_accounts
from config import Settings, get_settings
from ledger import Ledger
from models import ProcessingStats
from sharded_ledger import ShardedLedger
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)

USAGE = "Usage: payments-ledger <input.csv>"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def run(filepath: str, settings: Settings, output: TextIO) -> ProcessingStats:
    """Replay the input file and write the account report to output."""
    stats = ProcessingStats()
    transactions = read_transactions(filepath)

    if settings.shards > 1:
        ledger = ShardedLedger(num_shards=settings.shards, stats=stats).process(transactions)
    else:
        ledger = Ledger.from_sequence(transactions, stats=stats)

    write_accounts(ledger.accounts(), output, sorted_output=settings.sorted_output)
    logger.info(stats.summary())
    return stats


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(format="%(levelname)s: %(message)s", stream=sys.stderr)
        logger.error(f"Invalid PAYMENTS_* settings: {e}")
        return 1
    configure_logging(settings)

    try:
        run(args[0], settings, sys.stdout)
    except OSError as e:
        logger.error(f"Cannot read {args[0]}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
