"""Generate reproducible synthetic transaction streams for load tests and benchmarks."""
import argparse
import random
import sys
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Sequence

from models import Transaction, TransactionType
from transaction_reader import write_transactions

AMOUNT_STEP = Decimal("0.0001")

# (deposit, withdrawal, dispute, resolve, chargeback); higher weight = more frequent
TRANSACTION_WEIGHTS = [60, 25, 8, 5, 2]

# Share of dispute-family transactions that point at a random id instead of a real deposit.
STRAY_REFERENCE_RATE = 0.1


def random_amount(rng: random.Random, max_amount: Decimal) -> Decimal:
    return (Decimal(rng.random()) * max_amount).quantize(AMOUNT_STEP)


def generate_transactions(
    count: int,
    clients: int = 100,
    seed: Optional[int] = None,
    max_amount: Decimal = Decimal("1000"),
) -> Iterator[Transaction]:
    """
    Yield `count` transactions for client ids 1..clients.

    Disputes, resolves and chargebacks mostly reference the client's own
    earlier deposits, so the stream exercises the whole dispute lifecycle;
    the rest reference random ids and are expected to be rejected.
    """
    if clients < 1:
        raise ValueError(f"clients must be at least 1, got {clients}")

    rng = random.Random(seed)
    kinds = list(TransactionType)
    deposits: Dict[int, List[int]] = {}
    next_tx_id = 1

    for _ in range(count):
        kind = rng.choices(kinds, weights=TRANSACTION_WEIGHTS, k=1)[0]
        client_id = rng.randint(1, clients)

        if kind.carries_amount:
            transaction_id = next_tx_id
            next_tx_id += 1
            if kind is TransactionType.DEPOSIT:
                deposits.setdefault(client_id, []).append(transaction_id)
            yield Transaction(kind, client_id, transaction_id, random_amount(rng, max_amount))
            continue

        own_deposits = deposits.get(client_id)
        if own_deposits and rng.random() >= STRAY_REFERENCE_RATE:
            transaction_id = rng.choice(own_deposits)
        else:
            transaction_id = rng.randint(1, max(next_tx_id, 2))
        yield Transaction(kind, client_id, transaction_id)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Emit a synthetic transaction CSV for the payments ledger.")
    parser.add_argument("--count", type=int, default=100_000, help="Number of transactions to emit.")
    parser.add_argument("--clients", type=int, default=100, help="Number of distinct client ids.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output.")
    parser.add_argument("--output", default="-", help="Where to write the CSV. Use '-' for stdout.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    transactions = generate_transactions(args.count, clients=args.clients, seed=args.seed)

    if args.output == "-":
        written = write_transactions(transactions, sys.stdout)
    else:
        with open(args.output, "w", newline="") as f:
            written = write_transactions(transactions, f)

    print(f"Generated {written} transactions for {args.clients} clients", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
