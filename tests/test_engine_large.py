import sys
import os
import time
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from generator import generate_transactions
from ledger import Ledger
from models import Transaction, TransactionType
from sharded_ledger import ShardedLedger
from transaction_reader import read_transactions


def balances(accounts):
    return {account.client_id: account for account in accounts}


class TestPaymentsLedgerLargeScale:
    def test_1000_accounts_6000_transactions(self, tmp_path):
        """Test with 1000 accounts and 6000 transactions."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Each client gets: 3 deposits (100, 200, 300) and 2 withdrawals (50, 100)
        for client_id in range(1, num_clients + 1):
            for kind, amount in (("deposit", 100), ("deposit", 200), ("deposit", 300), ("withdrawal", 50), ("withdrawal", 100)):
                rows.append(f"{kind}, {client_id}, {tx_id}, {amount}")
                tx_id += 1

        # Extra deposit for each client
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        expected_balance = Decimal("500")  # 450 + 50

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        ledger = ShardedLedger(num_shards=10).process(read_transactions(str(csv_file)))
        accounts = balances(ledger.accounts())

        assert len(accounts) == num_clients
        assert ledger.stats.applied == 6000

        for client_id in range(1, num_clients + 1):
            assert accounts[client_id].available == expected_balance, \
                f"Client {client_id}: expected {expected_balance}, got {accounts[client_id].available}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

    def test_with_disputes_resolves_chargebacks(self):
        """Disputes, resolves and chargebacks across 40 accounts."""
        rows = []

        def add(kind, client_id, tx_id, amount=None):
            rows.append((kind, client_id, tx_id, amount))

        for client_id in range(1, 41):
            add("deposit", client_id, client_id * 100 + 1, "100")
            add("deposit", client_id, client_id * 100 + 2, "150")
            add("deposit", client_id, client_id * 100 + 3, "250")

        # Clients 11-20: dispute then resolve
        for client_id in range(11, 21):
            add("dispute", client_id, client_id * 100 + 1)
            add("resolve", client_id, client_id * 100 + 1)

        # Clients 21-30: dispute then chargeback, later deposit rejected
        for client_id in range(21, 31):
            add("dispute", client_id, client_id * 100 + 1)
            add("chargeback", client_id, client_id * 100 + 1)
            add("deposit", client_id, client_id * 100 + 4, "1000")

        # Clients 31-40: withdrawal then dispute left open
        for client_id in range(31, 41):
            add("withdrawal", client_id, client_id * 100 + 4, "100")
            add("dispute", client_id, client_id * 100 + 2)

        transactions = [
            Transaction(TransactionType(kind), client_id, tx_id, Decimal(amount) if amount else None)
            for kind, client_id, tx_id, amount in rows
        ]
        accounts = balances(ShardedLedger(num_shards=4).process(transactions).accounts())

        for client_id in range(1, 21):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        for client_id in range(21, 31):
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].total == Decimal("400")
            assert accounts[client_id].locked is True

        for client_id in range(31, 41):
            assert accounts[client_id].available == Decimal("250"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("150")
            assert accounts[client_id].total == Decimal("400")
            assert accounts[client_id].locked is False

    def test_generated_stream_keeps_balance_invariant(self):
        ledger = Ledger.from_sequence(generate_transactions(20_000, clients=50, seed=7))

        assert ledger.stats.applied + ledger.stats.rejected == 20_000
        assert ledger.stats.applied > 0
        for account in ledger.accounts():
            assert account.total == account.available + account.held
            assert account.held >= 0

    def test_sharded_matches_single_engine(self):
        transactions = list(generate_transactions(20_000, clients=64, seed=2024))

        single = balances(Ledger.from_sequence(transactions).accounts())
        sharded = balances(ShardedLedger(num_shards=8).process(transactions).accounts())

        assert single == sharded

    def test_process_can_be_called_again(self):
        def slowly(transactions):
            for transaction in transactions:
                time.sleep(0.3)
                yield transaction

        ledger = ShardedLedger(num_shards=2)
        ledger.process([Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("5"))])
        ledger.process(slowly([Transaction(TransactionType.DEPOSIT, 1, 2, Decimal("5"))]))

        accounts = balances(ledger.accounts())
        assert accounts[1].total == Decimal("10")
        assert ledger.stats.applied == 2
