"""
Test suite for the transaction log

Tests transaction shape rules and the append-only log queries.
"""

import pytest
from decimal import Decimal

from personal_banking.storage import InMemoryStorage
from personal_banking.transactions import Transaction, TransactionLog, TransactionType


class TestTransaction:
    """Test Transaction record invariants"""

    def test_valid_shapes(self):
        deposit = Transaction(TransactionType.DEPOSIT, Decimal('10.00'), receiver_id=1)
        withdrawal = Transaction(TransactionType.WITHDRAWAL, Decimal('5.00'), sender_id=1)
        transfer = Transaction(TransactionType.TRANSFER, Decimal('1.00'), sender_id=1, receiver_id=2)

        assert deposit.involves(1)
        assert withdrawal.involves(1)
        assert transfer.involves(1) and transfer.involves(2)
        assert not transfer.involves(3)

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError, match="must be positive"):
            Transaction(TransactionType.DEPOSIT, Decimal('0.00'), receiver_id=1)
        with pytest.raises(ValueError, match="must be positive"):
            Transaction(TransactionType.DEPOSIT, Decimal('-1.00'), receiver_id=1)

    def test_deposit_shape(self):
        with pytest.raises(ValueError, match="Deposit"):
            Transaction(TransactionType.DEPOSIT, Decimal('1.00'), sender_id=1, receiver_id=2)
        with pytest.raises(ValueError, match="Deposit"):
            Transaction(TransactionType.DEPOSIT, Decimal('1.00'))

    def test_withdrawal_shape(self):
        with pytest.raises(ValueError, match="Withdrawal"):
            Transaction(TransactionType.WITHDRAWAL, Decimal('1.00'), receiver_id=1)

    def test_transfer_shape(self):
        with pytest.raises(ValueError, match="both a sender and a receiver"):
            Transaction(TransactionType.TRANSFER, Decimal('1.00'), sender_id=1)
        with pytest.raises(ValueError, match="must differ"):
            Transaction(TransactionType.TRANSFER, Decimal('1.00'), sender_id=1, receiver_id=1)

    def test_transaction_is_immutable(self):
        txn = Transaction(TransactionType.DEPOSIT, Decimal('1.00'), receiver_id=1)
        with pytest.raises(AttributeError):
            txn.amount = Decimal('2.00')


class TestTransactionLog:
    """Test the append-only Transaction Log"""

    def setup_method(self):
        self.log = TransactionLog(InMemoryStorage())

    def test_append_assigns_id_and_timestamp(self):
        txn = self.log.append(Transaction(TransactionType.DEPOSIT, Decimal('10.00'), receiver_id=1))

        assert txn.id == 1
        assert txn.created_at is not None
        assert self.log.get(txn.id) == txn

    def test_append_rejects_persisted_transaction(self):
        txn = self.log.append(Transaction(TransactionType.DEPOSIT, Decimal('10.00'), receiver_id=1))
        with pytest.raises(ValueError, match="already recorded"):
            self.log.append(txn)

    def test_queries_by_participant(self):
        d = self.log.append(Transaction(TransactionType.DEPOSIT, Decimal('100.00'), receiver_id=1))
        t = self.log.append(Transaction(TransactionType.TRANSFER, Decimal('30.00'), sender_id=1, receiver_id=2))
        w = self.log.append(Transaction(TransactionType.WITHDRAWAL, Decimal('5.00'), sender_id=2))
        self.log.append(Transaction(TransactionType.DEPOSIT, Decimal('1.00'), receiver_id=3))

        assert [x.id for x in self.log.find_by_account(1)] == [d.id, t.id]
        assert [x.id for x in self.log.find_by_account(2)] == [t.id, w.id]
        assert [x.id for x in self.log.find_by_sender(1)] == [t.id]
        assert [x.id for x in self.log.find_by_receiver(1)] == [d.id]
        assert self.log.find_by_account(99) == []
        assert len(self.log.list_all()) == 4

    def test_find_by_account_is_repeatable(self):
        self.log.append(Transaction(TransactionType.DEPOSIT, Decimal('100.00'), receiver_id=1))
        self.log.append(Transaction(TransactionType.WITHDRAWAL, Decimal('10.00'), sender_id=1))

        assert self.log.find_by_account(1) == self.log.find_by_account(1)

    def test_amounts_survive_storage_exactly(self):
        txn = self.log.append(Transaction(TransactionType.DEPOSIT, Decimal('0.10'), receiver_id=1))
        assert self.log.get(txn.id).amount == Decimal('0.10')
        assert self.log.get(txn.id).transaction_type == TransactionType.DEPOSIT
