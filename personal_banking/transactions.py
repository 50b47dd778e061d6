"""
Transaction Log Module

Immutable records of committed money movements and the append-only log that
stores them. The log has no update or delete operation.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Dict, List, Optional
from enum import Enum

from .money import ZERO, to_amount
from .storage import StorageInterface, StorageRecord


class TransactionType(Enum):
    """Types of money movement"""
    DEPOSIT = "deposit"        # Money enters an account from outside
    WITHDRAWAL = "withdrawal"  # Money leaves an account to outside
    TRANSFER = "transfer"      # Money moves between two accounts


@dataclass(frozen=True)
class Transaction(StorageRecord):
    """
    Committed money movement.

    A deposit has only a receiver, a withdrawal only a sender and a transfer
    both, which must differ.
    """
    transaction_type: TransactionType
    amount: Decimal
    sender_id: Optional[int] = None
    receiver_id: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, 'amount', to_amount(self.amount))

        if self.amount <= ZERO:
            raise ValueError("Transaction amount must be positive")

        if self.transaction_type == TransactionType.DEPOSIT:
            if self.receiver_id is None or self.sender_id is not None:
                raise ValueError("Deposit must have a receiver and no sender")
        elif self.transaction_type == TransactionType.WITHDRAWAL:
            if self.sender_id is None or self.receiver_id is not None:
                raise ValueError("Withdrawal must have a sender and no receiver")
        elif self.transaction_type == TransactionType.TRANSFER:
            if self.sender_id is None or self.receiver_id is None:
                raise ValueError("Transfer must have both a sender and a receiver")
            if self.sender_id == self.receiver_id:
                raise ValueError("Transfer sender and receiver must differ")

    def involves(self, account_id: int) -> bool:
        return account_id in (self.sender_id, self.receiver_id)


class TransactionLog:
    """
    Append-only durable storage of Transaction records
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "transactions"

    def append(self, transaction: Transaction) -> Transaction:
        """
        Persist a new transaction, assigning its id and timestamp.

        Raises:
            ValueError: If the transaction was already appended
        """
        if transaction.id is not None:
            raise ValueError(f"Transaction {transaction.id} is already recorded")

        persisted = Transaction(
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
            sender_id=transaction.sender_id,
            receiver_id=transaction.receiver_id,
            id=self.storage.next_id(self.table_name),
            created_at=datetime.now(timezone.utc)
        )
        self.storage.save(self.table_name, persisted.id, persisted.to_dict())
        return persisted

    def get(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID"""
        data = self.storage.load(self.table_name, transaction_id)
        if data:
            return self._transaction_from_dict(data)
        return None

    def find_by_account(self, account_id: int) -> List[Transaction]:
        """All transactions where the account is sender or receiver, oldest first"""
        return [txn for txn in self.list_all() if txn.involves(account_id)]

    def find_by_sender(self, account_id: int) -> List[Transaction]:
        return self._find({"sender_id": account_id})

    def find_by_receiver(self, account_id: int) -> List[Transaction]:
        return self._find({"receiver_id": account_id})

    def list_all(self) -> List[Transaction]:
        return [self._transaction_from_dict(data) for data in self.storage.load_all(self.table_name)]

    def _find(self, filters: Dict) -> List[Transaction]:
        return [self._transaction_from_dict(data) for data in self.storage.find(self.table_name, filters)]

    def _transaction_from_dict(self, data: Dict) -> Transaction:
        """Convert dictionary to Transaction"""
        return Transaction(
            id=data['id'],
            transaction_type=TransactionType(data['transaction_type']),
            amount=Decimal(data['amount']),
            sender_id=data.get('sender_id'),
            receiver_id=data.get('receiver_id'),
            created_at=datetime.fromisoformat(data['created_at'])
        )
