"""
Account Management Module

Account records and the Account Store. Accounts belong to exactly one owner,
carry one classification (checking, savings or business) and an exact
Decimal balance. The store is passive: balances are only ever changed by the
ledger engine.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum

from .money import ZERO, to_amount
from .storage import StorageInterface, StorageRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountType(Enum):
    """Account classifications"""
    CHECKING = "checking"
    SAVINGS = "savings"    # Receives transfers, never sends them
    BUSINESS = "business"


@dataclass
class Account(StorageRecord):
    """
    Bank account owned by a single owner
    """
    owner_id: int
    account_type: AccountType
    password_hash: str = field(repr=False)
    balance: Decimal = ZERO
    id: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        self.balance = to_amount(self.balance)
        if self.balance < ZERO:
            raise ValueError(f"Account balance cannot be negative: {self.balance}")

    @property
    def is_savings(self) -> bool:
        return self.account_type == AccountType.SAVINGS

    @property
    def is_checking(self) -> bool:
        return self.account_type == AccountType.CHECKING

    def same_account(self, other: Optional['Account']) -> bool:
        """Check if both references denote the same stored account"""
        if other is None:
            return False
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self is other


class AccountStore:
    """
    Durable keyed storage of Account records
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.table_name = "accounts"

    def get(self, account_id: int) -> Optional[Account]:
        """Get account by ID"""
        account_dict = self.storage.load(self.table_name, account_id)
        if account_dict:
            return self._account_from_dict(account_dict)
        return None

    def find_by_owner(self, owner_id: int) -> List[Account]:
        """Get all accounts for an owner"""
        accounts_data = self.storage.find(self.table_name, {"owner_id": owner_id})
        return [self._account_from_dict(data) for data in accounts_data]

    def find_by_owner_and_type(self, owner_id: int, account_type: AccountType) -> Optional[Account]:
        accounts_data = self.storage.find(
            self.table_name, {"owner_id": owner_id, "account_type": account_type.value}
        )
        if accounts_data:
            return self._account_from_dict(accounts_data[0])
        return None

    def save(self, account: Account) -> Account:
        """
        Persist an account, assigning an id if it is new.

        Returns:
            The persisted Account
        """
        if account.id is None:
            account.id = self.storage.next_id(self.table_name)
        else:
            account.updated_at = _utcnow()
        self.storage.save(self.table_name, account.id, self._account_to_dict(account))
        return account

    def delete(self, account_id: int) -> bool:
        return self.storage.delete(self.table_name, account_id)

    def list_all(self) -> List[Account]:
        return [self._account_from_dict(data) for data in self.storage.load_all(self.table_name)]

    def _account_to_dict(self, account: Account) -> Dict:
        """Convert Account to dictionary for storage"""
        return account.to_dict()

    def _account_from_dict(self, data: Dict) -> Account:
        """Convert dictionary to Account"""
        return Account(
            id=data['id'],
            owner_id=data['owner_id'],
            account_type=AccountType(data['account_type']),
            password_hash=data['password_hash'],
            balance=Decimal(data['balance']),
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at'])
        )
