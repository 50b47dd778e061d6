"""
Owner Management Module

Owner identities and the Owner Store. An owner is identified by a tax
identity number and a phone number, both globally unique and kept in one
canonical textual format.
"""

from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .accounts import AccountStore
from .storage import StorageInterface, StorageRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Owner(StorageRecord):
    """
    Person or entity holding one or more accounts
    """
    tax_id: str
    phone: str
    name: str
    id: Optional[int] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if not self.tax_id or not self.phone:
            raise ValueError("Owner tax id and phone are required")
        if not self.name or not self.name.strip():
            raise ValueError("Owner name is required")


class OwnerStore:
    """
    Durable storage of owners; deleting an owner cascades to its accounts
    """

    def __init__(self, storage: StorageInterface, account_store: AccountStore):
        self.storage = storage
        self.account_store = account_store
        self.table_name = "owners"

    def get(self, owner_id: int) -> Optional[Owner]:
        """Get owner by ID"""
        owner_dict = self.storage.load(self.table_name, owner_id)
        if owner_dict:
            return self._owner_from_dict(owner_dict)
        return None

    def find_by_tax_id(self, tax_id: str) -> Optional[Owner]:
        return self._find_one({"tax_id": tax_id})

    def find_by_phone(self, phone: str) -> Optional[Owner]:
        return self._find_one({"phone": phone})

    def list_all(self) -> List[Owner]:
        return [self._owner_from_dict(data) for data in self.storage.load_all(self.table_name)]

    def save(self, owner: Owner) -> Owner:
        """Persist an owner, assigning an id if it is new"""
        if owner.id is None:
            owner.id = self.storage.next_id(self.table_name)
        else:
            owner.updated_at = _utcnow()
        self.storage.save(self.table_name, owner.id, owner.to_dict())
        return owner

    def delete(self, owner_id: int) -> bool:
        """Delete an owner and every account it holds as one unit of work"""
        with self.storage.atomic():
            for account in self.account_store.find_by_owner(owner_id):
                self.account_store.delete(account.id)
            return self.storage.delete(self.table_name, owner_id)

    def _find_one(self, filters: Dict) -> Optional[Owner]:
        owners = self.storage.find(self.table_name, filters)
        if owners:
            return self._owner_from_dict(owners[0])
        return None

    def _owner_from_dict(self, data: Dict) -> Owner:
        """Convert dictionary to Owner"""
        return Owner(
            id=data['id'],
            tax_id=data['tax_id'],
            phone=data['phone'],
            name=data['name'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at'])
        )
