"""
Shared test configuration

Credential hashing runs with a low scrypt cost and systems use in-memory
storage unless a test asks otherwise.
"""

import os

os.environ.setdefault("BANK_SCRYPT_N", "1024")
os.environ.setdefault("BANK_STORAGE_BACKEND", "memory")
os.environ.setdefault("BANK_LOCK_TIMEOUT_SECONDS", "2.0")

import pytest
from decimal import Decimal

from personal_banking.config import reload_config
from personal_banking.accounts import Account, AccountType
from personal_banking.owners import Owner
from personal_banking.storage import InMemoryStorage
from personal_banking.system import BankingSystem

reload_config()


@pytest.fixture
def system():
    """Banking system on fresh in-memory storage"""
    banking_system = BankingSystem(storage=InMemoryStorage())
    yield banking_system
    banking_system.close()


@pytest.fixture
def make_owner(system):
    """Factory persisting owners with unique tax ids and phones"""
    counter = {"n": 0}

    def _make(name: str = "Maria Silva") -> Owner:
        counter["n"] += 1
        n = counter["n"]
        return system.owner_store.save(Owner(
            tax_id=f"{n:03d}.456.789-0{n % 10}",
            phone=f"+55 (11) 9{n:04d}-0000",
            name=name
        ))

    return _make


@pytest.fixture
def make_account(system):
    """Factory persisting accounts with a given balance"""

    def _make(owner: Owner, account_type: AccountType = AccountType.CHECKING,
              balance: str = "0.00") -> Account:
        return system.account_store.save(Account(
            owner_id=owner.id,
            account_type=account_type,
            password_hash="not-a-real-hash",
            balance=Decimal(balance)
        ))

    return _make
