"""
Banking system wiring
"""

from typing import Optional

from .accounts import AccountStore
from .auth import AuthService
from .config import BankConfig, get_config
from .ledger import LedgerEngine
from .locking import AccountLockManager
from .owners import OwnerStore
from .storage import StorageInterface, create_storage
from .transactions import TransactionLog


class BankingSystem:
    """Banking core with all components initialized on one storage backend"""

    def __init__(self, storage: Optional[StorageInterface] = None, config: Optional[BankConfig] = None):
        config = config or get_config()

        if storage is None:
            storage = create_storage(config.storage_backend, config.database_path)
        self.storage = storage

        self.account_store = AccountStore(self.storage)
        self.owner_store = OwnerStore(self.storage, self.account_store)
        self.transaction_log = TransactionLog(self.storage)
        self.lock_manager = AccountLockManager(timeout=config.lock_timeout_seconds)
        self.ledger = LedgerEngine(
            self.storage, self.account_store, self.transaction_log,
            self.owner_store, self.lock_manager
        )
        self.auth = AuthService(self.storage, self.owner_store, self.account_store)

    def close(self) -> None:
        self.storage.close()
