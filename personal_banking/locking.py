"""
Account Locking Module

Per-account mutual exclusion for balance read-modify-write cycles. Locks for
several accounts are always taken in ascending id order so that opposite
direction transfers cannot deadlock, and every acquisition is bounded by a
timeout.
"""

import threading
import time
from contextlib import contextmanager
from typing import Dict, List, Optional

from .errors import BusyError
from .logging_config import get_logger


class AccountLockManager:
    """Hands out one lock per account id"""

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout
        self._locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self.logger = get_logger("personal_banking.locking")

    def _lock_for(self, account_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[account_id] = lock
            return lock

    @contextmanager
    def hold(self, *account_ids: int, timeout: Optional[float] = None):
        """
        Hold the locks of the given accounts for the duration of the block.

        Raises:
            BusyError: If any lock cannot be acquired before the deadline
        """
        budget = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + budget
        acquired: List[threading.Lock] = []

        try:
            for account_id in sorted(set(account_ids)):
                lock = self._lock_for(account_id)
                remaining = max(0.0, deadline - time.monotonic())
                if not lock.acquire(timeout=remaining):
                    self.logger.warning(
                        f"Timed out after {budget}s waiting for account {account_id}"
                    )
                    raise BusyError(f"Account {account_id} is busy, try again later")
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
