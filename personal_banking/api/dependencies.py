"""
Shared API dependencies
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..accounts import Account
from ..auth import Session
from ..errors import AccountNotFoundError, ForbiddenError, NotAuthenticatedError
from ..system import BankingSystem
from ..tokens import decode_token


_banking_system: Optional[BankingSystem] = None

security = HTTPBearer(auto_error=False)


def get_banking_system() -> BankingSystem:
    """Dependency returning the process-wide banking system, created on first use"""
    global _banking_system
    if _banking_system is None:
        _banking_system = BankingSystem()
    return _banking_system


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    system: BankingSystem = Depends(get_banking_system)
) -> Session:
    """Dependency that validates the bearer token and returns the caller's session"""
    if credentials is None:
        raise NotAuthenticatedError("Not authenticated")
    session = decode_token(credentials.credentials)
    if system.account_store.get(session.account_id) is None:
        raise NotAuthenticatedError("Account no longer exists")
    return session


def require_own_account(session: Session, account_id: int) -> None:
    """Reject a request that names an account other than the authenticated one"""
    if account_id != session.account_id:
        raise ForbiddenError(f"Session is not authorized for account {account_id}")


def load_own_account(system: BankingSystem, session: Session, account_id: int) -> Account:
    """The caller's account, after checking the request names it"""
    require_own_account(session, account_id)
    account = system.account_store.get(account_id)
    if account is None:
        raise AccountNotFoundError(f"Account {account_id} does not exist")
    return account
