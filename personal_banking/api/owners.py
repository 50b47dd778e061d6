"""
Registration and login endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_banking_system, get_current_session
from .schemas import LoginRequest, OpenAccountRequest, RegisterRequest
from ..auth import Session
from ..config import get_config
from ..errors import ForbiddenError
from ..system import BankingSystem
from ..tokens import issue_token
from ..validation import require


router = APIRouter()


@router.post("/owners", status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Register a new owner together with its first account"""
    require("tax_id", request.tax_id)
    require("phone", request.phone)
    require("name", request.name)
    require("password", request.password)

    account = system.auth.register(
        tax_id=request.tax_id,
        phone=request.phone,
        name=request.name,
        account_type=request.account_type,
        password=request.password
    )
    return {
        "owner_id": account.owner_id,
        "account_id": account.id,
        "account_type": account.account_type.value,
        "message": "Account opened successfully"
    }


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
def open_account(
    request: OpenAccountRequest,
    session: Session = Depends(get_current_session),
    system: BankingSystem = Depends(get_banking_system)
):
    """Open an additional account for an existing owner"""
    if request.owner_id != session.owner_id:
        raise ForbiddenError(f"Session is not authorized for owner {request.owner_id}")
    require("password", request.password)

    account = system.auth.open_account(request.owner_id, request.account_type, request.password)
    return {
        "owner_id": account.owner_id,
        "account_id": account.id,
        "account_type": account.account_type.value,
        "message": "Account opened successfully"
    }


@router.post("/auth/login")
def login(
    request: LoginRequest,
    system: BankingSystem = Depends(get_banking_system)
):
    """Verify an account credential and issue a bearer token"""
    session = system.auth.authenticate(request.account_id, request.password)
    return {
        "access_token": issue_token(session),
        "token_type": "bearer",
        "expires_in": get_config().jwt_expiry_hours * 3600,
        "account_id": session.account_id,
        "owner_id": session.owner_id,
        "authenticated_at": session.authenticated_at.isoformat()
    }
