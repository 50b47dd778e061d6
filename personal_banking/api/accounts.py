"""
Account query endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_banking_system, get_current_session, load_own_account
from .schemas import StatementLineModel, StatementResponse
from ..auth import Session
from ..system import BankingSystem


router = APIRouter()


@router.get("/{account_id}")
def get_account(
    account_id: int,
    session: Session = Depends(get_current_session),
    system: BankingSystem = Depends(get_banking_system)
):
    """Get account classification and balance"""
    account = load_own_account(system, session, account_id)
    return {
        "account_id": account.id,
        "owner_id": account.owner_id,
        "account_type": account.account_type.value,
        "balance": str(account.balance)
    }


@router.get("/{account_id}/statement", response_model=StatementResponse)
def get_statement(
    account_id: int,
    session: Session = Depends(get_current_session),
    system: BankingSystem = Depends(get_banking_system)
):
    """Every transaction touching the account, oldest first"""
    account = load_own_account(system, session, account_id)
    lines = system.ledger.statement(account_id)
    return StatementResponse(
        account_id=account_id,
        balance=str(account.balance),
        lines=[StatementLineModel.from_line(line) for line in lines]
    )
