"""
Deposit, withdraw and transfer endpoints

Each operation acts on the authenticated account only. The balance in the
response is the one the ledger committed, carried back on the caller's
Account object.
"""

from fastapi import APIRouter, Depends

from .dependencies import get_banking_system, get_current_session, load_own_account
from .schemas import DepositRequest, TransactionResponse, TransferRequest, WithdrawRequest
from ..auth import Session
from ..system import BankingSystem


router = APIRouter()


@router.post("/deposit", response_model=TransactionResponse)
def deposit(
    request: DepositRequest,
    session: Session = Depends(get_current_session),
    system: BankingSystem = Depends(get_banking_system)
):
    """Make a deposit"""
    account = load_own_account(system, session, request.account_id)
    transaction = system.ledger.deposit(account, request.amount)
    return TransactionResponse.from_transaction(transaction, account.balance)


@router.post("/withdraw", response_model=TransactionResponse)
def withdraw(
    request: WithdrawRequest,
    session: Session = Depends(get_current_session),
    system: BankingSystem = Depends(get_banking_system)
):
    """Make a withdrawal"""
    account = load_own_account(system, session, request.account_id)
    transaction = system.ledger.withdraw(account, request.amount)
    return TransactionResponse.from_transaction(transaction, account.balance)


@router.post("/transfer", response_model=TransactionResponse)
def transfer(
    request: TransferRequest,
    session: Session = Depends(get_current_session),
    system: BankingSystem = Depends(get_banking_system)
):
    """Make a transfer to an account id or to the checking account of a tax id"""
    source = load_own_account(system, session, request.from_account_id)
    if request.to_tax_id is not None:
        transaction = system.ledger.transfer_to_tax_id(source, request.to_tax_id, request.amount)
    else:
        transaction = system.ledger.transfer(source, request.to_account_id, request.amount)
    return TransactionResponse.from_transaction(transaction, source.balance)
