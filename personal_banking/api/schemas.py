"""
Pydantic schemas for API requests and responses

Amounts travel as decimal strings so no value ever passes through a float.
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from ..ledger import StatementLine
from ..transactions import Transaction


AccountTypeName = Literal["checking", "savings", "business"]


class RegisterRequest(BaseModel):
    tax_id: str = Field(..., description="Tax identity number (000.000.000-00 or 11 digits)")
    phone: str = Field(..., description="Phone number (+55 (XX) 9XXXX-XXXX or +55XX9XXXXXXXX)")
    name: str
    account_type: AccountTypeName
    password: str


class OpenAccountRequest(BaseModel):
    owner_id: int
    account_type: AccountTypeName
    password: str


class LoginRequest(BaseModel):
    account_id: int
    password: str


class DepositRequest(BaseModel):
    account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class WithdrawRequest(BaseModel):
    account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class TransferRequest(BaseModel):
    from_account_id: int
    to_account_id: Optional[int] = None
    to_tax_id: Optional[str] = Field(None, description="Send to the checking account of this owner")
    amount: str = Field(..., description="Decimal amount as string")


class TransactionResponse(BaseModel):
    transaction_id: int
    transaction_type: str
    amount: str
    sender_id: Optional[int] = None
    receiver_id: Optional[int] = None
    created_at: datetime
    balance: str

    @classmethod
    def from_transaction(cls, transaction: Transaction, balance) -> 'TransactionResponse':
        return cls(
            transaction_id=transaction.id,
            transaction_type=transaction.transaction_type.value,
            amount=str(transaction.amount),
            sender_id=transaction.sender_id,
            receiver_id=transaction.receiver_id,
            created_at=transaction.created_at,
            balance=str(balance)
        )


class StatementLineModel(BaseModel):
    transaction_id: int
    transaction_type: str
    direction: Literal["in", "out"]
    amount: str
    counterparty_id: Optional[int] = None
    created_at: datetime

    @classmethod
    def from_line(cls, line: StatementLine) -> 'StatementLineModel':
        txn = line.transaction
        return cls(
            transaction_id=txn.id,
            transaction_type=txn.transaction_type.value,
            direction="in" if line.incoming else "out",
            amount=str(txn.amount),
            counterparty_id=txn.sender_id if line.incoming else txn.receiver_id,
            created_at=txn.created_at
        )


class StatementResponse(BaseModel):
    account_id: int
    balance: str
    lines: List[StatementLineModel]
