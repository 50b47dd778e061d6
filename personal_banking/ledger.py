"""
Ledger Engine

Applies deposits, withdrawals and transfers against the Account Store and
records each one in the Transaction Log. Every operation is all-or-nothing:
balance updates and the transaction record are written in a single unit of
work while the affected accounts are locked.

The engine is the only writer of balances and the only creator of
transactions.
"""

from decimal import Decimal
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Union

from .accounts import Account, AccountStore, AccountType
from .errors import (
    AccountNotFoundError, BankingError, DestinationNotFoundError,
    InsufficientFundsError, InvalidAmountError, SameAccountTransferError,
    SameOwnerTransferRestrictedError, SavingsTransferNotAllowedError,
    SourceNotFoundError, StorageFailureError
)
from .locking import AccountLockManager
from .logging_config import get_logger, log_action
from .money import format_amount, is_positive, to_amount
from .owners import OwnerStore
from .storage import StorageInterface
from .transactions import Transaction, TransactionLog, TransactionType
from .validation import normalize_tax_id

AccountRef = Union[Account, int]


@dataclass(frozen=True)
class StatementLine:
    """A transaction seen from one account's side"""
    transaction: Transaction
    incoming: bool

    @property
    def signed_amount(self) -> Decimal:
        return self.transaction.amount if self.incoming else -self.transaction.amount


class LedgerEngine:
    """
    Validates and applies money movements atomically
    """

    def __init__(
        self,
        storage: StorageInterface,
        account_store: AccountStore,
        transaction_log: TransactionLog,
        owner_store: OwnerStore,
        lock_manager: Optional[AccountLockManager] = None
    ):
        self.storage = storage
        self.account_store = account_store
        self.transaction_log = transaction_log
        self.owner_store = owner_store
        self.lock_manager = lock_manager or AccountLockManager()
        self.logger = get_logger("personal_banking.ledger")

    def deposit(self, account: AccountRef, amount: Union[Decimal, str, int]) -> Transaction:
        """
        Credit an account with money from outside the bank.

        Raises:
            AccountNotFoundError: If the account is not stored
            InvalidAmountError: If the amount is not strictly positive
        """
        account_id = self._account_id(account)
        if account_id is None or self.account_store.get(account_id) is None:
            raise self._reject(AccountNotFoundError(f"Account {account_id} does not exist"),
                               "deposit", account_id)
        amount = self._positive_amount(amount, "deposit", account_id)

        with self.lock_manager.hold(account_id):
            with self._unit_of_work("deposit", account_id):
                current = self._require(account_id, AccountNotFoundError)
                current.balance = current.balance + amount
                self.account_store.save(current)
                transaction = self.transaction_log.append(Transaction(
                    transaction_type=TransactionType.DEPOSIT,
                    amount=amount,
                    receiver_id=account_id
                ))

        self._refresh(account, current)
        self._log_committed(transaction, current.balance)
        return transaction

    def withdraw(self, account: AccountRef, amount: Union[Decimal, str, int]) -> Transaction:
        """
        Debit an account with money leaving the bank.

        Raises:
            AccountNotFoundError: If the account is not stored
            InvalidAmountError: If the amount is not strictly positive
            InsufficientFundsError: If the balance is lower than the amount
        """
        account_id = self._account_id(account)
        if account_id is None or self.account_store.get(account_id) is None:
            raise self._reject(AccountNotFoundError(f"Account {account_id} does not exist"),
                               "withdraw", account_id)
        amount = self._positive_amount(amount, "withdraw", account_id)

        with self.lock_manager.hold(account_id):
            with self._unit_of_work("withdraw", account_id):
                current = self._require(account_id, AccountNotFoundError)
                self._ensure_funds(current, amount, "withdraw")
                current.balance = current.balance - amount
                self.account_store.save(current)
                transaction = self.transaction_log.append(Transaction(
                    transaction_type=TransactionType.WITHDRAWAL,
                    amount=amount,
                    sender_id=account_id
                ))

        self._refresh(account, current)
        self._log_committed(transaction, current.balance)
        return transaction

    def transfer(
        self,
        source: AccountRef,
        destination: Optional[AccountRef],
        amount: Union[Decimal, str, int]
    ) -> Transaction:
        """
        Move money between two distinct accounts.

        Checks run in a fixed order and the first failing one is reported:
        amount, savings source, source funds, missing destination, same
        account, source stored, destination stored, same-owner rule. Only a
        checking to savings transfer is allowed between accounts of the same
        owner.
        """
        source_id = self._account_id(source)
        amount = self._positive_amount(amount, "transfer", source_id)

        if not isinstance(source, Account):
            source = self.account_store.get(source)
            if source is None:
                raise self._reject(SourceNotFoundError(f"Source account {source_id} does not exist"),
                                   "transfer", source_id)
        if destination is not None and not isinstance(destination, Account):
            destination = self.account_store.get(destination)

        if source.is_savings:
            raise self._reject(SavingsTransferNotAllowedError(
                "Savings accounts are not allowed to send transfers"), "transfer", source_id)
        self._ensure_funds(source, amount, "transfer")
        if destination is None:
            raise self._reject(DestinationNotFoundError("Destination account does not exist"),
                               "transfer", source_id)
        if source.same_account(destination):
            raise self._reject(SameAccountTransferError("Cannot transfer to the same account"),
                               "transfer", source_id)

        stored_source = self.account_store.get(source_id) if source_id is not None else None
        if stored_source is None:
            raise self._reject(SourceNotFoundError(f"Source account {source_id} does not exist"),
                               "transfer", source_id)
        destination_id = destination.id
        stored_destination = self.account_store.get(destination_id) if destination_id is not None else None
        if stored_destination is None:
            raise self._reject(DestinationNotFoundError(f"Destination account {destination_id} does not exist"),
                               "transfer", source_id)
        self._ensure_owner_rule(stored_source, stored_destination)

        with self.lock_manager.hold(source_id, destination_id):
            with self._unit_of_work("transfer", source_id):
                debit = self._require(source_id, SourceNotFoundError)
                credit = self._require(destination_id, DestinationNotFoundError)
                # Balance may have moved since validation; recheck under lock
                self._ensure_funds(debit, amount, "transfer")

                debit.balance = debit.balance - amount
                self.account_store.save(debit)
                credit.balance = credit.balance + amount
                self.account_store.save(credit)

                transaction = self.transaction_log.append(Transaction(
                    transaction_type=TransactionType.TRANSFER,
                    amount=amount,
                    sender_id=source_id,
                    receiver_id=destination_id
                ))

        self._refresh(source, debit)
        self._refresh(destination, credit)
        self._log_committed(transaction, debit.balance)
        return transaction

    def transfer_to_tax_id(
        self,
        source: AccountRef,
        tax_id: str,
        amount: Union[Decimal, str, int]
    ) -> Transaction:
        """Transfer to the checking account of the owner with the given tax id (canonical or raw digits)"""
        destination = None
        owner = self.owner_store.find_by_tax_id(normalize_tax_id(tax_id) or tax_id)
        if owner is not None:
            destination = self.account_store.find_by_owner_and_type(owner.id, AccountType.CHECKING)
        return self.transfer(source, destination, amount)

    def get_balance(self, account_id: int) -> Decimal:
        account = self.account_store.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} does not exist")
        return account.balance

    def statement(self, account_id: int) -> List[StatementLine]:
        """
        Every transaction touching the account, oldest first.

        Raises:
            AccountNotFoundError: If the account is not stored
        """
        if self.account_store.get(account_id) is None:
            raise AccountNotFoundError(f"Account {account_id} does not exist")
        return [
            StatementLine(transaction=txn, incoming=txn.receiver_id == account_id)
            for txn in self.transaction_log.find_by_account(account_id)
        ]

    @contextmanager
    def _unit_of_work(self, action: str, account_id: Optional[int]):
        """Run a block in one storage unit of work, wrapping store failures"""
        try:
            with self.storage.atomic():
                yield
        except BankingError as e:
            raise self._reject(e, action, account_id)
        except Exception as e:
            log_action(
                self.logger, "error", f"{action} rolled back: {e}",
                account_id=account_id, action=action,
                extra={"error": type(e).__name__}
            )
            raise StorageFailureError(f"{action} failed and was rolled back: {e}") from e

    def _ensure_owner_rule(self, source: Account, destination: Account) -> None:
        if source.owner_id != destination.owner_id:
            return
        if source.account_type == AccountType.CHECKING and destination.account_type == AccountType.SAVINGS:
            return
        raise self._reject(SameOwnerTransferRestrictedError(
            "Accounts of the same owner may only transfer from checking to savings"
        ), "transfer", source.id)

    def _ensure_funds(self, account: Account, amount: Decimal, action: str) -> None:
        if account.balance < amount:
            raise self._reject(InsufficientFundsError(
                f"Insufficient funds: available {format_amount(account.balance)}, "
                f"requested {format_amount(amount)}"
            ), action, account.id)

    def _positive_amount(self, amount, action: str, account_id: Optional[int]) -> Decimal:
        try:
            value = to_amount(amount)
        except InvalidAmountError as e:
            raise self._reject(e, action, account_id)
        if not is_positive(value):
            raise self._reject(InvalidAmountError(f"{action.capitalize()} amount must be greater than zero"),
                               action, account_id)
        return value

    def _require(self, account_id: int, error_class) -> Account:
        account = self.account_store.get(account_id)
        if account is None:
            raise error_class(f"Account {account_id} does not exist")
        return account

    def _reject(self, error: BankingError, action: str, account_id: Optional[int]) -> BankingError:
        """Log a rejected operation once and hand back the error to raise"""
        if not getattr(error, "_logged", False):
            log_action(
                self.logger, "warning", f"{action} rejected: {error.message}",
                account_id=account_id, action=action,
                extra={"error": error.code.value}
            )
            error._logged = True
        return error

    def _log_committed(self, transaction: Transaction, balance: Decimal) -> None:
        log_action(
            self.logger, "info", f"{transaction.transaction_type.value} committed",
            account_id=transaction.sender_id or transaction.receiver_id,
            action=transaction.transaction_type.value,
            resource=f"transaction:{transaction.id}",
            extra={
                "transaction_id": transaction.id,
                "amount": str(transaction.amount),
                "sender_id": transaction.sender_id,
                "receiver_id": transaction.receiver_id,
                "balance": str(balance)
            }
        )

    @staticmethod
    def _account_id(account: Optional[AccountRef]) -> Optional[int]:
        if isinstance(account, Account):
            return account.id
        return account

    @staticmethod
    def _refresh(reference: Optional[AccountRef], stored: Account) -> None:
        """Bring a caller-held Account up to date with the committed record"""
        if isinstance(reference, Account):
            reference.balance = stored.balance
            reference.updated_at = stored.updated_at
