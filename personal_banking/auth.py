"""
Registration and Authentication

Opens accounts for new and existing owners and verifies credentials.
Authentication returns an explicit Session value; nothing here tracks a
"current" account.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

from .accounts import Account, AccountStore, AccountType
from .errors import (
    AccountNotFoundError, DuplicateAccountTypeError, DuplicateIdentityError,
    DuplicatePhoneError, InvalidCredentialError, OwnerNotFoundError,
    ValidationError
)
from .logging_config import get_logger, log_action
from .owners import Owner, OwnerStore
from .security import hash_password, verify_password
from .storage import StorageInterface
from .validation import normalize_phone, normalize_tax_id


@dataclass(frozen=True)
class Session:
    """Authenticated context passed explicitly to callers"""
    account_id: int
    owner_id: int
    authenticated_at: datetime


class AuthService:
    """
    Registers owners with their accounts and authenticates account holders
    """

    def __init__(self, storage: StorageInterface, owner_store: OwnerStore, account_store: AccountStore):
        self.storage = storage
        self.owner_store = owner_store
        self.account_store = account_store
        self.logger = get_logger("personal_banking.auth")

    def register(
        self,
        tax_id: str,
        phone: str,
        name: str,
        account_type: Union[AccountType, str],
        password: str
    ) -> Account:
        """
        Create a new owner together with its first account.

        Args:
            tax_id: Tax identity number, canonical or raw digits
            phone: Phone number, canonical or raw digits
            name: Display name
            account_type: Classification of the first account
            password: Plaintext credential, hashed before storage

        Returns:
            The persisted Account with a zero balance

        Raises:
            ValidationError: If tax id or phone cannot be normalized
            DuplicateIdentityError: If an owner already uses the tax id
            DuplicatePhoneError: If an owner already uses the phone number
        """
        canonical_tax_id = normalize_tax_id(tax_id)
        if canonical_tax_id is None:
            raise ValidationError("Invalid tax id format.")
        canonical_phone = normalize_phone(phone)
        if canonical_phone is None:
            raise ValidationError("Invalid phone number format.")
        account_type = AccountType(account_type)
        password_hash = hash_password(password)

        with self.storage.atomic():
            if self.owner_store.find_by_tax_id(canonical_tax_id) is not None:
                self._log_rejected("register", DuplicateIdentityError.code.value)
                raise DuplicateIdentityError(
                    "An account has already been registered with the provided tax id."
                )
            if self.owner_store.find_by_phone(canonical_phone) is not None:
                self._log_rejected("register", DuplicatePhoneError.code.value)
                raise DuplicatePhoneError(
                    "An account has already been registered with the provided phone number."
                )

            owner = self.owner_store.save(Owner(
                tax_id=canonical_tax_id,
                phone=canonical_phone,
                name=name.strip()
            ))
            account = self.account_store.save(Account(
                owner_id=owner.id,
                account_type=account_type,
                password_hash=password_hash
            ))

        log_action(
            self.logger, "info", "Owner registered",
            account_id=account.id, action="register", resource=f"owner:{owner.id}",
            extra={"owner_id": owner.id, "account_type": account_type.value}
        )
        return account

    def open_account(self, owner_id: int, account_type: Union[AccountType, str], password: str) -> Account:
        """
        Open an additional account for an existing owner.

        Raises:
            OwnerNotFoundError: If the owner does not exist
            DuplicateAccountTypeError: If the owner already holds that classification
        """
        account_type = AccountType(account_type)
        password_hash = hash_password(password)

        with self.storage.atomic():
            if self.owner_store.get(owner_id) is None:
                raise OwnerNotFoundError(f"Owner {owner_id} does not exist")
            if self.account_store.find_by_owner_and_type(owner_id, account_type) is not None:
                self._log_rejected("open_account", DuplicateAccountTypeError.code.value)
                raise DuplicateAccountTypeError(
                    f"Owner {owner_id} already holds a {account_type.value} account"
                )
            account = self.account_store.save(Account(
                owner_id=owner_id,
                account_type=account_type,
                password_hash=password_hash
            ))

        log_action(
            self.logger, "info", "Account opened",
            account_id=account.id, action="open_account", resource=f"owner:{owner_id}",
            extra={"account_type": account_type.value}
        )
        return account

    def authenticate(self, account_id: int, password: str) -> Session:
        """
        Verify a credential against an account's stored hash.

        Raises:
            AccountNotFoundError: If no such account exists
            InvalidCredentialError: If the password does not match
        """
        account = self.account_store.get(account_id)
        if account is None:
            self._log_rejected("login", AccountNotFoundError.code.value, account_id)
            raise AccountNotFoundError("Account not found.")

        if not verify_password(password, account.password_hash):
            self._log_rejected("login", InvalidCredentialError.code.value, account_id)
            raise InvalidCredentialError("Incorrect password.")

        log_action(self.logger, "info", "Login succeeded", account_id=account_id, action="login")
        return Session(
            account_id=account.id,
            owner_id=account.owner_id,
            authenticated_at=datetime.now(timezone.utc)
        )

    def _log_rejected(self, action: str, code: str, account_id: int = None) -> None:
        log_action(
            self.logger, "warning", f"{action} rejected",
            account_id=account_id, action=action, extra={"error": code}
        )
