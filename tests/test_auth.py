"""
Tests for registration, authentication and credential hashing
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from personal_banking.accounts import AccountType
from personal_banking.auth import Session
from personal_banking.errors import (
    AccountNotFoundError, DuplicateAccountTypeError, DuplicateIdentityError,
    DuplicatePhoneError, InvalidCredentialError, NotAuthenticatedError, OwnerNotFoundError,
    ValidationError
)
from personal_banking.config import BankConfig
from personal_banking.security import hash_password, verify_password
from personal_banking.tokens import decode_token, issue_token


TAX_ID = "123.456.789-09"
PHONE = "+55 (11) 91234-5678"


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed.startswith("scrypt$")
        assert "secret123" not in hashed
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong1234", hashed)

    def test_salts_differ(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_fixed_salt_is_deterministic(self):
        assert hash_password("secret123", salt="abc") == hash_password("secret123", salt="abc")

    @pytest.mark.parametrize("stored", ["", "plain", "bcrypt$1$2$3$salt$digest", "scrypt$x$8$1$salt$digest"])
    def test_malformed_hash_never_verifies(self, stored):
        assert not verify_password("secret123", stored)


class TestRegister:

    def test_register_creates_owner_and_account(self, system):
        account = system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        assert account.id is not None
        assert account.balance == Decimal('0.00')
        assert account.account_type == AccountType.CHECKING
        assert account.password_hash != "secret123"

        owner = system.owner_store.get(account.owner_id)
        assert owner.tax_id == TAX_ID
        assert owner.phone == PHONE
        assert owner.name == "Maria Silva"

    def test_register_normalizes_raw_input(self, system):
        account = system.auth.register("12345678909", "+5511912345678", "Maria Silva", "savings", "secret123")

        owner = system.owner_store.get(account.owner_id)
        assert owner.tax_id == TAX_ID
        assert owner.phone == PHONE
        assert account.account_type == AccountType.SAVINGS

    def test_duplicate_tax_id(self, system):
        system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        with pytest.raises(DuplicateIdentityError):
            system.auth.register("12345678909", "+55 (21) 99999-0000", "Joao Souza",
                                 AccountType.CHECKING, "secret123")

        assert len(system.owner_store.list_all()) == 1
        assert len(system.account_store.list_all()) == 1

    def test_duplicate_phone(self, system):
        system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        with pytest.raises(DuplicatePhoneError):
            system.auth.register("987.654.321-00", PHONE, "Joao Souza", AccountType.CHECKING, "secret123")

    def test_tax_id_checked_before_phone(self, system):
        system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        with pytest.raises(DuplicateIdentityError):
            system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.SAVINGS, "secret123")

    @pytest.mark.parametrize("tax_id,phone", [
        ("1234", PHONE),
        (TAX_ID, "12345"),
    ])
    def test_unnormalizable_input(self, system, tax_id, phone):
        with pytest.raises(ValidationError):
            system.auth.register(tax_id, phone, "Maria Silva", AccountType.CHECKING, "secret123")

        assert system.owner_store.list_all() == []

    def test_failed_account_save_leaves_no_owner(self, system, monkeypatch):
        def failing_save(account):
            raise RuntimeError("disk full")

        monkeypatch.setattr(system.account_store, "save", failing_save)

        with pytest.raises(RuntimeError):
            system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        assert system.owner_store.list_all() == []


class TestOpenAccount:

    def test_open_additional_account(self, system):
        checking = system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        savings = system.auth.open_account(checking.owner_id, AccountType.SAVINGS, "other456")

        assert savings.owner_id == checking.owner_id
        assert savings.id != checking.id
        assert len(system.account_store.find_by_owner(checking.owner_id)) == 2

    def test_one_account_per_classification(self, system):
        checking = system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        with pytest.raises(DuplicateAccountTypeError):
            system.auth.open_account(checking.owner_id, "checking", "secret123")

    def test_unknown_owner(self, system):
        with pytest.raises(OwnerNotFoundError):
            system.auth.open_account(404, AccountType.BUSINESS, "secret123")


class TestAuthenticate:

    def test_authenticate_returns_session(self, system):
        account = system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        session = system.auth.authenticate(account.id, "secret123")

        assert isinstance(session, Session)
        assert session.account_id == account.id
        assert session.owner_id == account.owner_id
        assert session.authenticated_at is not None

    def test_each_account_has_its_own_credential(self, system):
        checking = system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")
        savings = system.auth.open_account(checking.owner_id, AccountType.SAVINGS, "other456")

        assert system.auth.authenticate(savings.id, "other456").account_id == savings.id
        with pytest.raises(InvalidCredentialError):
            system.auth.authenticate(savings.id, "secret123")

    def test_wrong_password(self, system):
        account = system.auth.register(TAX_ID, PHONE, "Maria Silva", AccountType.CHECKING, "secret123")

        with pytest.raises(InvalidCredentialError, match="Incorrect password"):
            system.auth.authenticate(account.id, "secret124")

    def test_unknown_account(self, system):
        with pytest.raises(AccountNotFoundError, match="Account not found"):
            system.auth.authenticate(404, "secret123")


class TestSessionTokens:

    def setup_method(self):
        self.config = BankConfig(jwt_secret="test-secret-that-is-long-enough-for-hs256")
        self.session = Session(account_id=7, owner_id=3,
                               authenticated_at=datetime.now(timezone.utc).replace(microsecond=0))

    def test_token_round_trips_session(self):
        token = issue_token(self.session, self.config)

        assert decode_token(token, self.config) == self.session

    def test_token_signed_with_other_secret_rejected(self):
        token = issue_token(self.session, self.config)
        other = BankConfig(jwt_secret="another-secret-that-is-long-enough-too")

        with pytest.raises(NotAuthenticatedError, match="Invalid token"):
            decode_token(token, other)

    def test_expired_token_rejected(self):
        old = Session(account_id=7, owner_id=3,
                      authenticated_at=datetime.now(timezone.utc) - timedelta(hours=25))
        token = issue_token(old, self.config)

        with pytest.raises(NotAuthenticatedError, match="Token expired"):
            decode_token(token, self.config)

    def test_garbage_rejected(self):
        with pytest.raises(NotAuthenticatedError):
            decode_token("abc.def.ghi", self.config)
