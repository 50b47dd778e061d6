"""
Banking Error Taxonomy

Every failure the core reports is a BankingError subclass carrying a stable
ErrorCode. All of them are recoverable and reported to the caller.
"""

from enum import Enum


class ErrorCode(Enum):
    """Stable error codes reported across the service boundary"""
    ACCOUNT_NOT_FOUND = "AccountNotFound"
    SOURCE_NOT_FOUND = "SourceNotFound"
    DESTINATION_NOT_FOUND = "DestinationNotFound"
    OWNER_NOT_FOUND = "OwnerNotFound"
    INVALID_AMOUNT = "InvalidAmount"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    SAVINGS_TRANSFER_NOT_ALLOWED = "SavingsTransferNotAllowed"
    SAME_ACCOUNT_TRANSFER = "SameAccountTransfer"
    SAME_OWNER_TRANSFER_RESTRICTED = "SameOwnerTransferRestricted"
    DUPLICATE_IDENTITY = "DuplicateIdentity"
    DUPLICATE_PHONE = "DuplicatePhone"
    DUPLICATE_ACCOUNT_TYPE = "DuplicateAccountType"
    INVALID_CREDENTIAL = "InvalidCredential"
    NOT_AUTHENTICATED = "NotAuthenticated"
    FORBIDDEN = "Forbidden"
    VALIDATION_FAILED = "ValidationFailed"
    BUSY = "Busy"
    STORAGE_FAILURE = "StorageFailure"


class BankingError(Exception):
    """Base exception for all banking core errors."""

    code = ErrorCode.STORAGE_FAILURE
    http_status = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.value)
        self.message = message or self.code.value

    def to_dict(self) -> dict:
        return {"error": self.code.value, "detail": self.message}


class AccountNotFoundError(BankingError):
    """Raised when a referenced account id does not resolve."""
    code = ErrorCode.ACCOUNT_NOT_FOUND
    http_status = 404


class SourceNotFoundError(AccountNotFoundError):
    """Raised when the sending account of a transfer does not exist."""
    code = ErrorCode.SOURCE_NOT_FOUND


class DestinationNotFoundError(AccountNotFoundError):
    """Raised when the receiving account of a transfer does not exist."""
    code = ErrorCode.DESTINATION_NOT_FOUND


class OwnerNotFoundError(BankingError):
    code = ErrorCode.OWNER_NOT_FOUND
    http_status = 404


class InvalidAmountError(BankingError):
    """Raised when an amount is zero, negative or not an exact decimal."""
    code = ErrorCode.INVALID_AMOUNT
    http_status = 422


class InsufficientFundsError(BankingError):
    """Raised when a debit exceeds the account balance."""
    code = ErrorCode.INSUFFICIENT_FUNDS
    http_status = 422


class SavingsTransferNotAllowedError(BankingError):
    """Raised when a savings account tries to send a transfer."""
    code = ErrorCode.SAVINGS_TRANSFER_NOT_ALLOWED
    http_status = 422


class SameAccountTransferError(BankingError):
    code = ErrorCode.SAME_ACCOUNT_TRANSFER
    http_status = 422


class SameOwnerTransferRestrictedError(BankingError):
    """Raised for same-owner transfers other than checking to savings."""
    code = ErrorCode.SAME_OWNER_TRANSFER_RESTRICTED
    http_status = 422


class DuplicateIdentityError(BankingError):
    code = ErrorCode.DUPLICATE_IDENTITY
    http_status = 409


class DuplicatePhoneError(BankingError):
    code = ErrorCode.DUPLICATE_PHONE
    http_status = 409


class DuplicateAccountTypeError(BankingError):
    """Raised when an owner already holds an account of the requested type."""
    code = ErrorCode.DUPLICATE_ACCOUNT_TYPE
    http_status = 409


class InvalidCredentialError(BankingError):
    code = ErrorCode.INVALID_CREDENTIAL
    http_status = 401


class NotAuthenticatedError(BankingError):
    """Raised when a request carries no valid bearer token."""
    code = ErrorCode.NOT_AUTHENTICATED
    http_status = 401


class ForbiddenError(BankingError):
    """Raised when a session acts on an account or owner that is not its own."""
    code = ErrorCode.FORBIDDEN
    http_status = 403


class ValidationError(BankingError):
    """Raised when raw input fails a validation rule."""
    code = ErrorCode.VALIDATION_FAILED
    http_status = 422


class BusyError(BankingError):
    """Raised when account locks cannot be acquired within the timeout."""
    code = ErrorCode.BUSY
    http_status = 409


class StorageFailureError(BankingError):
    """Raised when the underlying store fails; the cause is chained."""
    code = ErrorCode.STORAGE_FAILURE
    http_status = 500
