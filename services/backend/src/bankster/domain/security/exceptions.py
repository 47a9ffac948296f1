"""Security domain exceptions."""

from bankster.domain.shared.exceptions import DomainException, ErrorCode


class EncryptionError(DomainException):
    """Raised when encryption fails."""

    def __init__(self, message: str = "Encryption failed") -> None:
        super().__init__(message=message, code=ErrorCode.ENCRYPTION_FAILED)


class DecryptionError(DomainException):
    """Raised when decryption fails."""

    def __init__(self, message: str = "Decryption failed") -> None:
        super().__init__(message=message, code=ErrorCode.DECRYPTION_FAILED)
