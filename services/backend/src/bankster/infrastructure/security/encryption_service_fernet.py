"""Fernet encryption service implementation."""

from cryptography.fernet import Fernet, InvalidToken

from bankster.domain.security.exceptions import DecryptionError, EncryptionError
from bankster.domain.security.services import EncryptionService


class FernetEncryptionService(EncryptionService):
    """Fernet-based encryption of opaque blobs."""

    def __init__(self, encryption_key: bytes | str):
        if isinstance(encryption_key, str):
            encryption_key = encryption_key.encode("ascii")
        try:
            self._fernet = Fernet(encryption_key)
        except (ValueError, TypeError) as e:
            msg = f"Invalid Fernet encryption key: {e}"
            raise ValueError(msg) from e

    def encrypt(self, plaintext: bytes) -> bytes:
        try:
            return self._fernet.encrypt(plaintext)
        except Exception as e:
            msg = f"Encryption failed: {e}"
            raise EncryptionError(msg) from e

    def decrypt(self, ciphertext: bytes) -> bytes:
        try:
            return self._fernet.decrypt(ciphertext)
        except InvalidToken as e:
            msg = "Decryption failed: Invalid token (wrong key or tampered data)"
            raise DecryptionError(msg) from e
        except Exception as e:
            msg = f"Decryption failed: {e}"
            raise DecryptionError(msg) from e

    @staticmethod
    def generate_key() -> bytes:
        return Fernet.generate_key()
