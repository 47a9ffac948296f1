"""Encryption service interface for the Security domain."""

from abc import ABC, abstractmethod


class EncryptionService(ABC):
    """Domain service interface for encrypting data at rest."""

    @abstractmethod
    def encrypt(self, plaintext: bytes) -> bytes:
        """
        Encrypt bytes.

        Raises
        ------
        EncryptionError
            If encryption fails
        """

    @abstractmethod
    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Decrypt bytes produced by encrypt().

        Raises
        ------
        DecryptionError
            If decryption fails (wrong key, tampered data)
        """
