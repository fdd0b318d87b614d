"""Symmetric encryption for Pushbullet tokens kept in the forum store."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

ENCRYPTED_PREFIX = "fernet:"


class TokenCipherService:
    """Encrypt and decrypt tokens using a Fernet key derived from a secret."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    @staticmethod
    def is_encrypted(value: str) -> bool:
        return value.startswith(ENCRYPTED_PREFIX)

    def encrypt(self, plaintext: str) -> str:
        """Return the prefixed ciphertext for ``plaintext``."""
        token = self._fernet.encrypt(plaintext.encode("utf-8"))
        return ENCRYPTED_PREFIX + token.decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a value produced by :meth:`encrypt`."""
        if not self.is_encrypted(ciphertext):
            raise ValueError("Value was not produced by this cipher.")
        raw = ciphertext[len(ENCRYPTED_PREFIX):]
        try:
            plaintext = self._fernet.decrypt(raw.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError(
                "Failed to decrypt token; invalid ciphertext or rotated secret."
            ) from exc
        return plaintext.decode("utf-8")


__all__ = ["ENCRYPTED_PREFIX", "TokenCipherService"]
