"""
Password encryption backed by the scrypt KDF from ``cryptography``.
"""

from __future__ import annotations

import base64
import hmac
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SCHEME = "scrypt"


class PasswordService:
    def __init__(self, n: int = 2**14, r: int = 8, p: int = 1, salt_size: int = 16, length: int = 32) -> None:
        self._n = n
        self._r = r
        self._p = p
        self._salt_size = salt_size
        self._length = length

    def encrypt_password(self, password: str) -> str:
        salt = os.urandom(self._salt_size)
        key = self._kdf(salt, self._n, self._r, self._p, self._length).derive(password.encode("utf-8"))
        return "$".join(
            [
                SCHEME,
                str(self._n),
                str(self._r),
                str(self._p),
                base64.urlsafe_b64encode(salt).decode("ascii"),
                base64.urlsafe_b64encode(key).decode("ascii"),
            ]
        )

    def verify_password(self, password: str, encrypted: str) -> bool:
        try:
            scheme, n, r, p, salt_b64, key_b64 = encrypted.split("$")
            salt = base64.urlsafe_b64decode(salt_b64)
            expected = base64.urlsafe_b64decode(key_b64)
            kdf = self._kdf(salt, int(n), int(r), int(p), len(expected))
        except ValueError:
            return False
        if not hmac.compare_digest(scheme, SCHEME):
            return False
        try:
            kdf.verify(password.encode("utf-8"), expected)
        except InvalidKey:
            return False
        return True

    @staticmethod
    def _kdf(salt: bytes, n: int, r: int, p: int, length: int) -> Scrypt:
        return Scrypt(salt=salt, length=length, n=n, r=r, p=p)
