"""Password hashing and login throttling."""

from __future__ import annotations

import hashlib
import hmac
from collections import deque
from datetime import datetime, timedelta, timezone
from secrets import token_hex
from typing import Deque, Dict, Optional

# scrypt parameters of the stored "<hex>.<salt>" hashes.
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_KEY_LENGTH = 64


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """Return ``<hex digest>.<salt>`` for ``password``."""

    salt = token_hex(16)
    return f"{_derive(password, salt).hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    try:
        hashed, salt = stored.split(".")
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    return hmac.compare_digest(_derive(supplied, salt), expected)


class AuthManager:
    """Track failed logins per username and lock out repeated offenders."""

    def __init__(self, *, max_attempts: int = 5, lockout_minutes: int = 15) -> None:
        self._max_attempts = max_attempts
        self._lockout_window = timedelta(minutes=lockout_minutes)
        self._login_attempts: Dict[str, Deque[datetime]] = {}

    def record_login_attempt(self, username: str, *, success: bool, at: Optional[datetime] = None) -> bool:
        """Record a login attempt and return whether further attempts are allowed."""

        now = at or datetime.now(timezone.utc)
        bucket = self._login_attempts.setdefault(username.lower(), deque())
        self._prune(bucket, now)
        if success:
            bucket.clear()
            return True
        bucket.append(now)
        return len(bucket) < self._max_attempts

    def is_locked(self, username: str, *, at: Optional[datetime] = None) -> bool:
        """Return ``True`` when ``username`` is currently locked out."""

        now = at or datetime.now(timezone.utc)
        bucket = self._login_attempts.get(username.lower())
        if not bucket:
            return False
        self._prune(bucket, now)
        return len(bucket) >= self._max_attempts

    def reset(self) -> None:
        self._login_attempts.clear()

    def _prune(self, bucket: Deque[datetime], now: datetime) -> None:
        while bucket and now - bucket[0] > self._lockout_window:
            bucket.popleft()


__all__ = ["AuthManager", "hash_password", "verify_password"]
