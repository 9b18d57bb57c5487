"""
Privacy verification codes and rate limiting.

Email verification for privacy requests (data export, deletion): a short
numeric code is issued per email, expires after a fixed window and is
invalidated after too many attempts. Requests per client are rate limited.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

import config.settings as settings
from clarus.privacy.ttl_cache import TTLCache

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class PendingCode:
    code: str
    attempts: int = 0


class VerificationCodeManager:
    """
    Issues and checks single-use verification codes.

    Args:
        cache: Backing TTL cache
        code_length: Number of digits per code
        expiry_seconds: Lifetime of an issued code
        max_attempts: Attempts allowed before the code is invalidated
    """

    def __init__(
        self,
        cache: TTLCache,
        code_length: int = settings.VERIFICATION_CODE_LENGTH,
        expiry_seconds: float = settings.VERIFICATION_CODE_EXPIRY_SECONDS,
        max_attempts: int = settings.VERIFICATION_MAX_ATTEMPTS
    ):
        if code_length < 1:
            raise ValueError(f"Invalid code_length: {code_length}")
        self.cache = cache
        self.code_length = code_length
        self.expiry_seconds = expiry_seconds
        self.max_attempts = max_attempts

    def generate_code(self) -> str:
        """Random numeric code with no leading zero."""
        low = 10 ** (self.code_length - 1)
        return str(low + secrets.randbelow(9 * low))

    def issue(self, email: str) -> str:
        """Create a new code for email, replacing any pending one."""
        key = normalize_email(email)
        code = self.generate_code()
        self.cache.set(key, PendingCode(code=code), self.expiry_seconds)
        logger.info(f"Issued verification code for {key}")
        return code

    def verify(self, email: str, code: str) -> bool:
        """
        Check code for email.

        A match consumes the code. Each check counts as an attempt; once
        max_attempts is reached the code is discarded.
        """
        key = normalize_email(email)
        pending: Optional[PendingCode] = self.cache.get(key)

        if pending is None:
            return False

        if pending.attempts >= self.max_attempts:
            logger.warning(f"Too many verification attempts for {key}, code invalidated")
            self.cache.delete(key)
            return False

        pending = PendingCode(code=pending.code, attempts=pending.attempts + 1)
        self.cache.update(key, pending)

        if not secrets.compare_digest(pending.code.encode(), str(code).encode()):
            return False

        self.cache.delete(key)
        logger.info(f"Verified email {key}")
        return True


@dataclass(frozen=True)
class RateWindow:
    count: int


class RateLimiter:
    """
    Fixed-window request limiter keyed by client (e.g. IP address).

    Args:
        cache: Backing TTL cache; entry expiry marks the window reset
        window_seconds: Window length
        max_requests: Requests allowed per window
    """

    def __init__(
        self,
        cache: TTLCache,
        window_seconds: float = settings.RATE_LIMIT_WINDOW_SECONDS,
        max_requests: int = settings.RATE_LIMIT_MAX_REQUESTS
    ):
        self.cache = cache
        self.window_seconds = window_seconds
        self.max_requests = max_requests

    def check(self, key: str) -> bool:
        """Record a request for key; False if the window is exhausted."""
        window: Optional[RateWindow] = self.cache.get(key)

        if window is None:
            self.cache.set(key, RateWindow(count=1), self.window_seconds)
            return True

        if window.count >= self.max_requests:
            logger.warning(f"Rate limit exceeded for {key}")
            return False

        self.cache.update(key, RateWindow(count=window.count + 1))
        return True
