"""Token codec interfaces."""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any

from operalog.schemas.auth import TokenPayload


class TokenVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class InvalidTokenError(TokenVerificationError):
    """Signature mismatch, malformed token or missing claims."""


class ExpiredTokenError(TokenVerificationError):
    """The token signature is valid but its expiration has elapsed."""


class TokenCodec(ABC):
    """Signs and verifies bearer tokens carrying a principal identity."""

    @abstractmethod
    def issue(self, payload: dict[str, Any], ttl: timedelta | None = None) -> str:
        """Sign ``payload`` with an expiration of now + ``ttl``."""

    @abstractmethod
    def verify(self, token: str) -> TokenPayload:
        """Verify token and return its normalized claims."""


__all__ = [
    "ExpiredTokenError",
    "InvalidTokenError",
    "TokenCodec",
    "TokenVerificationError",
]
