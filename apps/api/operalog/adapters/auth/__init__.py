"""Bearer token codec adapters."""

from .base import ExpiredTokenError, InvalidTokenError, TokenCodec, TokenVerificationError
from .jwt_codec import JwtTokenCodec

__all__ = [
    "ExpiredTokenError",
    "InvalidTokenError",
    "JwtTokenCodec",
    "TokenCodec",
    "TokenVerificationError",
]
