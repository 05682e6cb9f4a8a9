# Overview: Stateless signing and verification of bearer tokens (JWT, HS256).

"""
Bearer Token Codec

Tokens are compact JWTs (header.payload.signature, base64url segments)
carrying the subject user id plus iat/exp/jti claims. Signing uses the
shared JWT_SECRET from app config.

The codec holds no state. A structurally valid, correctly signed, unexpired
token is NOT automatically usable: the caller must also check the token
ledger (see token_ledger.py), which is what makes logout effective.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

import jwt
from flask import current_app

from ..time_utils import from_timestamp, utcnow

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    issued_at: datetime
    expires_at: datetime


def _secret() -> str:
    return current_app.config["JWT_SECRET"]


def issue_token(user_id: int, expires_in: timedelta | None = None) -> tuple[str, TokenClaims]:
    """
    Sign a new token for user_id.

    Returns (token, claims). expires_in defaults to TOKEN_TTL_SECONDS.
    jti makes two tokens issued for the same user in the same second distinct.
    """
    if expires_in is None:
        expires_in = timedelta(seconds=current_app.config["TOKEN_TTL_SECONDS"])

    # JWT timestamps have second resolution
    issued_at = utcnow().replace(microsecond=0)
    expires_at = issued_at + expires_in

    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
        "jti": secrets.token_urlsafe(12),
    }
    token = jwt.encode(payload, _secret(), algorithm=ALGORITHM)
    return token, TokenClaims(user_id=user_id, issued_at=issued_at, expires_at=expires_at)


def verify_token(token: str | None) -> TokenClaims | None:
    """
    Verify signature, structure and expiry.

    Returns TokenClaims, or None for any invalid token. Never raises for bad
    input.
    """
    if not token or not isinstance(token, str):
        return None

    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[ALGORITHM],
            options={"require": ["sub", "iat", "exp"]},
        )
        user_id = int(payload["sub"])
        return TokenClaims(
            user_id=user_id,
            issued_at=from_timestamp(payload["iat"]),
            expires_at=from_timestamp(payload["exp"]),
        )
    except jwt.ExpiredSignatureError:
        current_app.logger.debug("Rejected expired token")
        return None
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        return None


def token_signature(token: str) -> str:
    """Last segment of a token, safe to use in log lines."""
    return token.rsplit(".", 1)[-1]
