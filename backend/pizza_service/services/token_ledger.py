# Overview: Service-layer operations for the token ledger; encapsulates database work.

"""
Token Ledger

The persisted set of currently valid bearer tokens. Membership is the
revocation gate: a token whose row is gone is rejected even though its
signature and expiry still check out.

SECURITY NOTES:
- Tokens hashed with SHA-256 before storage (tokens are high-entropy, a
  fast hash is sufficient)
- Every operation touches a single row (or one DELETE statement) and
  commits immediately, so operations on different tokens never interfere
"""

import hashlib
from datetime import datetime

from ..extensions import db
from ..models import AuthToken
from ..time_utils import utcnow


def hash_token(token: str) -> str:
    """Hex SHA-256 of the token, the ledger primary key."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def record(token: str, user_id: int, expires_at: datetime) -> AuthToken:
    """Insert a freshly issued token."""
    entry = AuthToken(
        token_hash=hash_token(token),
        user_id=user_id,
        created_at=utcnow(),
        expires_at=expires_at,
    )
    db.session.add(entry)
    db.session.commit()
    return entry


def is_active(token: str) -> bool:
    return db.session.get(AuthToken, hash_token(token)) is not None


def revoke(token: str) -> bool:
    """
    Delete a token from the ledger.

    Returns True if a row was removed. Revoking an absent token is not an
    error (logout is idempotent).
    """
    deleted = db.session.query(AuthToken).filter_by(token_hash=hash_token(token)).delete()
    db.session.commit()
    return deleted > 0


def revoke_all_for_user(user_id: int) -> int:
    """Remove every token of a user. Returns count of rows deleted."""
    deleted = db.session.query(AuthToken).filter_by(user_id=user_id).delete()
    db.session.commit()
    return deleted


def purge_expired() -> int:
    """
    Delete ledger rows past their expiry.

    WHY: Expired tokens are already rejected by the codec; this only keeps
    the table small. Run periodically via `flask maintenance purge-tokens`.
    """
    deleted = db.session.query(AuthToken).filter(AuthToken.expires_at < utcnow()).delete()
    db.session.commit()
    return deleted
