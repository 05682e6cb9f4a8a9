# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Registers users, verifies credentials, issues tokens and revokes them.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor BCRYPT_ROUNDS, default 12)
- Every issued token is recorded in the token ledger; a token outside the
  ledger is rejected by the guard even if its signature is valid
- Login failures use one message whether the email is unknown or the
  password is wrong, so responses do not reveal which accounts exist
- Updating a user issues a fresh token but does not revoke other sessions
"""

from __future__ import annotations

import bcrypt
from flask import current_app

from ..errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from ..extensions import db
from ..identity import Identity
from ..models import User, UserRole
from ..roles import Admin, Diner, RoleAssignment, to_record
from ..time_utils import utcnow
from . import token_codec, token_ledger
from .ownership import can_act_on_user
from .query_utils import name_pattern, paginate

LOGIN_FAILED_MESSAGE = "unknown user or password"

# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72

_dummy_hash: bytes | None = None


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    WHY: Cost factor comes from config so tests can use a cheap factor while
    production keeps 12.
    """
    salt = bcrypt.gensalt(rounds=current_app.config["BCRYPT_ROUNDS"])
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() prevents timing attacks automatically.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def _burn_password_check(password: str) -> None:
    """Spend one bcrypt comparison so unknown emails take as long as bad passwords."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=current_app.config["BCRYPT_ROUNDS"]))
    try:
        bcrypt.checkpw(password.encode('utf-8'), _dummy_hash)
    except ValueError:
        # Same outcome as a failed comparison
        return


def _require_text(**fields: str | None) -> None:
    missing = [key for key, value in fields.items() if not isinstance(value, str) or not value.strip()]
    if missing:
        raise ValidationError(f"{' and '.join(missing)} required")


def _check_password_length(password: str) -> None:
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")


def _optional_text(**fields) -> None:
    invalid = [key for key, value in fields.items() if value is not None and not isinstance(value, str)]
    if invalid:
        raise ValidationError(f"{' and '.join(invalid)} must be a string")


def _email_taken(email: str, *, exclude_user_id: int | None = None) -> bool:
    query = db.session.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def _issue_for(user: User) -> str:
    """Sign a token for user and record it in the ledger."""
    token, claims = token_codec.issue_token(user.id)
    token_ledger.record(token, user.id, claims.expires_at)
    return token


def get_user_by_id(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def assign_role(user: User, assignment: RoleAssignment) -> UserRole:
    """Attach a role assignment to a user (idempotent). Caller commits."""
    role, object_id = to_record(assignment)
    for existing in user.role_records:
        if existing.role == role and existing.object_id == object_id:
            return existing

    user_role = UserRole(role=role, object_id=object_id)
    user.role_records.append(user_role)
    return user_role


def create_user(
    name: str,
    email: str,
    password: str,
    roles: list[RoleAssignment] | None = None,
) -> User:
    """
    Create a user with a bcrypt password hash.

    Roles default to [Diner()]. Raises ValidationError for blank fields and
    Conflict when the email is already registered.
    """
    _require_text(name=name, email=email, password=password)
    _check_password_length(password)
    email = email.strip()

    if _email_taken(email):
        raise Conflict("email already registered")

    user = User(name=name.strip(), email=email, password_hash=hash_password(password))
    for assignment in roles or [Diner()]:
        assign_role(user, assignment)

    db.session.add(user)
    db.session.commit()
    return user


def register(name: str, email: str, password: str) -> tuple[User, str]:
    """Create a diner account and log it in."""
    user = create_user(name, email, password)
    return user, _issue_for(user)


def authenticate(email: str, password: str) -> User | None:
    """
    Return the user for valid credentials, None otherwise.

    Updates last_login_at on success.
    """
    user = db.session.query(User).filter(User.email == email).first()
    if not user:
        _burn_password_check(password)
        return None

    if not verify_password(password, user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def login(email: str, password: str) -> tuple[User, str]:
    _require_text(email=email, password=password)
    _check_password_length(password)

    user = authenticate(email.strip(), password)
    if not user:
        raise Unauthorized(LOGIN_FAILED_MESSAGE)

    return user, _issue_for(user)


def logout(token: str) -> bool:
    """Revoke token. Idempotent; returns whether a ledger row was removed."""
    return token_ledger.revoke(token)


def _load_target(actor: Identity, user_id: int) -> User:
    if not can_act_on_user(actor, user_id):
        raise Forbidden("unauthorized")

    user = get_user_by_id(user_id)
    if not user:
        raise NotFound("user not found")
    return user


def get_user(actor: Identity, user_id: int) -> User:
    return _load_target(actor, user_id)


def update_user(
    actor: Identity,
    user_id: int,
    *,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> tuple[User, str]:
    """
    Update a user's profile and issue a fresh token for them.

    Only the user themself or a global admin may update. Blank fields are
    left unchanged. Existing tokens stay valid.
    """
    user = _load_target(actor, user_id)
    _optional_text(name=name, email=email, password=password)
    if password:
        _check_password_length(password)

    email = email.strip() if email else None
    if email and email != user.email and _email_taken(email, exclude_user_id=user.id):
        raise Conflict("email already registered")

    if name and name.strip():
        user.name = name.strip()

    if email:
        user.email = email

    if password:
        user.password_hash = hash_password(password)

    db.session.commit()
    return user, _issue_for(user)


def delete_user(actor: Identity, user_id: int) -> None:
    """Delete a user, their role assignments and all their tokens."""
    user = _load_target(actor, user_id)

    token_ledger.revoke_all_for_user(user.id)
    db.session.delete(user)
    db.session.commit()


def list_users(
    actor: Identity,
    page: int | None = None,
    limit: int | None = None,
    name: str | None = None,
) -> tuple[list[User], bool]:
    """Admin-only paged user listing with a '*' wildcard name filter."""
    if not actor.has_role(Admin):
        raise Forbidden("unauthorized")

    query = (
        db.session.query(User)
        .filter(User.name.like(name_pattern(name), escape="\\"))
        .order_by(User.id.asc())
    )
    return paginate(query, page, limit)
