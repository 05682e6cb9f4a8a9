# Overview: Request authentication decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .identity import Identity
from .models import User
from .extensions import db
from .services import audit_service, token_codec, token_ledger

UNAUTHORIZED_BODY = {"message": "unauthorized"}


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def _reject(event_type: str, reason: str, user_id: int | None = None):
    """
    Record why a credential was rejected, then answer with the one 401 shape.

    Clients cannot tell a missing token from a forged, expired or revoked one.
    """
    current_app.logger.warning("Rejected request %s %s: %s", request.method, request.path, reason)
    audit_service.log_security_event(
        user_id=user_id,
        event_type=event_type,
        success=False,
        resource=request.path,
        action=request.method,
        reason=reason,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    return jsonify(UNAUTHORIZED_BODY), 401


def resolve_identity(token: str) -> tuple[Identity | None, str, str]:
    """
    Resolve a bearer token to an Identity.

    Returns (identity, event_type, reason); identity is None when rejected.
    Order: signature/expiry -> ledger membership -> user still exists.
    """
    claims = token_codec.verify_token(token)
    if claims is None:
        return None, "AUTH_INVALID", "Invalid signature, malformed or expired token"

    if not token_ledger.is_active(token):
        return None, "AUTH_REVOKED", f"Token {token_codec.token_signature(token)[:8]}... not in ledger"

    user = db.session.get(User, claims.user_id)
    if not user:
        return None, "AUTH_USER_MISSING", f"User {claims.user_id} no longer exists"

    return Identity.from_user(user), "", ""


def require_auth(f):
    """
    Require a live bearer token.

    Sets the following Flask g attributes:
    - g.identity: the resolved Identity (user id, name, email, roles)
    - g.token: the raw bearer token (used by logout)

    Returns 401 {"message": "unauthorized"} if:
    - No Authorization header
    - Invalid signature, malformed or expired token
    - Token revoked (absent from the ledger)
    - User deleted since the token was issued
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return _reject("AUTH_MISSING", "No bearer token presented")

        identity, event_type, reason = resolve_identity(token)
        if identity is None:
            return _reject(event_type, reason)

        g.identity = identity
        g.token = token

        return f(*args, **kwargs)

    return decorated_function


def optional_auth(f):
    """
    Attach g.identity when a live bearer token is presented; never reject.

    Used by public routes whose output is richer for admins.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.identity = None
        token = _bearer_token()
        if token:
            identity, _, _ = resolve_identity(token)
            g.identity = identity
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the authenticated identity to hold the global Admin role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = getattr(g, "identity", None)
        if identity is None:
            return jsonify(UNAUTHORIZED_BODY), 401
        if not identity.is_admin:
            audit_service.log_security_event(
                user_id=identity.id,
                event_type="PERMISSION_DENIED",
                success=False,
                resource=request.path,
                action=request.method,
                reason="Admin role required",
                ip_address=request.remote_addr,
                user_agent=request.headers.get("User-Agent"),
            )
            return jsonify({"message": "unauthorized"}), 403
        return f(*args, **kwargs)
    return decorated_function
