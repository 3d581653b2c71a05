# ------- medtrack/utils/decorators.py -------
from dataclasses import dataclass
from functools import wraps

from flask import g, request

from ..extensions import services
from ..services.token_service import TokenFailure
from .api import failure_response
from .errors import ErrorKind, Failure, forbidden, unauthenticated

NO_TOKEN = "Access denied. No token provided."
TOKEN_EXPIRED = "Token expired"
TOKEN_INVALID = "Invalid token"
USER_INACTIVE = "Invalid token or user is deactivated"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller. Never carries the password hash or refresh token.

    ``role`` comes from the access token, not the store. After an admin
    changes a user's role, requests keep being authorized with the old role
    until the token expires or is refreshed, so role data is at most one
    access-token lifetime stale. The active flag is read from the store on
    every request.
    """
    id: int
    name: str
    email: str
    role: str
    is_active: bool = True

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "isActive": self.is_active,
        }


def _bearer_token(header):
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


def authenticate(authorization_header):
    """Authentication gate. Returns (Identity, failure)."""
    token = _bearer_token(authorization_header)
    if token is None:
        return None, unauthenticated(NO_TOKEN)

    svc = services()
    claims, problem = svc.tokens.verify_access(token)
    if problem is TokenFailure.EXPIRED:
        return None, Failure(ErrorKind.TOKEN_EXPIRED, TOKEN_EXPIRED)
    if problem is not None:
        return None, Failure(ErrorKind.TOKEN_INVALID, TOKEN_INVALID)

    user = svc.store.get(claims.user_id)
    if user is None or not user.is_active:
        return None, unauthenticated(USER_INACTIVE)

    return Identity(
        id=user.id,
        name=user.name,
        email=user.email,
        role=claims.role,
        is_active=user.is_active,
    ), None


def authorize(identity, roles):
    """Authorization gate. Returns a failure or None."""
    if identity is None:
        return unauthenticated("User not authenticated")
    if identity.role not in roles:
        return forbidden()
    return None


def current_identity():
    return g.get("identity")


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        identity, failure = authenticate(request.headers.get("Authorization"))
        if failure:
            return failure_response(failure)
        g.identity = identity
        return fn(*args, **kwargs)
    return wrapper


def role_required(*roles, message: str | None = None):
    """Authenticate, then require the caller's role to be one of ``roles``."""
    allowed = frozenset(roles)

    def decorator(fn):
        @wraps(fn)
        @login_required
        def wrapper(*args, **kwargs):
            failure = authorize(current_identity(), allowed)
            if failure:
                if message and failure.kind is ErrorKind.FORBIDDEN:
                    failure = forbidden(message)
                return failure_response(failure)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
