# medtrack/services/token_service.py
"""
Signed, time-bounded access and refresh tokens.

Claims are integrity-protected only (HS256 by default), never encrypted, so
nothing beyond the subject id and role is embedded. Access and refresh tokens
use different secrets and carry a ``type`` claim; a token presented to the
wrong verifier fails as malformed.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Tuple

import jwt

from ..config import AuthConfig

ACCESS = "access"
REFRESH = "refresh"


class TokenFailure(str, Enum):
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenClaims:
    sub: str
    type: str
    role: Optional[str] = None

    @property
    def user_id(self) -> Optional[int]:
        try:
            return int(self.sub)
        except (TypeError, ValueError):
            return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    def __init__(self, config: AuthConfig, clock: Callable[[], datetime] = _utcnow):
        self.config = config
        self._clock = clock

    # ---------- issue ----------
    def issue_access(self, user_id, role: str) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "role": role,
            "type": ACCESS,
            "iat": now,
            "exp": now + self.config.access_ttl,
        }
        return jwt.encode(payload, self.config.access_secret, algorithm=self.config.algorithm)

    def issue_refresh(self, user_id) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "type": REFRESH,
            # two refresh tokens for one user must never be byte-identical
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self.config.refresh_ttl,
        }
        return jwt.encode(payload, self.config.refresh_secret, algorithm=self.config.algorithm)

    # ---------- verify ----------
    def verify_access(self, token: str) -> Tuple[Optional[TokenClaims], Optional[TokenFailure]]:
        return self._verify(token, self.config.access_secret, ACCESS)

    def verify_refresh(self, token: str) -> Tuple[Optional[TokenClaims], Optional[TokenFailure]]:
        return self._verify(token, self.config.refresh_secret, REFRESH)

    def _verify(self, token, secret, expected_type):
        if not token or not isinstance(token, str):
            return None, TokenFailure.MALFORMED
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.config.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            return None, TokenFailure.EXPIRED
        except jwt.InvalidTokenError:
            return None, TokenFailure.MALFORMED

        if payload.get("type") != expected_type:
            return None, TokenFailure.MALFORMED
        claims = TokenClaims(sub=payload["sub"], type=payload["type"], role=payload.get("role"))
        if claims.user_id is None:
            return None, TokenFailure.MALFORMED
        if expected_type == ACCESS and not claims.role:
            return None, TokenFailure.MALFORMED
        return claims, None
