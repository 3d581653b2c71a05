# medtrack/services/session_service.py
from dataclasses import dataclass

from ..logging import get_logger
from ..utils.errors import unauthenticated
from .token_service import TokenFailure

log = get_logger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def as_dict(self):
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


class SessionManager:
    """One live refresh token per user, rotated on every refresh.

    A refresh token is valid only while it equals the value stored on the
    user, so rotation and logout revoke older tokens even though their
    signatures stay valid until expiry. Two devices refreshing at once race at
    the store: both may pass the comparison, the last write wins, and the
    other device's new token stops working on its next refresh. That is the
    single-session-per-user behavior; supporting several sessions would need a
    set of tokens keyed by session instead of one column.
    """

    INVALID = "Invalid refresh token"
    EXPIRED = "Refresh token expired, please login again"

    def __init__(self, tokens, store):
        self.tokens = tokens
        self.store = store

    def _issue(self, user) -> TokenPair:
        pair = TokenPair(
            access_token=self.tokens.issue_access(user.id, user.role),
            refresh_token=self.tokens.issue_refresh(user.id),
        )
        self.store.set_refresh_token(user, pair.refresh_token)
        return pair

    def login(self, user) -> TokenPair:
        pair = self._issue(user)
        log.info("session_started", user_id=user.id)
        return pair

    def rotate(self, presented):
        """Returns (TokenPair, failure)."""
        claims, problem = self.tokens.verify_refresh(presented)
        if problem is TokenFailure.EXPIRED:
            log.info("refresh_rejected", reason="expired")
            return None, unauthenticated(self.EXPIRED)
        if problem is not None:
            log.info("refresh_rejected", reason="malformed")
            return None, unauthenticated(self.INVALID)

        user = self.store.get(claims.user_id)
        if user is None or not user.is_active or user.refresh_token != presented:
            log.warning("refresh_rejected", reason="revoked_or_inactive", user_id=claims.user_id)
            return None, unauthenticated(self.INVALID)

        pair = self._issue(user)
        log.info("session_rotated", user_id=user.id)
        return pair, None

    def logout(self, user):
        self.store.set_refresh_token(user, None)
        log.info("session_ended", user_id=user.id)
