"""
Refresh-token lifecycle: login, rotation, logout, single active session.
"""

from datetime import datetime, timedelta, timezone

from medtrack.services.session_service import SessionManager
from medtrack.services.token_service import TokenService
from medtrack.utils.errors import ErrorKind


def _backdated_sessions(services):
    issued = datetime.now(timezone.utc) - services.config.refresh_ttl - timedelta(minutes=1)
    return SessionManager(TokenService(services.config, clock=lambda: issued), services.store)


def test_login_persists_refresh_token(services, make_user):
    user = make_user()
    pair = services.sessions.login(user)
    assert services.store.get(user.id).refresh_token == pair.refresh_token


def test_rotate_after_login_yields_new_token(services, make_user):
    user = make_user()
    first = services.sessions.login(user)

    second, failure = services.sessions.rotate(first.refresh_token)

    assert failure is None
    assert second.refresh_token != first.refresh_token
    assert services.store.get(user.id).refresh_token == second.refresh_token


def test_rotated_token_cannot_be_replayed(services, make_user):
    user = make_user()
    first = services.sessions.login(user)
    services.sessions.rotate(first.refresh_token)

    pair, failure = services.sessions.rotate(first.refresh_token)

    assert pair is None
    assert failure.kind is ErrorKind.UNAUTHENTICATED
    assert failure.message == "Invalid refresh token"


def test_logout_revokes_unexpired_refresh_token(services, make_user):
    user = make_user()
    pair = services.sessions.login(user)
    services.sessions.logout(user)

    assert services.store.get(user.id).refresh_token is None
    _, failure = services.sessions.rotate(pair.refresh_token)
    assert failure.message == "Invalid refresh token"


def test_second_login_invalidates_first_session(services, make_user):
    user = make_user()
    first = services.sessions.login(user)
    second = services.sessions.login(user)

    _, failure = services.sessions.rotate(first.refresh_token)
    assert failure is not None

    pair, failure = services.sessions.rotate(second.refresh_token)
    assert failure is None and pair is not None


def test_inactive_user_cannot_rotate(services, make_user):
    user = make_user()
    pair = services.sessions.login(user)
    services.store.set_active(user, False)

    _, failure = services.sessions.rotate(pair.refresh_token)
    assert failure.message == "Invalid refresh token"


def test_access_token_is_not_a_refresh_token(services, make_user):
    user = make_user()
    pair = services.sessions.login(user)

    _, failure = services.sessions.rotate(pair.access_token)
    assert failure.kind is ErrorKind.UNAUTHENTICATED


def test_expired_refresh_token_asks_for_login(services, make_user):
    user = make_user()
    stale = _backdated_sessions(services).login(user)

    pair, failure = services.sessions.rotate(stale.refresh_token)

    assert pair is None
    assert failure.kind is ErrorKind.UNAUTHENTICATED
    assert failure.message == "Refresh token expired, please login again"
    assert failure.status == 401
    assert services.store.get(user.id).refresh_token == stale.refresh_token
