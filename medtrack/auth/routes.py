from flask import request
from pydantic import ValidationError

from . import bp
from ..extensions import services
from ..logging import get_logger
from ..model import ADMIN, PATIENT
from ..schemas import LoginRequest, RegisterRequest
from ..utils.api import failure_response, json_body, ok
from ..utils.decorators import authenticate, current_identity, login_required
from ..utils.errors import forbidden, from_validation_error, invalid, unauthenticated

log = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _session_payload(user, pair):
    return {"user": user.as_public(), **pair.as_dict()}


def _caller_is_admin():
    header = request.headers.get("Authorization")
    if not header:
        return False
    identity, failure = authenticate(header)
    return failure is None and identity.role == ADMIN


@bp.post("/register")
def register():
    try:
        data = RegisterRequest.model_validate(json_body())
    except ValidationError as e:
        return failure_response(from_validation_error(e))

    # self-registration creates patients; any other role needs an admin caller
    role = data.role or PATIENT
    if role != PATIENT and not _caller_is_admin():
        return failure_response(forbidden(f"Only admins can register {role} accounts"))

    svc = services()
    user, failure = svc.store.create(data.name, data.email, data.password, role)
    if failure:
        return failure_response(failure)

    pair = svc.sessions.login(user)
    log.info("user_registered", user_id=user.id, role=user.role)
    return ok(status_code=201, **_session_payload(user, pair))


@bp.post("/login")
def login():
    try:
        data = LoginRequest.model_validate(json_body())
    except ValidationError as e:
        return failure_response(from_validation_error(e))

    svc = services()
    user = svc.store.authenticate(data.email, data.password)
    # unknown email and wrong password are indistinguishable to the caller
    if user is None:
        log.info("login_failed", reason="bad_credentials")
        return failure_response(unauthenticated(INVALID_CREDENTIALS))
    if not user.is_active:
        log.info("login_failed", reason="inactive", user_id=user.id)
        return failure_response(unauthenticated("Account is deactivated"))

    pair = svc.sessions.login(user)
    return ok(**_session_payload(user, pair))


@bp.post("/refresh-token")
def refresh_token():
    data = json_body()
    token_str = data.get("refreshToken")
    if not token_str or not isinstance(token_str, str):
        return failure_response(invalid("Refresh token is required"))

    pair, failure = services().sessions.rotate(token_str)
    if failure:
        return failure_response(failure)
    return ok(**pair.as_dict())


@bp.post("/logout")
@login_required
def logout():
    svc = services()
    user = svc.store.get(current_identity().id)
    svc.sessions.logout(user)
    return ok("Logged out successfully")


@bp.get("/profile")
@login_required
def profile():
    return ok(user=current_identity().as_dict())
