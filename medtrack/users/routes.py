from flask import request
from sqlalchemy import desc, or_

from . import bp
from ..extensions import services
from ..logging import get_logger
from ..model import User, ROLES, ADMIN
from ..utils.api import failure_response, json_body, ok, paginate
from ..utils.decorators import current_identity, role_required
from ..utils.errors import forbidden, invalid, not_found

log = get_logger(__name__)

USER_NOT_FOUND = "User not found"
LAST_ADMIN = "Cannot demote the last admin"


@bp.get("")
@role_required(ADMIN)
def list_users():
    """
    role   -> one of the known roles
    active -> true / false
    search -> substring match on name or email
    page, limit
    """
    qry = User.query
    role = (request.args.get("role") or "").strip().lower()
    if role in ROLES:
        qry = qry.filter(User.role == role)

    active = request.args.get("active")
    if active is not None:
        qry = qry.filter(User.is_active == (active.strip().lower() == "true"))

    search = (request.args.get("search") or "").strip()
    if search:
        qry = qry.filter(or_(User.name.ilike(f"%{search}%"), User.email.ilike(f"%{search}%")))

    qry = qry.order_by(desc(User.created_at), desc(User.id))
    page = paginate(qry, request.args.get("page"), request.args.get("limit"))
    items = page.pop("items")
    return ok(**page, users=[u.as_dict() for u in items])


@bp.get("/<int:user_id>")
@role_required(ADMIN)
def get_user(user_id):
    user = services().store.get(user_id)
    if not user:
        return failure_response(not_found(USER_NOT_FOUND))
    return ok(user=user.as_dict())


@bp.patch("/<int:user_id>/role")
@role_required(ADMIN)
def update_user_role(user_id):
    body = json_body()
    new_role = body.get("role")
    if not isinstance(new_role, str) or new_role.strip().lower() not in ROLES:
        return failure_response(invalid(f"Role must be one of: {', '.join(ROLES)}"))
    new_role = new_role.strip().lower()

    store = services().store
    target = store.get(user_id)
    if not target:
        return failure_response(not_found(USER_NOT_FOUND))

    # at least one active admin must remain
    if new_role != ADMIN and store.is_last_active_admin(target):
        return failure_response(invalid(LAST_ADMIN))

    store.set_role(target, new_role)
    log.info("user_role_changed", user_id=target.id, role=new_role, by=current_identity().id)
    return ok(user=target.as_dict())


@bp.patch("/<int:user_id>/status")
@role_required(ADMIN)
def toggle_user_status(user_id):
    body = json_body()
    if "isActive" not in body:
        return failure_response(invalid("isActive field is required"))
    if not isinstance(body["isActive"], bool):
        return failure_response(invalid("isActive must be a boolean"))

    store = services().store
    target = store.get(user_id)
    if not target:
        return failure_response(not_found(USER_NOT_FOUND))
    if target.id == current_identity().id:
        return failure_response(forbidden("You cannot change your own account status"))
    if body["isActive"] is False and store.is_last_active_admin(target):
        return failure_response(invalid("Cannot deactivate the last admin"))

    store.set_active(target, body["isActive"])
    log.info("user_status_changed", user_id=target.id, active=target.is_active, by=current_identity().id)
    return ok(user=target.as_dict())
