from flask import request
from pydantic import ValidationError

from . import bp
from ..logging import get_logger
from ..model import ADMIN, DOCTOR
from ..schemas import IntakeLogCreate, MedicationCreate, MedicationUpdate
from ..services import medication_service as meds
from ..utils.api import failure_response, json_body, ok, paginate
from ..utils.decorators import current_identity, login_required, role_required
from ..utils.errors import from_validation_error

log = get_logger(__name__)


@bp.get("")
@login_required
def list_medications():
    """
    patient   -> filter by patient id (ignored for patients)
    active    -> true / false
    startDate -> start date on or after
    endDate   -> end date on or before
    page      -> default 1
    limit     -> default 10 (cap 100)
    """
    qry, failure = meds.visible_medications(current_identity(), request.args)
    if failure:
        return failure_response(failure)
    page = paginate(qry, request.args.get("page"), request.args.get("limit"))
    items = page.pop("items")
    return ok(**page, medications=[m.as_dict() for m in items])


@bp.post("")
@role_required(DOCTOR, ADMIN)
def create_medication():
    try:
        data = MedicationCreate.model_validate(json_body())
    except ValidationError as e:
        return failure_response(from_validation_error(e))

    medication, failure = meds.create_medication(current_identity(), data)
    if failure:
        return failure_response(failure)
    log.info("medication_created", medication_id=medication.id, by=current_identity().id)
    return ok(status_code=201, medication=medication.as_dict())


@bp.get("/<int:mid>")
@login_required
def get_medication(mid):
    medication, failure = meds.load_for(current_identity(), mid)
    if failure:
        return failure_response(failure)
    return ok(medication=medication.as_dict())


@bp.put("/<int:mid>")
@role_required(DOCTOR, ADMIN)
def update_medication(mid):
    try:
        data = MedicationUpdate.model_validate(json_body())
    except ValidationError as e:
        return failure_response(from_validation_error(e))

    medication, failure = meds.load_for(current_identity(), mid, action="update")
    if failure:
        return failure_response(failure)
    medication, failure = meds.update_medication(medication, data)
    if failure:
        return failure_response(failure)
    return ok(medication=medication.as_dict())


@bp.delete("/<int:mid>")
@role_required(DOCTOR, ADMIN)
def delete_medication(mid):
    medication, failure = meds.load_for(current_identity(), mid, action="delete")
    if failure:
        return failure_response(failure)
    meds.delete_medication(medication)
    log.info("medication_deleted", medication_id=mid, by=current_identity().id)
    return ok("Medication deleted successfully")


@bp.post("/<int:mid>/log")
@login_required
def log_intake(mid):
    try:
        data = IntakeLogCreate.model_validate(json_body())
    except ValidationError as e:
        return failure_response(from_validation_error(e))

    medication, failure = meds.load_for(current_identity(), mid, action="log")
    if failure:
        return failure_response(failure)
    entry = meds.record_intake(current_identity(), medication, data)
    return ok(status_code=201, log=entry.as_dict())


@bp.get("/<int:mid>/logs")
@login_required
def list_logs(mid):
    medication, failure = meds.load_for(current_identity(), mid)
    if failure:
        return failure_response(failure)
    page = paginate(meds.logs_for(medication), request.args.get("page"), request.args.get("limit"))
    items = page.pop("items")
    return ok(**page, logs=[entry.as_dict() for entry in items])
