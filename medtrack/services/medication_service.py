# medtrack/services/medication_service.py
from datetime import date, datetime, timezone

from sqlalchemy import desc

from ..extensions import db
from ..model import Medication, MedicationLog, User, DOCTOR, PATIENT
from ..utils.errors import forbidden, invalid, not_found

# API field -> column
FIELD_MAP = {
    "name": "name",
    "description": "description",
    "dosage": "dosage",
    "frequency": "frequency",
    "startDate": "start_date",
    "endDate": "end_date",
    "instructions": "instructions",
    "patient": "patient_id",
    "isActive": "is_active",
}
NOT_NULL = {"name", "dosage", "frequency", "startDate", "patient", "isActive"}


def _parse_bool(v):
    if v is None:
        return None
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def _parse_date(v):
    if not v:
        return None
    s = v.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return date.fromisoformat(s)
    except ValueError:
        return datetime.fromisoformat(s).date()


def to_naive_utc(dt):
    if dt is None:
        return None
    if dt.tzinfo:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


# ---------- ownership ----------
def check_access(identity, medication, action="access"):
    """Patients act only on their own medications, doctors only on ones they prescribed."""
    message = f"Not authorized to {action} this medication"
    if identity.role == PATIENT and medication.patient_id != identity.id:
        return forbidden(message)
    if identity.role == DOCTOR and medication.prescribed_by_id != identity.id:
        return forbidden(message)
    return None


def load_for(identity, medication_id, action="access"):
    """Returns (medication, failure)."""
    medication = db.session.get(Medication, medication_id)
    if medication is None:
        return None, not_found("Medication not found")
    failure = check_access(identity, medication, action)
    if failure:
        return None, failure
    return medication, None


# ---------- queries ----------
def visible_medications(identity, args):
    """Returns (query, failure) scoped to what the caller's role may see."""
    qry = Medication.query
    if identity.role == PATIENT:
        qry = qry.filter(Medication.patient_id == identity.id)
    elif identity.role == DOCTOR:
        qry = qry.filter(Medication.prescribed_by_id == identity.id)

    patient = args.get("patient")
    if patient and identity.role != PATIENT:
        try:
            qry = qry.filter(Medication.patient_id == int(patient))
        except ValueError:
            return None, invalid("patient must be a user id")

    active = _parse_bool(args.get("active"))
    if active is not None:
        qry = qry.filter(Medication.is_active == active)

    try:
        start = _parse_date(args.get("startDate"))
        end = _parse_date(args.get("endDate"))
    except ValueError:
        return None, invalid("startDate and endDate must be ISO dates")
    if start:
        qry = qry.filter(Medication.start_date >= start)
    if end:
        qry = qry.filter(Medication.end_date <= end)

    return qry.order_by(desc(Medication.created_at), desc(Medication.id)), None


def logs_for(medication):
    return (
        MedicationLog.query
        .filter_by(medication_id=medication.id)
        .order_by(desc(MedicationLog.taken_at), desc(MedicationLog.id))
    )


# ---------- writes ----------
def _patient_or_failure(patient_id):
    patient = db.session.get(User, patient_id)
    if patient is None or patient.role != PATIENT:
        return not_found("Patient not found")
    return None


def create_medication(identity, data):
    """``data`` is a validated MedicationCreate. Returns (medication, failure)."""
    failure = _patient_or_failure(data.patient)
    if failure:
        return None, failure
    values = data.model_dump(exclude_unset=True)
    medication = Medication(
        **{FIELD_MAP[k]: v for k, v in values.items() if v is not None},
        prescribed_by_id=identity.id,
    )
    db.session.add(medication)
    db.session.commit()
    return medication, None


def update_medication(medication, data):
    """``data`` is a validated MedicationUpdate. Returns (medication, failure)."""
    values = data.model_dump(exclude_unset=True)
    nulls = sorted(k for k, v in values.items() if v is None and k in NOT_NULL)
    if nulls:
        return None, invalid(
            "Validation error",
            [{"field": k, "message": "Field cannot be null"} for k in nulls],
        )
    if "patient" in values and values["patient"] != medication.patient_id:
        failure = _patient_or_failure(values["patient"])
        if failure:
            return None, failure

    start = values.get("startDate", medication.start_date)
    end = values["endDate"] if "endDate" in values else medication.end_date
    if start and end and end < start:
        return None, invalid(
            "Validation error",
            [{"field": "endDate", "message": "End date must be after start date"}],
        )

    for key, value in values.items():
        setattr(medication, FIELD_MAP[key], value)
    db.session.commit()
    return medication, None


def delete_medication(medication):
    # logs go with it through the delete-orphan cascade
    db.session.delete(medication)
    db.session.commit()


def record_intake(identity, medication, data):
    log = MedicationLog(
        medication_id=medication.id,
        patient_id=medication.patient_id,
        status=data.status,
        notes=data.notes,
        taken_at=to_naive_utc(data.takenAt) or datetime.now(timezone.utc).replace(tzinfo=None),
        recorded_by_id=identity.id,
    )
    db.session.add(log)
    db.session.commit()
    return log
