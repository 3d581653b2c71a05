# ------ medtrack/model/__init__.py ------

from .user import User, ROLES, ADMIN, DOCTOR, NURSE, PATIENT
from .medication import Medication, MedicationLog, LOG_STATUSES

__all__ = [
    "User",
    "ROLES",
    "ADMIN",
    "DOCTOR",
    "NURSE",
    "PATIENT",
    "Medication",
    "MedicationLog",
    "LOG_STATUSES",
]
