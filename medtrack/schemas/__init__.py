from .auth import RegisterRequest, LoginRequest
from .medication import MedicationCreate, MedicationUpdate, IntakeLogCreate

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "MedicationCreate",
    "MedicationUpdate",
    "IntakeLogCreate",
]
