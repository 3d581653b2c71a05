# --- medtrack/model/medication.py ---
from typing import Literal, get_args

from ..extensions import db
from .user import utcnow, isoformat

LogStatus = Literal["taken", "missed", "postponed"]
LOG_STATUSES = get_args(LogStatus)


class Medication(db.Model):
    __tablename__ = "medications"
    __table_args__ = (db.Index("ix_medications_patient_name", "patient_id", "name"),)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500))
    dosage = db.Column(db.String(100), nullable=False)
    frequency = db.Column(db.String(100), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    instructions = db.Column(db.String(1000))
    patient_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    prescribed_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    patient = db.relationship("User", foreign_keys=[patient_id], lazy="joined")
    prescribed_by = db.relationship("User", foreign_keys=[prescribed_by_id], lazy="joined")
    logs = db.relationship(
        "MedicationLog",
        backref="medication",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "instructions": self.instructions,
            "patient": {
                "id": self.patient.id,
                "name": self.patient.name,
                "email": self.patient.email,
            } if self.patient else None,
            "prescribedBy": {
                "id": self.prescribed_by.id,
                "name": self.prescribed_by.name,
            } if self.prescribed_by else None,
            "isActive": self.is_active,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


class MedicationLog(db.Model):
    __tablename__ = "medication_logs"
    __table_args__ = (
        db.Index("ix_medication_logs_lookup", "medication_id", "patient_id", "taken_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    medication_id = db.Column(db.Integer, db.ForeignKey("medications.id"), nullable=False)
    patient_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    taken_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    status = db.Column(
        db.Enum(*LOG_STATUSES, name="medication_log_status", native_enum=False),
        nullable=False,
        default="taken",
    )
    notes = db.Column(db.String(1000))
    recorded_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    recorded_by = db.relationship("User", foreign_keys=[recorded_by_id], lazy="joined")

    def as_dict(self):
        return {
            "id": self.id,
            "medication": self.medication_id,
            "patient": self.patient_id,
            "takenAt": isoformat(self.taken_at),
            "status": self.status,
            "notes": self.notes,
            "recordedBy": {
                "id": self.recorded_by.id,
                "name": self.recorded_by.name,
                "role": self.recorded_by.role,
            } if self.recorded_by else None,
            "createdAt": isoformat(self.created_at),
        }
