# --- medtrack/model/user.py ---
from datetime import datetime, timezone

from ..extensions import db

ROLES = ("admin", "doctor", "nurse", "patient")
ADMIN, DOCTOR, NURSE, PATIENT = ROLES


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=PATIENT, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    # at most one live refresh token per user; a new login overwrites it
    refresh_token = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def as_public(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }

    def as_dict(self):
        return {
            **self.as_public(),
            "isActive": self.is_active,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<User {self.id} {self.role}>"
