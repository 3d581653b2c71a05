from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt, model_validator

from ..model.medication import LogStatus


class MedicationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    dosage: Optional[str] = Field(default=None, min_length=1, max_length=100)
    frequency: Optional[str] = Field(default=None, min_length=1, max_length=100)
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    instructions: Optional[str] = Field(default=None, max_length=1000)
    patient: Optional[PositiveInt] = None
    isActive: Optional[bool] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.startDate and self.endDate and self.endDate < self.startDate:
            raise ValueError("End date must be after start date")
        return self


class MedicationCreate(MedicationUpdate):
    name: str = Field(min_length=2, max_length=100)
    dosage: str = Field(min_length=1, max_length=100)
    frequency: str = Field(min_length=1, max_length=100)
    startDate: date
    patient: PositiveInt


class IntakeLogCreate(BaseModel):
    status: LogStatus = "taken"
    notes: Optional[str] = Field(default=None, max_length=1000)
    takenAt: Optional[datetime] = None
