from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import Optional

from ..models import Appointment, AppointmentStatus

def _wall_clock(value: Optional[datetime]) -> Optional[datetime]:
    # Slots are minute-aligned clinic wall-clock times
    if value is None:
        return value
    if value.tzinfo is not None and value.utcoffset() is not None:
        raise ValueError("appointment_time must be a local clinic time without a UTC offset")
    if value.second or value.microsecond:
        raise ValueError("appointment_time must be aligned to a whole minute")
    return value.replace(tzinfo=None)

class AppointmentCreate(BaseModel):
    doctor_id: Optional[int] = None
    patient_id: Optional[int] = None
    appointment_time: Optional[datetime] = None

    @field_validator("appointment_time")
    @classmethod
    def check_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _wall_clock(value)

class AppointmentUpdate(BaseModel):
    """Fields left out keep their current value."""
    doctor_id: Optional[int] = None
    appointment_time: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None

    @field_validator("appointment_time")
    @classmethod
    def check_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _wall_clock(value)

class AppointmentResponse(BaseModel):
    id: int
    doctor_id: int
    doctor_name: Optional[str] = None
    patient_id: int
    patient_name: Optional[str] = None
    patient_email: Optional[str] = None
    patient_phone: Optional[str] = None
    patient_address: Optional[str] = None
    appointment_time: datetime
    status: int

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        doctor = appointment.doctor
        patient = appointment.patient
        return cls(
            id=appointment.id,
            doctor_id=appointment.doctor_id,
            doctor_name=doctor.name if doctor else None,
            patient_id=appointment.patient_id,
            patient_name=patient.name if patient else None,
            patient_email=patient.email if patient else None,
            patient_phone=patient.phone if patient else None,
            patient_address=patient.address if patient else None,
            appointment_time=appointment.appointment_time,
            status=appointment.status,
        )
