from datetime import datetime
from sqlalchemy.orm import Session
from typing import Optional
import enum

from ..core.errors import ReasonCode
from ..core.slots import slot_label
from ..repositories.doctor_repository import DoctorRepository
from .availability import AvailabilityEngine

class BookingCheck(str, enum.Enum):
    OK = "ok"
    SLOT_TAKEN = "slot_taken"
    DOCTOR_NOT_FOUND = "doctor_not_found"
    MALFORMED = "malformed"

REASON_BY_CHECK = {
    BookingCheck.SLOT_TAKEN: ReasonCode.CONFLICT,
    BookingCheck.DOCTOR_NOT_FOUND: ReasonCode.NOT_FOUND,
    BookingCheck.MALFORMED: ReasonCode.MALFORMED,
}

MESSAGE_BY_CHECK = {
    BookingCheck.SLOT_TAKEN: "Selected time is unavailable",
    BookingCheck.DOCTOR_NOT_FOUND: "Doctor not found",
    BookingCheck.MALFORMED: "Doctor, patient and appointment time are required",
}

class BookingValidator:
    """Single source of truth for whether a requested slot can be booked."""

    def __init__(self, db: Session, engine: Optional[AvailabilityEngine] = None):
        self.doctors = DoctorRepository(db)
        self.engine = engine or AvailabilityEngine(db)

    def validate(
        self,
        doctor_id: Optional[int],
        patient_id: Optional[int],
        appointment_time: Optional[datetime],
        exclude_appointment_id: Optional[int] = None,
    ) -> BookingCheck:
        """
        Check a requested appointment against the doctor's current availability.

        ``exclude_appointment_id`` leaves one existing appointment out of the
        booked set, so an appointment being updated does not collide with itself.
        """
        if doctor_id is None or patient_id is None or appointment_time is None:
            return BookingCheck.MALFORMED

        if self.doctors.find_by_id(doctor_id) is None:
            return BookingCheck.DOCTOR_NOT_FOUND

        free = self.engine.availability(
            doctor_id,
            appointment_time.date(),
            exclude_appointment_id=exclude_appointment_id,
        )
        if slot_label(appointment_time) not in free:
            return BookingCheck.SLOT_TAKEN

        return BookingCheck.OK
