from datetime import date
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.slots import day_bounds, slot_label, sort_slots
from ..repositories.appointment_repository import AppointmentRepository
from ..repositories.doctor_repository import DoctorRepository

class AvailabilityEngine:
    """Free slots of a doctor on a date: declared labels minus booked ones."""

    def __init__(self, db: Session):
        self.doctors = DoctorRepository(db)
        self.appointments = AppointmentRepository(db)

    def availability(
        self,
        doctor_id: int,
        day: date,
        exclude_appointment_id: Optional[int] = None,
    ) -> List[str]:
        doctor = self.doctors.find_by_id(doctor_id)
        if doctor is None:
            return []

        declared = doctor.available_times
        if not declared:
            return []

        start, end = day_bounds(day)
        booked = {
            slot_label(appointment.appointment_time)
            for appointment in self.appointments.list_by_doctor_and_range(
                doctor_id, start, end, exclude_id=exclude_appointment_id
            )
        }

        # Bookings on labels the doctor no longer declares drop out here
        return sort_slots(label for label in declared if label not in booked)
