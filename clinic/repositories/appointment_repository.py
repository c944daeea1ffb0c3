from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..core.errors import SlotConflictError
from ..models import Appointment, Doctor, Patient
from ..models.appointment import SLOT_CONSTRAINT

logger = logging.getLogger(__name__)

# SQLite names the columns instead of the constraint
_SQLITE_SLOT_COLUMNS = "appointments.doctor_id, appointments.appointment_time"

def is_slot_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return SLOT_CONSTRAINT in message or _SQLITE_SLOT_COLUMNS in message

class AppointmentRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.get(Appointment, appointment_id)

    def save(self, appointment: Appointment) -> Appointment:
        """Insert or update; raises SlotConflictError when the doctor/timestamp pair is taken."""
        self.db.add(appointment)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_slot_conflict(exc):
                logger.warning(
                    f"Slot conflict on save: doctor_id={appointment.doctor_id}, "
                    f"time={appointment.appointment_time}"
                )
                raise SlotConflictError(str(exc.orig)) from exc
            raise
        self.db.refresh(appointment)
        return appointment

    def delete(self, appointment: Appointment) -> None:
        self.db.delete(appointment)
        self.db.commit()

    def list_by_doctor_and_range(
        self,
        doctor_id: int,
        start: datetime,
        end: datetime,
        patient_name: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> List[Appointment]:
        """Appointments of one doctor with start <= time < end, earliest first."""
        query = self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_time >= start,
            Appointment.appointment_time < end,
        )
        if patient_name:
            query = query.join(Patient, Appointment.patient_id == Patient.id).filter(
                Patient.name.icontains(patient_name, autoescape=True)
            )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.appointment_time.asc()).all()

    def list_by_patient(
        self,
        patient_id: int,
        status: Optional[int] = None,
        doctor_name: Optional[str] = None,
    ) -> List[Appointment]:
        query = self.db.query(Appointment).filter(Appointment.patient_id == patient_id)
        if status is not None:
            query = query.filter(Appointment.status == status)
        if doctor_name:
            query = query.join(Doctor, Appointment.doctor_id == Doctor.id).filter(
                Doctor.name.icontains(doctor_name, autoescape=True)
            )
        return query.order_by(Appointment.appointment_time.asc()).all()
