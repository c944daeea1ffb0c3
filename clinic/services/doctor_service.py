from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..core.errors import ClinicError, ReasonCode
from ..core.security import get_password_hash
from ..core.slots import NOON, is_slot_label, parse_slot
from ..models import Doctor
from ..repositories.doctor_repository import DoctorRepository
from ..schemas.doctor import DoctorCreate, DoctorUpdate

logger = logging.getLogger(__name__)

class DoctorService:
    def __init__(self, db: Session):
        self.db = db
        self.doctors = DoctorRepository(db)

    def get(self, doctor_id: int) -> Doctor:
        doctor = self.doctors.find_by_id(doctor_id)
        if doctor is None:
            raise ClinicError(ReasonCode.NOT_FOUND, "Doctor not found")
        return doctor

    def create(self, doctor_data: DoctorCreate) -> Doctor:
        if self.doctors.find_by_email(doctor_data.email):
            raise ClinicError(ReasonCode.CONFLICT, "Doctor already exists")

        doctor = Doctor(
            name=doctor_data.name,
            specialty=doctor_data.specialty,
            email=doctor_data.email,
            phone=doctor_data.phone,
            password_hash=get_password_hash(doctor_data.password),
        )
        doctor.set_available_times(doctor_data.available_times)
        doctor = self.doctors.save(doctor)
        logger.info(f"Doctor {doctor.id} created")
        return doctor

    def update(self, doctor_id: int, doctor_data: DoctorUpdate) -> Doctor:
        doctor = self.get(doctor_id)

        if doctor_data.email and doctor_data.email != doctor.email:
            if self.doctors.find_by_email(doctor_data.email):
                raise ClinicError(ReasonCode.CONFLICT, "Email already in use by another doctor")
            doctor.email = doctor_data.email
        if doctor_data.name is not None:
            doctor.name = doctor_data.name
        if doctor_data.specialty is not None:
            doctor.specialty = doctor_data.specialty
        if doctor_data.phone is not None:
            doctor.phone = doctor_data.phone
        if doctor_data.password:
            doctor.password_hash = get_password_hash(doctor_data.password)
        if doctor_data.available_times is not None:
            # Old slot rows must be gone before the new ones are inserted
            doctor.slots = []
            self.db.flush()
            doctor.set_available_times(doctor_data.available_times)

        doctor = self.doctors.save(doctor)
        logger.info(f"Doctor {doctor.id} updated")
        return doctor

    def delete(self, doctor_id: int) -> None:
        """Delete a doctor together with all of the doctor's appointments."""
        doctor = self.get(doctor_id)
        self.doctors.delete(doctor)
        logger.info(f"Doctor {doctor_id} deleted with its appointments")

    def list(self) -> List[Doctor]:
        return self.doctors.list_all()

    def filter(
        self,
        name: Optional[str] = None,
        specialty: Optional[str] = None,
        time: Optional[str] = None,
    ) -> List[Doctor]:
        """
        Search the directory. ``name`` is a partial match, ``specialty`` an
        exact case-insensitive match, and ``time`` is ``AM`` or ``PM``: a
        doctor qualifies with at least one declared slot in that half-day.
        """
        name = name.strip() if name else None
        specialty = specialty.strip() if specialty else None
        if name or specialty:
            doctors = self.doctors.search(name=name, specialty=specialty)
        else:
            doctors = self.list()

        if time and time.strip():
            half = time.strip().upper()
            if half not in ("AM", "PM"):
                raise ClinicError(ReasonCode.MALFORMED, "Time must be 'AM' or 'PM'")
            doctors = [doctor for doctor in doctors if _has_slot_in(doctor, half)]
        return doctors

def _has_slot_in(doctor: Doctor, half: str) -> bool:
    for label in doctor.available_times:
        if not is_slot_label(label):
            continue
        before_noon = parse_slot(label) < NOON
        if before_noon == (half == "AM"):
            return True
    return False
