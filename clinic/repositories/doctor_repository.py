from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..core.errors import ClinicError, ReasonCode
from ..models import Appointment, Doctor

logger = logging.getLogger(__name__)

class DoctorRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, doctor_id: int) -> Optional[Doctor]:
        return self.db.get(Doctor, doctor_id)

    def find_by_email(self, email: str) -> Optional[Doctor]:
        return self.db.query(Doctor).filter(Doctor.email == email).first()

    def list_all(self) -> List[Doctor]:
        return self.db.query(Doctor).order_by(Doctor.name).all()

    def search(self, name: Optional[str] = None, specialty: Optional[str] = None) -> List[Doctor]:
        """Partial, case-insensitive name match and exact, case-insensitive specialty."""
        query = self.db.query(Doctor)
        if name:
            query = query.filter(Doctor.name.icontains(name, autoescape=True))
        if specialty:
            query = query.filter(func.lower(Doctor.specialty) == specialty.lower())
        return query.order_by(Doctor.name).all()

    def save(self, doctor: Doctor) -> Doctor:
        """Insert or update; a taken email is a CONFLICT."""
        self.db.add(doctor)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(f"Duplicate doctor rejected on save: {exc.orig}")
            raise ClinicError(ReasonCode.CONFLICT, "Doctor already exists") from exc
        self.db.refresh(doctor)
        return doctor

    def delete(self, doctor: Doctor) -> None:
        """Delete a doctor, removing the doctor's appointments first."""
        self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor.id
        ).delete(synchronize_session=False)
        self.db.delete(doctor)
        self.db.commit()
