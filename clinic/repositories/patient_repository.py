from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..core.errors import ClinicError, ReasonCode
from ..models import Patient

logger = logging.getLogger(__name__)

class PatientRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        return self.db.get(Patient, patient_id)

    def save(self, patient: Patient) -> Patient:
        """Insert or update; a taken email or phone is a CONFLICT."""
        self.db.add(patient)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(f"Duplicate patient rejected on save: {exc.orig}")
            raise ClinicError(
                ReasonCode.CONFLICT,
                "Patient with this email or phone number already exists"
            ) from exc
        self.db.refresh(patient)
        return patient
