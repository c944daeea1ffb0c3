from sqlalchemy.orm import Session
import logging

from ..core.errors import ClinicError, ReasonCode
from ..core.security import get_password_hash
from ..models import Patient
from ..repositories.identity_repository import IdentityRepository
from ..repositories.patient_repository import PatientRepository
from ..schemas.patient import PatientCreate

logger = logging.getLogger(__name__)

class PatientService:
    def __init__(self, db: Session):
        self.db = db
        self.identities = IdentityRepository(db)
        self.patients = PatientRepository(db)

    def register(self, patient_data: PatientCreate) -> Patient:
        """Self-service signup. Email and phone must both be unused."""
        existing = self.identities.find_patient_by_email_or_phone(
            patient_data.email, patient_data.phone
        )
        if existing:
            raise ClinicError(
                ReasonCode.CONFLICT,
                "Patient with this email or phone number already exists"
            )

        patient = Patient(
            name=patient_data.name,
            email=patient_data.email,
            phone=patient_data.phone,
            address=patient_data.address,
            password_hash=get_password_hash(patient_data.password),
        )
        patient = self.patients.save(patient)
        logger.info(f"Patient {patient.id} registered")
        return patient

    def details(self, patient_id: int) -> Patient:
        patient = self.patients.find_by_id(patient_id)
        if patient is None:
            raise ClinicError(ReasonCode.NOT_FOUND, "Patient not found")
        return patient
