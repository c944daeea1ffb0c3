from .identity_repository import IdentityRepository
from .doctor_repository import DoctorRepository
from .patient_repository import PatientRepository
from .appointment_repository import AppointmentRepository
from .prescription_repository import PrescriptionRepository

__all__ = [
    "IdentityRepository",
    "DoctorRepository",
    "PatientRepository",
    "AppointmentRepository",
    "PrescriptionRepository",
]
