from .admin import Admin
from .doctor import Doctor, DoctorSlot
from .patient import Patient
from .appointment import Appointment, AppointmentStatus
from .prescription import Prescription

__all__ = [
    "Admin",
    "Doctor",
    "DoctorSlot",
    "Patient",
    "Appointment",
    "AppointmentStatus",
    "Prescription",
]
