from sqlalchemy.orm import Session
from typing import List

from ..core.errors import ClinicError, ReasonCode
from ..models import Prescription
from ..repositories.appointment_repository import AppointmentRepository
from ..repositories.prescription_repository import PrescriptionRepository
from ..schemas.prescription import PrescriptionCreate

class PrescriptionService:
    def __init__(self, db: Session):
        self.appointments = AppointmentRepository(db)
        self.prescriptions = PrescriptionRepository(db)

    def save(self, prescription_data: PrescriptionCreate) -> Prescription:
        if self.appointments.find_by_id(prescription_data.appointment_id) is None:
            raise ClinicError(ReasonCode.NOT_FOUND, "Appointment not found")
        return self.prescriptions.save(Prescription(**prescription_data.model_dump()))

    def by_appointment(self, appointment_id: int) -> List[Prescription]:
        prescriptions = self.prescriptions.list_by_appointment(appointment_id)
        if not prescriptions:
            raise ClinicError(ReasonCode.NOT_FOUND, "No prescription exists for this appointment")
        return prescriptions
