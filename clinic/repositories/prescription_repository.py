from sqlalchemy.orm import Session
from typing import List

from ..models import Prescription

class PrescriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(self, prescription: Prescription) -> Prescription:
        self.db.add(prescription)
        self.db.commit()
        self.db.refresh(prescription)
        return prescription

    def list_by_appointment(self, appointment_id: int) -> List[Prescription]:
        return (
            self.db.query(Prescription)
            .filter(Prescription.appointment_id == appointment_id)
            .order_by(Prescription.id)
            .all()
        )
