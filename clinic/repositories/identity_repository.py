from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import Optional, Union

from ..core.security import UserRole
from ..models import Admin, Doctor, Patient

Identity = Union[Admin, Doctor, Patient]

class IdentityRepository:
    """Looks up accounts in the identity store that belongs to each role."""

    def __init__(self, db: Session):
        self.db = db

    def find_admin_by_username(self, username: str) -> Optional[Admin]:
        return self.db.query(Admin).filter(Admin.username == username).first()

    def find_doctor_by_email(self, email: str) -> Optional[Doctor]:
        return self.db.query(Doctor).filter(Doctor.email == email).first()

    def find_patient_by_email(self, email: str) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.email == email).first()

    def find_patient_by_email_or_phone(
        self, email: Optional[str], phone: Optional[str]
    ) -> Optional[Patient]:
        clauses = []
        if email:
            clauses.append(Patient.email == email)
        if phone:
            clauses.append(Patient.phone == phone)
        if not clauses:
            return None
        return self.db.query(Patient).filter(or_(*clauses)).first()

    def find_by_identifier(self, role: UserRole, identifier: str) -> Optional[Identity]:
        """Admins are keyed by username, doctors and patients by email."""
        if role is UserRole.ADMIN:
            return self.find_admin_by_username(identifier)
        if role is UserRole.DOCTOR:
            return self.find_doctor_by_email(identifier)
        if role is UserRole.PATIENT:
            return self.find_patient_by_email(identifier)
        return None
