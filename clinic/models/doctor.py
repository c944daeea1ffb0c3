from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..core.slots import sort_slots

class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)

    # Personal information
    name = Column(String(100), nullable=False)
    specialty = Column(String(100), nullable=False)

    # Contact information
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)

    password_hash = Column(String(255), nullable=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    slots = relationship(
        "DoctorSlot",
        back_populates="doctor",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    appointments = relationship("Appointment", back_populates="doctor", passive_deletes=True)

    @property
    def available_times(self):
        """Declared daily slot labels, earliest first."""
        return sort_slots(slot.label for slot in self.slots)

    def set_available_times(self, labels):
        """Replace the declared slot labels."""
        self.slots = [DoctorSlot(label=label) for label in labels]

    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.name}', specialty='{self.specialty}')>"

class DoctorSlot(Base):
    __tablename__ = "doctor_slots"
    __table_args__ = (
        UniqueConstraint("doctor_id", "label", name="uq_doctor_slot_label"),
    )

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String(5), nullable=False)  # "HH:MM"

    doctor = relationship("Doctor", back_populates="slots")

    def __repr__(self):
        return f"<DoctorSlot(doctor_id={self.doctor_id}, label='{self.label}')>"
