from dataclasses import dataclass
from datetime import date
from sqlalchemy.orm import Session
from typing import List, Optional
import enum
import logging

from ..core.errors import ClinicError, ReasonCode, SlotConflictError
from ..core.security import UserRole
from ..core.slots import day_bounds
from ..models import Appointment, AppointmentStatus
from ..repositories.appointment_repository import AppointmentRepository
from ..schemas.appointment import AppointmentCreate, AppointmentUpdate
from .access_gate import AccessGate
from .booking import BookingCheck, BookingValidator, MESSAGE_BY_CHECK, REASON_BY_CHECK

logger = logging.getLogger(__name__)

class Outcome(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    CANCELED = "canceled"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    REJECTED = "rejected"

@dataclass(frozen=True)
class LifecycleResult:
    outcome: Outcome
    reason: Optional[ReasonCode] = None
    message: str = ""
    appointment: Optional[Appointment] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.CREATED, Outcome.UPDATED, Outcome.CANCELED)

UNAUTHORIZED = LifecycleResult(Outcome.REJECTED, ReasonCode.UNAUTHORIZED, "Unauthorized")

CONDITION_STATUS = {
    "past": AppointmentStatus.COMPLETED,
    "future": AppointmentStatus.SCHEDULED,
}

def _not_found() -> LifecycleResult:
    return LifecycleResult(Outcome.NOT_FOUND, ReasonCode.NOT_FOUND, "Appointment not found")

def _forbidden(message: str) -> LifecycleResult:
    return LifecycleResult(Outcome.FORBIDDEN, ReasonCode.FORBIDDEN, message)

def _rejected(check: BookingCheck) -> LifecycleResult:
    return LifecycleResult(Outcome.REJECTED, REASON_BY_CHECK[check], MESSAGE_BY_CHECK[check])

def _slot_conflict() -> LifecycleResult:
    return _rejected(BookingCheck.SLOT_TAKEN)

class AppointmentService:
    """Book, update, cancel and list appointments on behalf of a token holder."""

    def __init__(
        self,
        db: Session,
        gate: Optional[AccessGate] = None,
        validator: Optional[BookingValidator] = None,
    ):
        self.db = db
        self.gate = gate or AccessGate(db)
        self.validator = validator or BookingValidator(db)
        self.appointments = AppointmentRepository(db)

    def book(self, request: AppointmentCreate, token: Optional[str]) -> LifecycleResult:
        decision = self.gate.authorize(token, UserRole.PATIENT)
        if not decision.allowed:
            return UNAUTHORIZED
        patient = decision.identity

        patient_id = request.patient_id if request.patient_id is not None else patient.id
        if patient_id != patient.id:
            return _forbidden("Patients can only book appointments for themselves")

        check = self.validator.validate(request.doctor_id, patient_id, request.appointment_time)
        if check is not BookingCheck.OK:
            logger.info(
                f"Booking rejected ({check.value}): doctor_id={request.doctor_id}, "
                f"time={request.appointment_time}"
            )
            return _rejected(check)

        appointment = Appointment(
            doctor_id=request.doctor_id,
            patient_id=patient_id,
            appointment_time=request.appointment_time,
            status=AppointmentStatus.SCHEDULED.value,
        )
        try:
            appointment = self.appointments.save(appointment)
        except SlotConflictError:
            # Lost the race against a concurrent booking
            return _slot_conflict()

        logger.info(f"Appointment {appointment.id} booked by patient {patient_id}")
        return LifecycleResult(Outcome.CREATED, message="Appointment booked successfully", appointment=appointment)

    def update(
        self,
        appointment_id: Optional[int],
        request: AppointmentUpdate,
        token: Optional[str],
    ) -> LifecycleResult:
        decision = self.gate.authorize(token, UserRole.PATIENT)
        if not decision.allowed:
            return UNAUTHORIZED
        if appointment_id is None:
            return _rejected(BookingCheck.MALFORMED)

        appointment = self.appointments.find_by_id(appointment_id)
        if appointment is None:
            return _not_found()
        if appointment.patient_id != decision.identity.id:
            return _forbidden("You are not authorized to update this appointment")

        doctor_id = request.doctor_id if request.doctor_id is not None else appointment.doctor_id
        appointment_time = request.appointment_time or appointment.appointment_time

        check = self.validator.validate(
            doctor_id,
            appointment.patient_id,
            appointment_time,
            exclude_appointment_id=appointment.id,
        )
        if check is not BookingCheck.OK:
            return _rejected(check)

        appointment.doctor_id = doctor_id
        appointment.appointment_time = appointment_time
        if request.status is not None:
            appointment.status = request.status.value
        try:
            appointment = self.appointments.save(appointment)
        except SlotConflictError:
            return _slot_conflict()

        logger.info(f"Appointment {appointment.id} updated")
        return LifecycleResult(Outcome.UPDATED, message="Appointment updated successfully", appointment=appointment)

    def cancel(self, appointment_id: int, token: Optional[str]) -> LifecycleResult:
        decision = self.gate.authorize(token, UserRole.PATIENT)
        if not decision.allowed:
            return UNAUTHORIZED

        appointment = self.appointments.find_by_id(appointment_id)
        if appointment is None:
            return _not_found()
        if appointment.patient_id != decision.identity.id:
            logger.warning(
                f"Patient {decision.identity.id} tried to cancel appointment {appointment_id}"
            )
            return _forbidden("You are not authorized to cancel this appointment")

        self.appointments.delete(appointment)
        logger.info(f"Appointment {appointment_id} canceled")
        return LifecycleResult(Outcome.CANCELED, message="Appointment canceled successfully")

    def day_view(
        self,
        token: Optional[str],
        day: date,
        patient_name: Optional[str] = None,
    ) -> List[Appointment]:
        """The requesting doctor's appointments on ``day``, earliest first."""
        decision = self.gate.authorize(token, UserRole.DOCTOR)
        if not decision.allowed:
            raise ClinicError(ReasonCode.UNAUTHORIZED)

        start, end = day_bounds(day)
        name = patient_name.strip() if patient_name else None
        return self.appointments.list_by_doctor_and_range(
            decision.identity.id, start, end, patient_name=name or None
        )

    def patient_appointments(
        self,
        token: Optional[str],
        condition: Optional[str] = None,
        doctor_name: Optional[str] = None,
    ) -> List[Appointment]:
        """The requesting patient's appointments, filtered by past/future and doctor name."""
        decision = self.gate.authorize(token, UserRole.PATIENT)
        if not decision.allowed:
            raise ClinicError(ReasonCode.UNAUTHORIZED)

        status = None
        if condition and condition.strip():
            key = condition.strip().lower()
            if key not in CONDITION_STATUS:
                raise ClinicError(ReasonCode.MALFORMED, "Condition must be 'past' or 'future'")
            status = CONDITION_STATUS[key].value

        name = doctor_name.strip() if doctor_name else None
        return self.appointments.list_by_patient(
            decision.identity.id, status=status, doctor_name=name or None
        )
