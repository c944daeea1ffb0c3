from datetime import date
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...core.errors import ClinicError
from ...api.deps import get_access_gate, get_bearer_token
from ...services.access_gate import AccessGate
from ...services.appointment_service import AppointmentService, LifecycleResult
from ...schemas.appointment import AppointmentCreate, AppointmentResponse, AppointmentUpdate

router = APIRouter(prefix="/appointments", tags=["Appointments"])

def get_appointment_service(
    db: Session = Depends(get_db),
    gate: AccessGate = Depends(get_access_gate)
) -> AppointmentService:
    return AppointmentService(db, gate=gate)

def _respond(result: LifecycleResult, success_status: int = status.HTTP_200_OK):
    """Translate a lifecycle result into a response, or raise for a rejection."""
    if not result.ok:
        raise ClinicError(result.reason, result.message)

    body = {"outcome": result.outcome.value, "message": result.message}
    if result.appointment is not None:
        body["appointment"] = AppointmentResponse.from_appointment(
            result.appointment
        ).model_dump(mode="json")
    return JSONResponse(status_code=success_status, content=body)

@router.get("", response_model=List[AppointmentResponse])
async def doctor_day_view(
    date: date,
    patient_name: Optional[str] = None,
    token: Optional[str] = Depends(get_bearer_token),
    service: AppointmentService = Depends(get_appointment_service)
):
    """The requesting doctor's appointments on a date (doctor only)."""
    appointments = service.day_view(token, date, patient_name)
    return [AppointmentResponse.from_appointment(a) for a in appointments]

@router.post("")
async def book_appointment(
    appointment_data: AppointmentCreate,
    token: Optional[str] = Depends(get_bearer_token),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Book an appointment (patient only)."""
    return _respond(service.book(appointment_data, token), status.HTTP_201_CREATED)

@router.put("/{appointment_id}")
async def update_appointment(
    appointment_id: int,
    appointment_data: AppointmentUpdate,
    token: Optional[str] = Depends(get_bearer_token),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Move or update one of the patient's appointments (patient only)."""
    return _respond(service.update(appointment_id, appointment_data, token))

@router.delete("/{appointment_id}")
async def cancel_appointment(
    appointment_id: int,
    token: Optional[str] = Depends(get_bearer_token),
    service: AppointmentService = Depends(get_appointment_service)
):
    """Cancel one of the patient's appointments (patient only)."""
    return _respond(service.cancel(appointment_id, token))
