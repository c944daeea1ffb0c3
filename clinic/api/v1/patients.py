from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_bearer_token, get_patient_user, rate_limit_check
from ...models import Patient
from ...services.appointment_service import AppointmentService
from ...services.patient_service import PatientService
from ...schemas.appointment import AppointmentResponse
from ...schemas.patient import PatientCreate, PatientResponse

router = APIRouter(prefix="/patients", tags=["Patients"])

@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def register_patient(
    patient_data: PatientCreate,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Patient signup."""
    patient = PatientService(db).register(patient_data)
    return PatientResponse.model_validate(patient)

@router.get("/me", response_model=PatientResponse)
async def patient_details(
    current_patient: Patient = Depends(get_patient_user),
    db: Session = Depends(get_db)
):
    """Details of the patient the token belongs to."""
    patient = PatientService(db).details(current_patient.id)
    return PatientResponse.model_validate(patient)

@router.get("/me/appointments", response_model=List[AppointmentResponse])
async def patient_appointments(
    condition: Optional[str] = None,
    doctor_name: Optional[str] = None,
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db)
):
    """The patient's appointments, filtered by 'past'/'future' and doctor name."""
    appointments = AppointmentService(db).patient_appointments(
        token, condition=condition, doctor_name=doctor_name
    )
    return [AppointmentResponse.from_appointment(a) for a in appointments]
