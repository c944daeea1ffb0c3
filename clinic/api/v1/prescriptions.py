from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_doctor_user
from ...services.prescription_service import PrescriptionService
from ...schemas.prescription import PrescriptionCreate, PrescriptionResponse

router = APIRouter(
    prefix="/prescriptions",
    tags=["Prescriptions"],
    dependencies=[Depends(get_doctor_user)]
)

@router.post("", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def save_prescription(
    prescription_data: PrescriptionCreate,
    db: Session = Depends(get_db)
):
    """Save a prescription (doctor only)."""
    prescription = PrescriptionService(db).save(prescription_data)
    return PrescriptionResponse.model_validate(prescription)

@router.get("/{appointment_id}", response_model=List[PrescriptionResponse])
async def prescriptions_for_appointment(
    appointment_id: int,
    db: Session = Depends(get_db)
):
    """Prescriptions written for an appointment (doctor only)."""
    prescriptions = PrescriptionService(db).by_appointment(appointment_id)
    return [PrescriptionResponse.model_validate(p) for p in prescriptions]
