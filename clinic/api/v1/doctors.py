from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...core.errors import AuthenticationError
from ...core.security import UserRole
from ...api.deps import get_access_gate, get_admin_user, get_bearer_token
from ...services.access_gate import AccessGate
from ...services.availability import AvailabilityEngine
from ...services.doctor_service import DoctorService
from ...schemas.doctor import (
    AvailabilityResponse, DoctorCreate, DoctorResponse, DoctorUpdate
)

router = APIRouter(prefix="/doctors", tags=["Doctors"])

@router.get("", response_model=List[DoctorResponse])
async def list_doctors(
    name: Optional[str] = None,
    specialty: Optional[str] = None,
    time: Optional[str] = Query(None, description="AM or PM"),
    db: Session = Depends(get_db)
):
    """List doctors, optionally filtered by name, specialty and AM/PM availability."""
    doctors = DoctorService(db).filter(name=name, specialty=specialty, time=time)
    return [DoctorResponse.model_validate(doctor) for doctor in doctors]

@router.get("/{doctor_id}/availability", response_model=AvailabilityResponse)
async def doctor_availability(
    doctor_id: int,
    date: date,
    role: UserRole = UserRole.PATIENT,
    token: Optional[str] = Depends(get_bearer_token),
    gate: AccessGate = Depends(get_access_gate),
    db: Session = Depends(get_db)
):
    """Free slots of a doctor on a date. Any role may ask, with a token for that role."""
    if not gate.authorize(token, role).allowed:
        raise AuthenticationError()

    slots = AvailabilityEngine(db).availability(doctor_id, date)
    return AvailabilityResponse(doctor_id=doctor_id, date=date.isoformat(), availability=slots)

@router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def add_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    _admin = Depends(get_admin_user)
):
    """Add a doctor (admin only)."""
    doctor = DoctorService(db).create(doctor_data)
    return DoctorResponse.model_validate(doctor)

@router.put("/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: int,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db),
    _admin = Depends(get_admin_user)
):
    """Update a doctor's details (admin only)."""
    doctor = DoctorService(db).update(doctor_id, doctor_data)
    return DoctorResponse.model_validate(doctor)

@router.delete("/{doctor_id}")
async def delete_doctor(
    doctor_id: int,
    db: Session = Depends(get_db),
    _admin = Depends(get_admin_user)
):
    """Delete a doctor and all of the doctor's appointments (admin only)."""
    DoctorService(db).delete(doctor_id)
    return {"message": "Doctor deleted successfully"}
