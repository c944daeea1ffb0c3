from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional

from ..core.slots import validate_slot_labels

PHONE_PATTERN = r"^\d{10}$"

class DoctorBase(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    specialty: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    available_times: List[str] = Field(default_factory=list)

    @field_validator("available_times")
    @classmethod
    def check_slot_labels(cls, value: List[str]) -> List[str]:
        return validate_slot_labels(value)

class DoctorCreate(DoctorBase):
    password: str = Field(..., min_length=6)

class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    specialty: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    password: Optional[str] = Field(None, min_length=6)
    available_times: Optional[List[str]] = None

    @field_validator("available_times")
    @classmethod
    def check_slot_labels(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        return validate_slot_labels(value)

class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty: str
    email: str
    phone: Optional[str] = None
    available_times: List[str]

class AvailabilityResponse(BaseModel):
    doctor_id: int
    date: str
    availability: List[str]
