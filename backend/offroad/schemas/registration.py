"""Pydantic schemas for event registrations."""
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator

from offroad.models.registration import RegistrationStatus, PaymentStatus, ExperienceLevel
from offroad.schemas.common import PHONE_PATTERN

MIN_VEHICLE_YEAR = 1900


class EmergencyContact(BaseModel):
    """Person to call if something goes wrong on the trail."""
    name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    relationship: str = Field(..., min_length=1, max_length=50)

    model_config = {"str_strip_whitespace": True}


class VehicleDetails(BaseModel):
    """Vehicle the participant brings."""
    make: str = Field(..., min_length=1, max_length=50)
    model: str = Field(..., min_length=1, max_length=50)
    year: int
    modifications: str = Field("None", max_length=500)

    model_config = {"str_strip_whitespace": True}

    @field_validator("year")
    @classmethod
    def validate_year(cls, value: int) -> int:
        max_year = datetime.now(timezone.utc).year + 1
        if value < MIN_VEHICLE_YEAR or value > max_year:
            raise ValueError(f"Vehicle year must be between {MIN_VEHICLE_YEAR} and {max_year}")
        return value


class ParticipantDetails(BaseModel):
    """Participant-supplied details captured at registration time."""
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    emergency_contact: EmergencyContact
    medical_conditions: str = Field("None", max_length=500)
    experience: ExperienceLevel
    vehicle_details: VehicleDetails
    additional_notes: Optional[str] = Field(None, max_length=500)

    model_config = {"str_strip_whitespace": True}

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class RegistrationCreate(BaseModel):
    """Schema for registering for an event."""
    event_id: int = Field(..., ge=1)
    participant_details: ParticipantDetails
    waiver_signed: bool = False


class RegistrationStatusUpdate(BaseModel):
    """Admin registration status change."""
    status: RegistrationStatus
    notes: Optional[str] = Field(None, max_length=500)


class PaymentStatusUpdate(BaseModel):
    """Admin payment status change."""
    payment_status: PaymentStatus


class EventSummary(BaseModel):
    """Event fields embedded in a registration."""
    id: int
    title: str
    date: datetime
    price: float
    difficulty: str
    status: str
    location_address: str

    model_config = {
        "from_attributes": True
    }


class UserSummary(BaseModel):
    """Registrant fields embedded in a registration."""
    id: int
    name: str
    email: str
    phone: str

    model_config = {
        "from_attributes": True
    }


class RegistrationResponse(BaseModel):
    """Registration response schema."""
    id: int
    event_id: int
    user_id: int
    participant_details: ParticipantDetails
    registration_status: str
    payment_status: str
    registration_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_amount: float
    waiver_signed: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    event: Optional[EventSummary] = None
    user: Optional[UserSummary] = None

    model_config = {
        "from_attributes": True
    }


class RegistrationListResponse(BaseModel):
    """Paginated registration list."""
    items: List[RegistrationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


class RegistrationActionResponse(BaseModel):
    """Response for create/status/payment/cancel operations."""
    message: str
    registration: RegistrationResponse
