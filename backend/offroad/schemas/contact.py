"""Pydantic schemas for the contact inbox."""
from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel, EmailStr, Field

from offroad.models.contact import ContactStatus, ContactPriority
from offroad.schemas.common import PHONE_PATTERN


class ContactCreate(BaseModel):
    """Public contact form submission."""
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    subject: str = Field(..., min_length=5, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    priority: ContactPriority = ContactPriority.MEDIUM

    model_config = {"str_strip_whitespace": True}


class ContactStatusUpdate(BaseModel):
    status: ContactStatus
    admin_notes: Optional[str] = Field(None, max_length=1000)


class ContactPriorityUpdate(BaseModel):
    priority: ContactPriority


class ContactResponse(BaseModel):
    """Full contact record (admin view)."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    status: str
    priority: str
    admin_notes: Optional[str] = None
    response_date: Optional[datetime] = None
    whatsapp_sent: bool
    whatsapp_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ContactReceipt(BaseModel):
    """What the public submitter gets back."""
    id: int
    name: str
    subject: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class ContactSubmitResponse(BaseModel):
    message: str
    contact: ContactReceipt


class ContactListResponse(BaseModel):
    """Paginated inbox with per-status and per-priority counts."""
    items: List[ContactResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool
    status_counts: Dict[str, int]
    priority_counts: Dict[str, int]


class ContactActionResponse(BaseModel):
    message: str
    contact: ContactResponse


class MonthlyCount(BaseModel):
    year: int
    month: int
    count: int


class ContactDashboardStats(BaseModel):
    """Inbox summary for the admin dashboard."""
    total: int
    new: int
    urgent: int
    recent: int  # Received in the last 7 days
    status_counts: Dict[str, int]
    priority_counts: Dict[str, int]
    monthly_trend: List[MonthlyCount]
