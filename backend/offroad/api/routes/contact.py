"""Contact form and admin inbox routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from offroad.dependencies import get_current_admin_user
from offroad.api.utils.pagination import page_meta
from offroad.api.utils.dependencies import get_contact_service
from offroad.models.contact import ContactStatus, ContactPriority
from offroad.models.user import User
from offroad.services.contact_service import ContactService
from offroad.schemas.common import MessageResponse
from offroad.schemas.contact import (
    ContactCreate,
    ContactStatusUpdate,
    ContactPriorityUpdate,
    ContactResponse,
    ContactReceipt,
    ContactSubmitResponse,
    ContactListResponse,
    ContactActionResponse,
    ContactDashboardStats,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post("", response_model=ContactSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    data: ContactCreate,
    service: ContactService = Depends(get_contact_service)
):
    """Public contact form."""
    contact = await service.submit(data)
    return ContactSubmitResponse(
        message="Thank you for contacting us. We will get back to you soon.",
        contact=ContactReceipt.model_validate(contact)
    )


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    status_filter: Optional[ContactStatus] = Query(None, alias="status"),
    priority: Optional[ContactPriority] = None,
    search: Optional[str] = Query(None, max_length=100),
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    """List the inbox, most pressing first (admin only)."""
    contacts, total = await service.list_contacts(
        page=page,
        page_size=limit,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        search=search
    )
    return ContactListResponse(
        items=[ContactResponse.model_validate(c) for c in contacts],
        status_counts=await service.status_counts(),
        priority_counts=await service.priority_counts(),
        **page_meta(total, page, limit)
    )


@router.get("/stats/dashboard", response_model=ContactDashboardStats)
async def contact_dashboard(
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    """Inbox statistics for the admin dashboard."""
    return ContactDashboardStats(**await service.dashboard_stats())


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    contact = await service.get_contact(contact_id)
    return ContactResponse.model_validate(contact)


@router.patch("/{contact_id}/status", response_model=ContactActionResponse)
async def update_contact_status(
    contact_id: int,
    data: ContactStatusUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    contact = await service.update_status(contact_id, data.status, data.admin_notes)
    return ContactActionResponse(
        message="Contact status updated successfully",
        contact=ContactResponse.model_validate(contact)
    )


@router.patch("/{contact_id}/priority", response_model=ContactActionResponse)
async def update_contact_priority(
    contact_id: int,
    data: ContactPriorityUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    contact = await service.update_priority(contact_id, data.priority)
    return ContactActionResponse(
        message="Contact priority updated successfully",
        contact=ContactResponse.model_validate(contact)
    )


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: int,
    current_user: User = Depends(get_current_admin_user),
    service: ContactService = Depends(get_contact_service)
):
    await service.delete_contact(contact_id)
    return MessageResponse(message="Contact deleted successfully")
