"""Registration API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from offroad.dependencies import get_current_active_user, get_current_admin_user
from offroad.api.utils.pagination import page_meta
from offroad.api.utils.dependencies import get_registration_service
from offroad.models.registration import RegistrationStatus
from offroad.models.user import User
from offroad.services.registration_service import RegistrationService
from offroad.schemas.registration import (
    RegistrationCreate,
    RegistrationStatusUpdate,
    PaymentStatusUpdate,
    RegistrationResponse,
    RegistrationListResponse,
    RegistrationActionResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/registrations", tags=["Registrations"])


@router.post("", response_model=RegistrationActionResponse, status_code=status.HTTP_201_CREATED)
async def create_registration(
    data: RegistrationCreate,
    current_user: User = Depends(get_current_active_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Register the caller for an event.

    Takes one seat. The company is notified on WhatsApp after the
    registration is stored; a failed notification does not fail the request.
    """
    registration = await service.register(
        event_id=data.event_id,
        user_id=current_user.id,
        participant_details=data.participant_details,
        waiver_signed=data.waiver_signed
    )
    return RegistrationActionResponse(
        message="Registration successful",
        registration=RegistrationResponse.model_validate(registration)
    )


@router.get("", response_model=RegistrationListResponse)
async def list_registrations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    status_filter: Optional[RegistrationStatus] = Query(None, alias="status"),
    event_id: Optional[int] = Query(None, ge=1),
    current_user: User = Depends(get_current_active_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """List registrations. Users see their own; admins see all."""
    registrations, total = await service.list_registrations(
        requester_id=current_user.id,
        requester_is_admin=current_user.is_admin,
        status=status_filter.value if status_filter else None,
        event_id=event_id,
        page=page,
        page_size=limit
    )
    return RegistrationListResponse(
        items=[RegistrationResponse.model_validate(r) for r in registrations],
        **page_meta(total, page, limit)
    )


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def get_registration(
    registration_id: int,
    current_user: User = Depends(get_current_active_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """Get one registration. Another user's registration reads as not found."""
    registration = await service.get_registration(
        registration_id,
        requester_id=current_user.id,
        requester_is_admin=current_user.is_admin
    )
    return RegistrationResponse.model_validate(registration)


@router.patch("/{registration_id}/status", response_model=RegistrationActionResponse)
async def update_registration_status(
    registration_id: int,
    data: RegistrationStatusUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """Move a registration through its lifecycle (admin only)."""
    registration = await service.change_status(registration_id, data.status, data.notes)
    logger.info(
        f"Admin {current_user.id} set registration {registration_id} to {data.status.value}"
    )
    return RegistrationActionResponse(
        message="Registration status updated successfully",
        registration=RegistrationResponse.model_validate(registration)
    )


@router.patch("/{registration_id}/payment", response_model=RegistrationActionResponse)
async def update_payment_status(
    registration_id: int,
    data: PaymentStatusUpdate,
    current_user: User = Depends(get_current_admin_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """Update a registration's payment status (admin only)."""
    registration = await service.update_payment(registration_id, data.payment_status)
    return RegistrationActionResponse(
        message="Payment status updated successfully",
        registration=RegistrationResponse.model_validate(registration)
    )


@router.delete("/{registration_id}", response_model=RegistrationActionResponse)
async def cancel_registration(
    registration_id: int,
    current_user: User = Depends(get_current_active_user),
    service: RegistrationService = Depends(get_registration_service)
):
    """Cancel a registration (owner or admin), no later than the cutoff before the event."""
    registration = await service.cancel(
        registration_id,
        requester_id=current_user.id,
        requester_is_admin=current_user.is_admin
    )
    return RegistrationActionResponse(
        message="Registration cancelled successfully",
        registration=RegistrationResponse.model_validate(registration)
    )
