"""Unit tests for registration API routes.

Tests route-level argument passing and response formatting.
All service dependencies are mocked to isolate route behavior.
"""

import pytest
from datetime import datetime, timezone, timedelta

from offroad.api.routes.registrations import (
    create_registration,
    list_registrations,
    get_registration,
    update_registration_status,
    update_payment_status,
    cancel_registration,
)
from offroad.schemas.registration import (
    RegistrationCreate,
    RegistrationStatusUpdate,
    PaymentStatusUpdate,
)
from offroad.services.errors import ForbiddenError, ValidationError
from offroad.models.user import User, UserRole
from offroad.models.event import Event
from offroad.models.registration import Registration, RegistrationStatus, PaymentStatus


def _user(user_id=2, role=UserRole.USER):
    return User(
        id=user_id,
        name="Rita Rider",
        email="rider@test.com",
        phone="+15550000002",
        role=role.value,
        is_active=True,
    )


def _event():
    now = datetime.now(timezone.utc)
    return Event(
        id=10,
        title="Desert Dunes Adventure",
        description="A full day of guided dune driving.",
        short_description="Guided dune driving day",
        date=now + timedelta(days=30),
        registration_deadline=now + timedelta(days=15),
        duration="1 day",
        location_address="Red Rock Desert Base Camp",
        price=150.0,
        max_participants=10,
        current_participants=1,
        difficulty="Intermediate",
        status="active",
    )


def _registration(participant_details, status="pending", user=None):
    user = user or _user()
    return Registration(
        id=100,
        event_id=10,
        user_id=user.id,
        participant_details=participant_details,
        registration_status=status,
        payment_status="pending",
        payment_amount=150.0,
        waiver_signed=True,
        registration_date=datetime.now(timezone.utc),
        event=_event(),
        user=user,
    )


@pytest.mark.unit
@pytest.mark.asyncio
class TestRegistrationUserRoutes:
    """Test routes available to any signed-in user."""

    async def test_create_registration(self, mocker, participant_details):
        """Test the caller is registered as themselves."""
        user = _user()
        mock_service = mocker.Mock()
        mock_service.register = mocker.AsyncMock(return_value=_registration(participant_details))

        data = RegistrationCreate(
            event_id=10,
            participant_details=participant_details,
            waiver_signed=True
        )
        result = await create_registration(data=data, current_user=user, service=mock_service)

        assert result.message == "Registration successful"
        assert result.registration.id == 100
        assert result.registration.event.title == "Desert Dunes Adventure"
        assert result.registration.user.email == "rider@test.com"

        kwargs = mock_service.register.call_args.kwargs
        assert kwargs["event_id"] == 10
        assert kwargs["user_id"] == user.id
        assert kwargs["waiver_signed"] is True
        assert kwargs["participant_details"].email == "rita.rider@test.com"

    async def test_create_registration_propagates_full_event(self, mocker, participant_details):
        mock_service = mocker.Mock()
        mock_service.register = mocker.AsyncMock(side_effect=ValidationError("Event is full"))

        data = RegistrationCreate(event_id=10, participant_details=participant_details)
        with pytest.raises(ValidationError):
            await create_registration(data=data, current_user=_user(), service=mock_service)

    async def test_list_scoped_for_regular_user(self, mocker, participant_details):
        mock_service = mocker.Mock()
        mock_service.list_registrations = mocker.AsyncMock(
            return_value=([_registration(participant_details)], 11)
        )

        result = await list_registrations(
            page=2, limit=5, status_filter=RegistrationStatus.PENDING, event_id=None,
            current_user=_user(), service=mock_service
        )

        assert result.total == 11
        assert result.page == 2
        assert result.total_pages == 3
        assert result.has_next is True
        assert result.has_prev is True
        mock_service.list_registrations.assert_called_once_with(
            requester_id=2,
            requester_is_admin=False,
            status="pending",
            event_id=None,
            page=2,
            page_size=5
        )

    async def test_get_registration_passes_scope(self, mocker, participant_details):
        mock_service = mocker.Mock()
        mock_service.get_registration = mocker.AsyncMock(return_value=_registration(participant_details))
        admin = _user(user_id=1, role=UserRole.ADMIN)

        result = await get_registration(registration_id=100, current_user=admin, service=mock_service)

        assert result.id == 100
        mock_service.get_registration.assert_called_once_with(
            100, requester_id=1, requester_is_admin=True
        )

    async def test_cancel_registration(self, mocker, participant_details):
        mock_service = mocker.Mock()
        mock_service.cancel = mocker.AsyncMock(
            return_value=_registration(participant_details, status="cancelled")
        )

        result = await cancel_registration(registration_id=100, current_user=_user(), service=mock_service)

        assert result.message == "Registration cancelled successfully"
        assert result.registration.registration_status == "cancelled"

    async def test_cancel_forbidden_propagates(self, mocker):
        mock_service = mocker.Mock()
        mock_service.cancel = mocker.AsyncMock(side_effect=ForbiddenError("Not authorized"))

        with pytest.raises(ForbiddenError):
            await cancel_registration(registration_id=100, current_user=_user(3), service=mock_service)


@pytest.mark.unit
@pytest.mark.asyncio
class TestRegistrationAdminRoutes:
    """Test admin-only routes."""

    async def test_update_status(self, mocker, participant_details):
        mock_service = mocker.Mock()
        mock_service.change_status = mocker.AsyncMock(
            return_value=_registration(participant_details, status="confirmed")
        )
        admin = _user(user_id=1, role=UserRole.ADMIN)

        result = await update_registration_status(
            registration_id=100,
            data=RegistrationStatusUpdate(status="confirmed", notes="Deposit received"),
            current_user=admin,
            service=mock_service
        )

        assert result.registration.registration_status == "confirmed"
        mock_service.change_status.assert_called_once_with(
            100, RegistrationStatus.CONFIRMED, "Deposit received"
        )

    async def test_update_payment(self, mocker, participant_details):
        registration = _registration(participant_details)
        registration.payment_status = "paid"
        mock_service = mocker.Mock()
        mock_service.update_payment = mocker.AsyncMock(return_value=registration)

        result = await update_payment_status(
            registration_id=100,
            data=PaymentStatusUpdate(payment_status="paid"),
            current_user=_user(user_id=1, role=UserRole.ADMIN),
            service=mock_service
        )

        assert result.message == "Payment status updated successfully"
        assert result.registration.payment_status == "paid"
        mock_service.update_payment.assert_called_once_with(100, PaymentStatus.PAID)
