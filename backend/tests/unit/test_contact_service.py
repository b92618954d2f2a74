"""
Unit tests for ContactService.

Tests submission, inbox ordering and filtering, status handling and the
dashboard statistics.
"""

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.services.contact_service import ContactService
from offroad.services.errors import NotFoundError
from offroad.models.contact import Contact, ContactStatus, ContactPriority
from offroad.schemas.contact import ContactCreate


def _form(**overrides) -> ContactCreate:
    data = {
        "name": "Pat Visitor",
        "email": "Pat@Test.com",
        "phone": "+15550000777",
        "subject": "Private trip",
        "message": "Could you run a private trip for our club in spring?",
    }
    data.update(overrides)
    return ContactCreate(**data)


@pytest.mark.unit
@pytest.mark.asyncio
class TestContactSubmission:
    """Test the public contact form."""

    async def test_submit_contact(self, db_session: AsyncSession, mock_notifier):
        service = ContactService(db_session, notifier=mock_notifier)

        contact = await service.submit(_form())

        assert contact.id is not None
        assert contact.email == "pat@test.com"
        assert contact.status == ContactStatus.NEW.value
        assert contact.priority == ContactPriority.MEDIUM.value
        assert contact.whatsapp_sent is False
        mock_notifier.contact_submitted.assert_called_once_with(contact.id)

    async def test_notifier_failure_is_swallowed(self, db_session: AsyncSession, mock_notifier):
        mock_notifier.contact_submitted.side_effect = RuntimeError("scheduler down")
        service = ContactService(db_session, notifier=mock_notifier)

        contact = await service.submit(_form())

        assert contact.id is not None

    async def test_get_missing_contact(self, db_session: AsyncSession):
        service = ContactService(db_session)

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_contact(555)

        assert exc_info.value.message == "Contact with ID 555 not found"


@pytest.mark.unit
@pytest.mark.asyncio
class TestContactInbox:
    """Test listing and counts."""

    async def test_urgent_first_then_newest(self, db_session: AsyncSession):
        service = ContactService(db_session)
        low = await service.submit(_form(subject="Low priority", priority="low"))
        urgent = await service.submit(_form(subject="Stuck on trail", priority="urgent"))
        medium_old = await service.submit(_form(subject="Medium older"))
        medium_new = await service.submit(_form(subject="Medium newer"))

        contacts, total = await service.list_contacts()

        assert total == 4
        assert [c.id for c in contacts] == [urgent.id, medium_new.id, medium_old.id, low.id]

    async def test_filters_and_search(self, db_session: AsyncSession):
        service = ContactService(db_session)
        await service.submit(_form(subject="Winch rental question"))
        await service.submit(_form(subject="Refund request", priority="high"))
        closed = await service.submit(_form(subject="Thanks for the trip"))
        await service.update_status(closed.id, ContactStatus.CLOSED)

        _, total = await service.list_contacts(search="winch")
        assert total == 1

        _, total = await service.list_contacts(priority="high")
        assert total == 1

        contacts, total = await service.list_contacts(status="closed")
        assert total == 1
        assert contacts[0].id == closed.id

    async def test_counts_include_every_value(self, db_session: AsyncSession):
        service = ContactService(db_session)
        await service.submit(_form(priority="urgent"))

        status_counts = await service.status_counts()
        priority_counts = await service.priority_counts()

        assert status_counts == {"new": 1, "in-progress": 0, "resolved": 0, "closed": 0}
        assert priority_counts == {"low": 0, "medium": 0, "high": 0, "urgent": 1}


@pytest.mark.unit
@pytest.mark.asyncio
class TestContactUpdates:
    """Test admin changes."""

    async def test_resolving_sets_response_date(self, db_session: AsyncSession):
        service = ContactService(db_session)
        contact = await service.submit(_form())

        in_progress = await service.update_status(contact.id, ContactStatus.IN_PROGRESS, "Called back")
        assert in_progress.response_date is None
        assert in_progress.admin_notes == "Called back"

        resolved = await service.update_status(contact.id, ContactStatus.RESOLVED)
        assert resolved.response_date is not None
        assert resolved.admin_notes == "Called back"

    async def test_update_priority(self, db_session: AsyncSession):
        service = ContactService(db_session)
        contact = await service.submit(_form())

        updated = await service.update_priority(contact.id, ContactPriority.URGENT)

        assert updated.priority == "urgent"

    async def test_delete_contact(self, db_session: AsyncSession):
        service = ContactService(db_session)
        contact = await service.submit(_form())
        contact_id = contact.id

        await service.delete_contact(contact_id)

        with pytest.raises(NotFoundError):
            await service.get_contact(contact_id)


@pytest.mark.unit
@pytest.mark.asyncio
class TestContactDashboard:
    """Test dashboard statistics."""

    async def test_dashboard_stats(self, db_session: AsyncSession):
        service = ContactService(db_session)
        now = datetime.now(timezone.utc)
        await service.submit(_form(priority="urgent"))
        await service.submit(_form())
        db_session.add(Contact(
            name="Old Timer",
            email="old@test.com",
            subject="Last season",
            message="Message from a few months back.",
            status=ContactStatus.CLOSED.value,
            priority=ContactPriority.LOW.value,
            created_at=now - timedelta(days=95),
        ))
        await db_session.commit()

        stats = await service.dashboard_stats(now=now)

        assert stats["total"] == 3
        assert stats["new"] == 2
        assert stats["urgent"] == 1
        assert stats["recent"] == 2
        assert stats["status_counts"]["closed"] == 1

        trend = stats["monthly_trend"]
        assert len(trend) == 12
        assert (trend[-1]["year"], trend[-1]["month"]) == (now.year, now.month)
        assert trend[-1]["count"] == 2
        assert sum(month["count"] for month in trend) == 3
