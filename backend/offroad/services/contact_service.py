"""Contact inbox service."""
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Tuple, Dict
from sqlalchemy import select, func, case, or_
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.models.contact import Contact, ContactStatus, ContactPriority, PRIORITY_RANK
from offroad.schemas.contact import ContactCreate
from offroad.services.errors import NotFoundError
from offroad.services.rules import as_utc

logger = logging.getLogger(__name__)

RECENT_DAYS = 7
TREND_MONTHS = 12

_priority_rank = case(PRIORITY_RANK, value=Contact.priority, else_=0)


def _month_start(value: datetime, months_back: int) -> datetime:
    """First instant of the month ``months_back`` months before ``value``."""
    year, month = value.year, value.month - months_back
    while month < 1:
        month += 12
        year -= 1
    return value.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)


class ContactService:
    """Service for the public contact form and the admin inbox."""

    def __init__(self, session: AsyncSession, notifier=None):
        self.session = session
        self.notifier = notifier

    async def submit(self, data: ContactCreate) -> Contact:
        """Store a contact form submission and notify the company."""
        contact = Contact(
            name=data.name,
            email=data.email.lower(),
            phone=data.phone,
            subject=data.subject,
            message=data.message,
            priority=data.priority.value,
            status=ContactStatus.NEW.value,
        )
        self.session.add(contact)
        await self.session.commit()
        await self.session.refresh(contact)

        logger.info(f"Contact {contact.id} submitted by {contact.email}")

        if self.notifier is not None:
            try:
                self.notifier.contact_submitted(contact.id)
            except Exception as e:
                logger.error(f"Failed to dispatch notification for contact {contact.id}: {e}")

        return contact

    async def get_contact(self, contact_id: int) -> Contact:
        result = await self.session.execute(
            select(Contact)
            .where(Contact.id == contact_id)
            .execution_options(populate_existing=True)
        )
        contact = result.scalar_one_or_none()
        if not contact:
            raise NotFoundError("Contact", contact_id)
        return contact

    async def list_contacts(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None
    ) -> Tuple[List[Contact], int]:
        """
        List contacts, most pressing first.

        Sorted by priority (urgent first), then newest first.

        Returns:
            Tuple of (contacts, total_count)
        """
        query = select(Contact)
        if status:
            query = query.where(Contact.status == status)
        if priority:
            query = query.where(Contact.priority == priority)
        if search:
            query = query.where(
                or_(
                    Contact.name.icontains(search, autoescape=True),
                    Contact.email.icontains(search, autoescape=True),
                    Contact.subject.icontains(search, autoescape=True),
                    Contact.message.icontains(search, autoescape=True),
                )
            )

        total = (await self.session.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar()

        offset = (page - 1) * page_size
        query = (
            query.order_by(_priority_rank.desc(), Contact.created_at.desc(), Contact.id.desc())
            .offset(offset)
            .limit(page_size)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def _count_by(self, column, values) -> Dict[str, int]:
        """Count contacts grouped by a column, with every known value present."""
        result = await self.session.execute(
            select(column, func.count(Contact.id)).group_by(column)
        )
        counts = {row[0]: row[1] for row in result.all()}
        return {member.value: counts.get(member.value, 0) for member in values}

    async def status_counts(self) -> Dict[str, int]:
        return await self._count_by(Contact.status, ContactStatus)

    async def priority_counts(self) -> Dict[str, int]:
        return await self._count_by(Contact.priority, ContactPriority)

    async def update_status(
        self,
        contact_id: int,
        status: ContactStatus,
        admin_notes: Optional[str] = None
    ) -> Contact:
        """Change the inbox status; resolving or closing stamps the response date."""
        contact = await self.get_contact(contact_id)
        contact.status = status.value
        if admin_notes is not None:
            contact.admin_notes = admin_notes
        if status in (ContactStatus.RESOLVED, ContactStatus.CLOSED):
            contact.response_date = datetime.now(timezone.utc)

        await self.session.commit()
        await self.session.refresh(contact)
        logger.info(f"Contact {contact_id} status set to {contact.status}")
        return contact

    async def update_priority(self, contact_id: int, priority: ContactPriority) -> Contact:
        contact = await self.get_contact(contact_id)
        contact.priority = priority.value
        await self.session.commit()
        await self.session.refresh(contact)
        return contact

    async def delete_contact(self, contact_id: int) -> None:
        contact = await self.get_contact(contact_id)
        await self.session.delete(contact)
        await self.session.commit()
        logger.info(f"Deleted contact {contact_id}")

    async def dashboard_stats(self, now: Optional[datetime] = None) -> dict:
        """
        Summarize the inbox for the admin dashboard.

        Returns:
            Dictionary with total, new, urgent and recent counts, status and
            priority breakdowns and a per-month trend for the last 12 months
            (oldest month first).
        """
        now = as_utc(now or datetime.now(timezone.utc))

        total = (await self.session.execute(select(func.count(Contact.id)))).scalar()
        status_counts = await self.status_counts()
        priority_counts = await self.priority_counts()

        recent = (await self.session.execute(
            select(func.count(Contact.id)).where(
                Contact.created_at >= now - timedelta(days=RECENT_DAYS)
            )
        )).scalar()

        trend_start = _month_start(now, TREND_MONTHS - 1)
        created = (await self.session.execute(
            select(Contact.created_at).where(Contact.created_at >= trend_start)
        )).scalars().all()
        buckets = Counter(
            (as_utc(value).year, as_utc(value).month) for value in created if value
        )

        monthly_trend = []
        for months_back in range(TREND_MONTHS - 1, -1, -1):
            month = _month_start(now, months_back)
            monthly_trend.append({
                "year": month.year,
                "month": month.month,
                "count": buckets.get((month.year, month.month), 0),
            })

        return {
            "total": total,
            "new": status_counts[ContactStatus.NEW.value],
            "urgent": priority_counts[ContactPriority.URGENT.value],
            "recent": recent,
            "status_counts": status_counts,
            "priority_counts": priority_counts,
            "monthly_trend": monthly_trend,
        }
