"""Persistence primitives for registrations.

Nothing here commits. The lifecycle service combines these calls with the
event seat counter inside a single transaction.
"""
from datetime import datetime
from typing import Optional, List, Tuple
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from offroad.models.registration import Registration


class RegistrationStore:
    """Scoped reads and compare-and-set writes on registrations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self):
        return (
            select(Registration)
            .options(
                selectinload(Registration.event),
                selectinload(Registration.user)
            )
            .execution_options(populate_existing=True)
        )

    async def get(
        self,
        registration_id: int,
        scope_user_id: Optional[int] = None
    ) -> Optional[Registration]:
        """
        Get a registration with its event and user loaded.

        Args:
            registration_id: Registration ID
            scope_user_id: When set, only a registration owned by this user
                is returned

        Returns:
            Registration or None if absent or outside the scope
        """
        query = self._select().where(Registration.id == registration_id)
        if scope_user_id is not None:
            query = query.where(Registration.user_id == scope_user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_event_and_user(self, event_id: int, user_id: int) -> Optional[Registration]:
        result = await self.session.execute(
            select(Registration).where(
                Registration.event_id == event_id,
                Registration.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def add(self, registration: Registration) -> Registration:
        """Insert and flush so the unique constraint is checked now."""
        self.session.add(registration)
        await self.session.flush()
        return registration

    async def list(
        self,
        scope_user_id: Optional[int] = None,
        status: Optional[str] = None,
        event_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 10
    ) -> Tuple[List[Registration], int]:
        """List registrations, newest first. Returns (items, total)."""
        query = select(Registration)
        if scope_user_id is not None:
            query = query.where(Registration.user_id == scope_user_id)
        if status:
            query = query.where(Registration.registration_status == status)
        if event_id:
            query = query.where(Registration.event_id == event_id)

        total = (await self.session.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar()

        query = (
            query.options(
                selectinload(Registration.event),
                selectinload(Registration.user)
            )
            .order_by(Registration.registration_date.desc(), Registration.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def transition_status(
        self,
        registration_id: int,
        expected_status: str,
        new_status: str,
        notes: Optional[str] = None
    ) -> bool:
        """
        Move a registration to ``new_status`` only if it is still in
        ``expected_status``.

        Returns:
            True if the row changed, False if another writer got there first
        """
        values = {"registration_status": new_status}
        if notes is not None:
            values["notes"] = notes
        result = await self.session.execute(
            update(Registration)
            .where(
                Registration.id == registration_id,
                Registration.registration_status == expected_status
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_notes(self, registration_id: int, notes: str) -> bool:
        result = await self.session.execute(
            update(Registration)
            .where(Registration.id == registration_id)
            .values(notes=notes)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_payment(
        self,
        registration_id: int,
        payment_status: str,
        payment_date: Optional[datetime] = None
    ) -> bool:
        """Set the payment status; ``payment_date`` is only written when given."""
        values = {"payment_status": payment_status}
        if payment_date is not None:
            values["payment_date"] = payment_date
        result = await self.session.execute(
            update(Registration)
            .where(Registration.id == registration_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
