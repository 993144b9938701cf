"""AppointmentStore - database operations for appointments"""

import logging
from datetime import date

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import TimePolicy, utc_naive_now
from app.core.exceptions import ConflictError, NotFoundError
from app.models.appointment import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)

CONFLICT_DETAIL = "This time slot is no longer available. Please choose another time."


class AppointmentStore:
    """Repository over one session; every write is flushed, never committed here."""

    def __init__(self, session: AsyncSession, policy: TimePolicy):
        self.session = session
        self.policy = policy

    async def get(self, appointment_id: int) -> Appointment:
        result = await self.session.execute(select(Appointment).where(Appointment.id == appointment_id))
        appointment = result.scalar_one_or_none()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    async def list_by_groomer_and_date(self, groomer_id: int, d: date) -> list[Appointment]:
        """All of the groomer's appointments starting on local day ``d``, any status."""
        start, end = self.policy.day_bounds(d)
        result = await self.session.execute(
            select(Appointment)
            .where(
                Appointment.groomer_id == groomer_id,
                Appointment.start_time >= start,
                Appointment.start_time < end,
            )
            .order_by(Appointment.start_time)
        )
        return list(result.scalars().all())

    async def list_by_owner(
        self, owner_id: int, status: AppointmentStatus | None = None
    ) -> list[Appointment]:
        q = select(Appointment).where(Appointment.owner_id == owner_id).order_by(Appointment.start_time)
        if status:
            q = q.where(Appointment.status == status)
        result = await self.session.execute(q)
        return list(result.scalars().all())

    async def list_by_groomer(
        self, groomer_id: int, status: AppointmentStatus | None = None
    ) -> list[Appointment]:
        q = select(Appointment).where(Appointment.groomer_id == groomer_id).order_by(Appointment.start_time)
        if status:
            q = q.where(Appointment.status == status)
        result = await self.session.execute(q)
        return list(result.scalars().all())

    async def lock_groomer(self, groomer_id: int) -> None:
        """Serialize check-then-write for one groomer until the transaction ends.

        Must run before the availability read. On SQLite a no-op write opens the
        transaction and takes the database RESERVED lock, so a second booker
        waits here until the first commits or rolls back.
        """
        dialect = self.session.bind.dialect.name
        if dialect == "postgresql":
            await self.session.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": groomer_id})
        elif dialect == "sqlite":
            await self.session.execute(text("UPDATE users SET id = id WHERE id = :key"), {"key": groomer_id})

    async def insert(self, appointment: Appointment) -> Appointment:
        self.session.add(appointment)
        await self._flush()
        await self.session.refresh(appointment)
        return appointment

    async def update(self, appointment: Appointment, **fields) -> Appointment:
        for key, value in fields.items():
            setattr(appointment, key, value)
        appointment.updated_at = utc_naive_now()
        self.session.add(appointment)
        await self._flush()
        await self.session.refresh(appointment)
        return appointment

    async def set_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment:
        appointment = await self.get(appointment_id)
        return await self.update(appointment, status=status)

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Exclusion constraint on overlapping confirmed rows (PostgreSQL)
            logger.warning("Appointment write rejected by store: %s", e.orig)
            raise ConflictError(CONFLICT_DETAIL) from e
