from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from app.core.clock import TimePolicy
from app.models.appointment import Appointment, AppointmentStatus, ServiceType, duration_for
from app.services.appointment_store import AppointmentStore


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime


def generate_slots(d: date, open_time: datetime, close_time: datetime, duration: timedelta) -> list[Slot]:
    """Back-to-back slots of ``duration`` from open time; none runs past close.

    ``d`` names the day the window belongs to; open/close are already instants on it.
    """
    slots: list[Slot] = []
    if duration <= timedelta(0):
        return slots
    current = open_time
    while current + duration <= close_time:
        slots.append(Slot(start=current, end=current + duration))
        current += duration
    return slots


def resolve_free_slots(
    groomer_id: int | None,
    d: date | None,
    duration: timedelta | None,
    appointments: Iterable[Appointment],
    policy: TimePolicy,
    exclude_id: int | None = None,
) -> list[Slot]:
    """Free slots for one groomer on one day.

    Missing or invalid inputs give an empty list instead of an error. Appointments
    of other groomers, other days, non-confirmed ones and ``exclude_id`` (the
    appointment being rescheduled) do not block anything. Touching endpoints are
    not an overlap. On the current day slots that already started are dropped;
    earlier days have nothing to offer.
    """
    if not groomer_id or not isinstance(d, date) or not duration or duration <= timedelta(0):
        return []

    today = policy.today()
    if d < today:
        return []

    open_time, close_time = policy.business_hours(d)
    candidates = generate_slots(d, open_time, close_time, duration)

    busy = [
        a
        for a in appointments
        if a.groomer_id == groomer_id
        and a.status == AppointmentStatus.confirmed
        and a.id != exclude_id
        and policy.local_date(a.start_time) == d
    ]
    free = [s for s in candidates if not any(a.overlaps(s.start, s.end) for a in busy)]

    if d == today:
        now = policy.now()
        free = [s for s in free if s.start > now]
    return sorted(free, key=lambda s: s.start)


async def get_available_slots(
    store: AppointmentStore,
    groomer_id: int,
    d: date,
    service_type: ServiceType,
    exclude_id: int | None = None,
) -> list[Slot]:
    """Fresh read from the store on every call; nothing is cached."""
    duration = duration_for(service_type)
    appointments = await store.list_by_groomer_and_date(groomer_id, d)
    return resolve_free_slots(groomer_id, d, duration, appointments, store.policy, exclude_id=exclude_id)
