"""Booking lifecycle: create, reschedule, cancel and complete appointments.

Appointments enter ``confirmed`` directly on create. Reschedule is a
confirmed -> confirmed transition; cancelled and completed are terminal. Every
operation runs inside the caller's session transaction, so a raised
``BookingError`` leaves nothing written once the session rolls back.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import TimePolicy, to_naive_utc
from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvalidStateTransition,
    ModificationWindowExpired,
    PermissionDeniedError,
    ValidationError,
)
from app.models.appointment import Appointment, AppointmentStatus, ServiceType, duration_for
from app.models.user import User, UserRole
from app.services.appointment_store import CONFLICT_DETAIL, AppointmentStore
from app.services.directory_service import get_groomer, get_pet
from app.services.slot_service import get_available_slots

logger = logging.getLogger(__name__)


def can_modify(
    appointment: Appointment, now: datetime, window_hours: int = settings.modification_window_hours
) -> bool:
    """Upcoming, confirmed and strictly more than ``window_hours`` away."""
    hours_difference = (appointment.start_time - now) / timedelta(hours=1)
    is_upcoming = appointment.start_time > now
    is_confirmed = appointment.status == AppointmentStatus.confirmed
    return is_upcoming and is_confirmed and hours_difference > window_hours


def _ensure_modifiable(appointment: Appointment, policy: TimePolicy) -> None:
    if appointment.status != AppointmentStatus.confirmed:
        raise InvalidStateTransition(
            f"Cannot modify an appointment that is {AppointmentStatus(appointment.status).value}"
        )
    if not can_modify(appointment, policy.now()):
        raise ModificationWindowExpired(
            f"Cannot modify appointments less than {settings.modification_window_hours} hours before start time"
        )


def _parse_service_type(service_type: ServiceType | str | None) -> ServiceType:
    if not service_type:
        raise ValidationError("Missing required appointment information")
    try:
        return ServiceType(service_type)
    except ValueError:
        raise ValidationError("Service type must be either 'basic' or 'full'") from None


def _ensure_owner(user: User, appointment: Appointment | None = None) -> None:
    if user.role != UserRole.owner:
        raise PermissionDeniedError("Only pet owners can book appointments")
    if appointment is not None and appointment.owner_id != user.id:
        raise PermissionDeniedError("Not authorized to update this appointment")


async def _claim_slot(
    session: AsyncSession,
    owner: User,
    pet_id: int | None,
    groomer_id: int | None,
    service_type: ServiceType | str | None,
    start_time: datetime | None,
    policy: TimePolicy,
    exclude_id: int | None = None,
) -> tuple[ServiceType, datetime, datetime]:
    """Validate a requested booking and re-check it against current availability.

    Holds the groomer's lock for the rest of the transaction. Returns
    (service_type, start, end) of a slot that is free right now.
    """
    if not pet_id or not groomer_id or not start_time:
        raise ValidationError("Missing required appointment information")
    service = _parse_service_type(service_type)
    start = to_naive_utc(start_time)
    end = start + duration_for(service)

    pet = await get_pet(session, pet_id)
    if pet.owner_id != owner.id:
        raise PermissionDeniedError("You can only book appointments for your own pets")
    await get_groomer(session, groomer_id)

    if start < policy.now():
        raise ValidationError("Cannot book appointments in the past")
    day = policy.local_date(start)
    open_time, close_time = policy.business_hours(day)
    if start < open_time or end > close_time:
        raise ValidationError("Appointments must start and end within business hours")

    store = AppointmentStore(session, policy)
    await store.lock_groomer(groomer_id)
    free = await get_available_slots(store, groomer_id, day, service, exclude_id=exclude_id)
    if start not in {s.start for s in free}:
        logger.warning(
            "Booking conflict: groomer_id=%s start=%s service=%s", groomer_id, start.isoformat(), service.value
        )
        raise ConflictError(CONFLICT_DETAIL)
    return service, start, end


async def create_appointment(
    session: AsyncSession,
    owner: User,
    pet_id: int | None,
    groomer_id: int | None,
    service_type: ServiceType | str | None,
    start_time: datetime | None,
    policy: TimePolicy,
) -> Appointment:
    _ensure_owner(owner)
    service, start, end = await _claim_slot(
        session, owner, pet_id, groomer_id, service_type, start_time, policy
    )
    appointment = Appointment(
        owner_id=owner.id,
        pet_id=pet_id,
        groomer_id=groomer_id,
        service_type=service,
        start_time=start,
        end_time=end,
        status=AppointmentStatus.confirmed,
    )
    appointment = await AppointmentStore(session, policy).insert(appointment)
    logger.info(
        "Appointment %s booked: groomer_id=%s %s-%s", appointment.id, groomer_id, start.isoformat(), end.isoformat()
    )
    return appointment


async def reschedule_appointment(
    session: AsyncSession,
    owner: User,
    appointment_id: int,
    groomer_id: int | None,
    service_type: ServiceType | str | None,
    start_time: datetime | None,
    policy: TimePolicy,
    pet_id: int | None = None,
) -> Appointment:
    """Move a confirmed appointment; old slot freed and new one claimed in one flush."""
    store = AppointmentStore(session, policy)
    appointment = await store.get(appointment_id)
    _ensure_owner(owner, appointment)
    _ensure_modifiable(appointment, policy)

    new_pet_id = pet_id or appointment.pet_id
    service, start, end = await _claim_slot(
        session, owner, new_pet_id, groomer_id, service_type, start_time, policy, exclude_id=appointment.id
    )
    appointment = await store.update(
        appointment,
        pet_id=new_pet_id,
        groomer_id=groomer_id,
        service_type=service,
        start_time=start,
        end_time=end,
    )
    logger.info("Appointment %s rescheduled: groomer_id=%s start=%s", appointment.id, groomer_id, start.isoformat())
    return appointment


async def cancel_appointment(
    session: AsyncSession, owner: User, appointment_id: int, policy: TimePolicy
) -> Appointment:
    store = AppointmentStore(session, policy)
    appointment = await store.get(appointment_id)
    if appointment.owner_id != owner.id:
        raise PermissionDeniedError("Not authorized to delete this appointment")
    _ensure_modifiable(appointment, policy)
    appointment = await store.set_status(appointment.id, AppointmentStatus.cancelled)
    logger.info("Appointment %s cancelled", appointment.id)
    return appointment


async def complete_appointment(
    session: AsyncSession, groomer: User, appointment_id: int, policy: TimePolicy
) -> Appointment:
    """Groomer marks a started appointment as done."""
    store = AppointmentStore(session, policy)
    appointment = await store.get(appointment_id)
    if groomer.role != UserRole.groomer:
        raise PermissionDeniedError("Only groomers can mark appointments as completed")
    if appointment.groomer_id != groomer.id:
        raise PermissionDeniedError("Not authorized to update this appointment")
    if appointment.status != AppointmentStatus.confirmed:
        raise InvalidStateTransition(
            f"Cannot complete an appointment that is {AppointmentStatus(appointment.status).value}"
        )
    if appointment.start_time > policy.now():
        raise InvalidStateTransition("Cannot complete an appointment that has not started yet")
    appointment = await store.set_status(appointment.id, AppointmentStatus.completed)
    logger.info("Appointment %s completed", appointment.id)
    return appointment


async def get_appointment_for_user(
    session: AsyncSession, user: User, appointment_id: int, policy: TimePolicy
) -> Appointment:
    appointment = await AppointmentStore(session, policy).get(appointment_id)
    if user.id not in (appointment.owner_id, appointment.groomer_id):
        raise PermissionDeniedError("Not authorized to view this appointment")
    return appointment


async def list_appointments_for_user(
    session: AsyncSession, user: User, policy: TimePolicy, status: AppointmentStatus | None = None
) -> list[Appointment]:
    """Owner's bookings or groomer's schedule, ascending by start time."""
    store = AppointmentStore(session, policy)
    if user.role == UserRole.groomer:
        return await store.list_by_groomer(user.id, status=status)
    return await store.list_by_owner(user.id, status=status)
