from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_session, get_time_policy, require_groomer, require_owner
from app.api.schemas.appointment import (
    BookAppointmentRequest,
    RescheduleAppointmentRequest,
    UpdateStatusRequest,
)
from app.core.clock import TimePolicy
from app.core.exceptions import ValidationError
from app.models.appointment import (
    Appointment,
    AppointmentPublic,
    AppointmentStatus,
    ServiceType,
    duration_for,
)
from app.models.user import User
from app.services.appointment_service import (
    cancel_appointment,
    complete_appointment,
    create_appointment,
    get_appointment_for_user,
    list_appointments_for_user,
    reschedule_appointment,
)
from app.services.directory_service import get_groomer, get_pet
from app.services.email_service import send_booking_confirmation_email

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=a.id,
        owner_id=a.owner_id,
        pet_id=a.pet_id,
        groomer_id=a.groomer_id,
        service_type=a.service_type,
        duration_minutes=int(duration_for(a.service_type).total_seconds() // 60),
        start_time=a.start_time,
        end_time=a.end_time,
        status=a.status,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


async def _queue_confirmation(
    background_tasks: BackgroundTasks,
    session: AsyncSession,
    owner: User,
    appointment: Appointment,
    is_rescheduled: bool,
) -> None:
    pet = await get_pet(session, appointment.pet_id)
    groomer = await get_groomer(session, appointment.groomer_id)
    # Sent after the response (uses sync SMTP)
    background_tasks.add_task(
        send_booking_confirmation_email,
        to_email=owner.email,
        recipient_name=owner.name,
        appointment_id=appointment.id,
        created_at=appointment.created_at,
        pet_name=pet.name,
        groomer_name=groomer.name,
        service_type=ServiceType(appointment.service_type).value,
        start_time=appointment.start_time,
        end_time=appointment.end_time,
        is_rescheduled=is_rescheduled,
    )


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(require_owner),
) -> AppointmentPublic:
    appointment = await create_appointment(
        session,
        current_user,
        pet_id=body.pet_id,
        groomer_id=body.groomer_id,
        service_type=body.service_type,
        start_time=body.start_time,
        policy=policy,
    )
    await _queue_confirmation(background_tasks, session, current_user, appointment, is_rescheduled=False)
    return _to_public(appointment)


@router.get("", response_model=list[AppointmentPublic])
async def list_my_appointments(
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(get_current_user),
) -> list[AppointmentPublic]:
    """Owner's bookings or groomer's schedule, ascending by start time."""
    appointments = await list_appointments_for_user(session, current_user, policy, status=status_filter)
    return [_to_public(a) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentPublic)
async def appointment_detail(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    return _to_public(await get_appointment_for_user(session, current_user, appointment_id, policy))


@router.put("/{appointment_id}", response_model=AppointmentPublic)
async def reschedule_my_appointment(
    appointment_id: int,
    body: RescheduleAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(require_owner),
) -> AppointmentPublic:
    appointment = await reschedule_appointment(
        session,
        current_user,
        appointment_id,
        groomer_id=body.groomer_id,
        service_type=body.service_type,
        start_time=body.start_time,
        policy=policy,
        pet_id=body.pet_id,
    )
    await _queue_confirmation(background_tasks, session, current_user, appointment, is_rescheduled=True)
    return _to_public(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
async def update_appointment_status(
    appointment_id: int,
    body: UpdateStatusRequest,
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(require_groomer),
) -> AppointmentPublic:
    """Groomer marks an appointment as completed; other transitions go through PUT/DELETE."""
    if body.status != AppointmentStatus.completed:
        raise ValidationError("Only the 'completed' status can be set here")
    return _to_public(await complete_appointment(session, current_user, appointment_id, policy))


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_my_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(require_owner),
) -> None:
    await cancel_appointment(session, current_user, appointment_id, policy)
