from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_session, get_time_policy
from app.api.schemas.appointment import AvailableSlotsResponse, SlotInfo
from app.core.clock import TimePolicy
from app.models.appointment import ServiceType, duration_for
from app.models.user import User, UserPublic
from app.services.appointment_store import AppointmentStore
from app.services.auth_service import user_to_public
from app.services.directory_service import get_groomer, list_groomers
from app.services.slot_service import get_available_slots

router = APIRouter(prefix="/groomers", tags=["groomers"])


@router.get("", response_model=list[UserPublic])
async def all_groomers(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[UserPublic]:
    return [user_to_public(g) for g in await list_groomers(session)]


@router.get("/{groomer_id}", response_model=UserPublic)
async def groomer_detail(
    groomer_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> UserPublic:
    return user_to_public(await get_groomer(session, groomer_id))


@router.get("/{groomer_id}/availability", response_model=AvailableSlotsResponse)
async def groomer_availability(
    groomer_id: int,
    date_param: date = Query(..., alias="date"),
    service_type: ServiceType = Query(ServiceType.basic),
    session: AsyncSession = Depends(get_session),
    policy: TimePolicy = Depends(get_time_policy),
    current_user: User = Depends(get_current_user),
) -> AvailableSlotsResponse:
    """Free slots (UTC) for the groomer on the date; the slot length follows the service type."""
    await get_groomer(session, groomer_id)
    slots = await get_available_slots(AppointmentStore(session, policy), groomer_id, date_param, service_type)
    return AvailableSlotsResponse(
        groomer_id=groomer_id,
        date=date_param.isoformat(),
        service_type=service_type,
        duration_minutes=int(duration_for(service_type).total_seconds() // 60),
        slots=[SlotInfo(start=s.start, end=s.end) for s in slots],
    )
