from datetime import datetime
from pydantic import BaseModel

from app.models.appointment import AppointmentStatus, ServiceType


class SlotInfo(BaseModel):
    start: datetime
    end: datetime


class AvailableSlotsResponse(BaseModel):
    groomer_id: int
    date: str  # YYYY-MM-DD
    service_type: ServiceType
    duration_minutes: int
    slots: list[SlotInfo]


class BookAppointmentRequest(BaseModel):
    pet_id: int
    groomer_id: int
    service_type: ServiceType
    start_time: datetime


class RescheduleAppointmentRequest(BaseModel):
    pet_id: int | None = None
    groomer_id: int
    service_type: ServiceType
    start_time: datetime


class UpdateStatusRequest(BaseModel):
    status: AppointmentStatus
