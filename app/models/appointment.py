from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now


class ServiceType(str, Enum):
    basic = "basic"
    full = "full"


class AppointmentStatus(str, Enum):
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


SERVICE_DURATIONS_MINUTES = {
    ServiceType.basic: 60,
    ServiceType.full: 120,
}


def duration_for(service_type: ServiceType | str) -> timedelta:
    """Service length; the only source of an appointment's duration."""
    return timedelta(minutes=SERVICE_DURATIONS_MINUTES[ServiceType(service_type)])


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_groomer_id_start_time", "groomer_id", "start_time"),)
    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", index=True)
    pet_id: int = Field(foreign_key="pets.id", index=True)
    groomer_id: int = Field(foreign_key="users.id")
    service_type: ServiceType
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = Field(default=AppointmentStatus.confirmed, index=True)
    created_at: datetime = Field(default_factory=utc_naive_now)
    updated_at: datetime = Field(default_factory=utc_naive_now)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end_time and end > self.start_time


class AppointmentPublic(SQLModel):
    id: int
    owner_id: int
    pet_id: int
    groomer_id: int
    service_type: ServiceType
    duration_minutes: int
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime
