from app.models.user import User, UserCreate, UserPublic, UserRole
from app.models.pet import Pet
from app.models.appointment import (
    Appointment,
    AppointmentPublic,
    AppointmentStatus,
    ServiceType,
    duration_for,
)

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "UserRole",
    "Pet",
    "Appointment",
    "AppointmentPublic",
    "AppointmentStatus",
    "ServiceType",
    "duration_for",
]
