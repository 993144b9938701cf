"""
Pytest configuration and shared fixtures.

Each test gets its own SQLite file: seeded through a sync SQLModel session,
exercised through the async engine the app uses. Time is frozen via FakeClock.
"""

import os
from datetime import datetime
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy import create_engine
from sqlmodel import Session, SQLModel

from app.core.clock import TimePolicy
from app.core.db import build_engine, build_session_maker
from app.models import Appointment, AppointmentStatus, Pet, ServiceType, User, UserRole, duration_for

NOW = datetime(2026, 10, 19, 8, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def policy(clock) -> TimePolicy:
    return TimePolicy("UTC", 9, 17, clock=clock)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "grooming.db"


@pytest.fixture
def sync_engine(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(sync_engine, db_path):
    return build_session_maker(build_engine(f"sqlite:///{db_path}"))


@pytest.fixture
def seed(sync_engine):
    """Two owners with one pet each and two groomers."""
    with Session(sync_engine, expire_on_commit=False) as session:
        owner = User(email="olivia@petmail.com", name="Olivia", role=UserRole.owner)
        other_owner = User(email="marco@petmail.com", name="Marco", role=UserRole.owner)
        groomer = User(email="gina@furkids.io", name="Gina", role=UserRole.groomer)
        other_groomer = User(email="theo@furkids.io", name="Theo", role=UserRole.groomer)
        session.add_all([owner, other_owner, groomer, other_groomer])
        session.commit()
        pet = Pet(owner_id=owner.id, name="Biscuit", species="dog", breed="Beagle", age=4)
        other_pet = Pet(owner_id=other_owner.id, name="Miso", species="cat", breed="Ragdoll", age=2)
        session.add_all([pet, other_pet])
        session.commit()
        return SimpleNamespace(
            owner=owner,
            other_owner=other_owner,
            groomer=groomer,
            other_groomer=other_groomer,
            pet=pet,
            other_pet=other_pet,
        )


@pytest.fixture
def insert_appointment(sync_engine, seed):
    """Write an appointment row directly, bypassing the booking rules."""

    def _insert(
        start: datetime,
        service_type: ServiceType = ServiceType.basic,
        status: AppointmentStatus = AppointmentStatus.confirmed,
        groomer_id: int | None = None,
    ) -> Appointment:
        appointment = Appointment(
            owner_id=seed.owner.id,
            pet_id=seed.pet.id,
            groomer_id=groomer_id or seed.groomer.id,
            service_type=service_type,
            start_time=start,
            end_time=start + duration_for(service_type),
            status=status,
        )
        with Session(sync_engine, expire_on_commit=False) as session:
            session.add(appointment)
            session.commit()
            session.refresh(appointment)
        return appointment

    return _insert
