"""
Unit tests for the slot grid and the availability resolver.
"""

from datetime import date, datetime, timedelta

import pytest

from app.core.clock import TimePolicy
from app.models import Appointment, AppointmentStatus, ServiceType, duration_for
from app.services.slot_service import Slot, generate_slots, resolve_free_slots

DAY = date(2026, 10, 21)
OPEN = datetime(2026, 10, 21, 9, 0)
CLOSE = datetime(2026, 10, 21, 17, 0)
BASIC = duration_for(ServiceType.basic)
FULL = duration_for(ServiceType.full)


def _appointment(
    appointment_id: int,
    start: datetime,
    service_type: ServiceType = ServiceType.basic,
    status: AppointmentStatus = AppointmentStatus.confirmed,
    groomer_id: int = 1,
) -> Appointment:
    return Appointment(
        id=appointment_id,
        owner_id=10,
        pet_id=20,
        groomer_id=groomer_id,
        service_type=service_type,
        start_time=start,
        end_time=start + duration_for(service_type),
        status=status,
    )


def _starts(slots: list[Slot]) -> list[int]:
    return [s.start.hour for s in slots]


def test_duration_follows_service_type():
    assert BASIC == timedelta(minutes=60)
    assert FULL == timedelta(minutes=120)
    assert duration_for("full") == FULL


def test_full_service_grid():
    slots = generate_slots(DAY, OPEN, CLOSE, FULL)

    assert [(s.start.hour, s.end.hour) for s in slots] == [(9, 11), (11, 13), (13, 15), (15, 17)]
    assert all(s.start.hour != 16 for s in slots)


def test_basic_service_grid_has_hourly_slots():
    slots = generate_slots(DAY, OPEN, CLOSE, BASIC)

    assert _starts(slots) == [9, 10, 11, 12, 13, 14, 15, 16]


@pytest.mark.parametrize("duration", [BASIC, FULL, timedelta(minutes=90)])
def test_grid_stays_inside_business_hours(duration):
    slots = generate_slots(DAY, OPEN, CLOSE, duration)

    assert slots
    for slot in slots:
        assert OPEN <= slot.start
        assert slot.end <= CLOSE
        assert slot.end - slot.start == duration


def test_slot_running_past_close_is_not_produced():
    slots = generate_slots(DAY, datetime(2026, 10, 21, 9, 30), CLOSE, FULL)

    assert slots[-1].start == datetime(2026, 10, 21, 13, 30)
    assert slots[-1].end == datetime(2026, 10, 21, 15, 30)


def test_grid_is_restartable():
    assert generate_slots(DAY, OPEN, CLOSE, BASIC) == generate_slots(DAY, OPEN, CLOSE, BASIC)


def test_non_positive_duration_gives_no_slots():
    assert generate_slots(DAY, OPEN, CLOSE, timedelta(0)) == []


def test_free_day_returns_whole_grid(policy):
    assert _starts(resolve_free_slots(1, DAY, BASIC, [], policy)) == [9, 10, 11, 12, 13, 14, 15, 16]


def test_booked_first_hour_is_excluded(policy):
    booked = [_appointment(1, datetime(2026, 10, 21, 9, 0))]

    free = resolve_free_slots(1, DAY, BASIC, booked, policy)

    assert _starts(free) == [10, 11, 12, 13, 14, 15, 16]


def test_back_to_back_slots_are_free(policy):
    booked = [_appointment(1, datetime(2026, 10, 21, 10, 0))]

    free = resolve_free_slots(1, DAY, BASIC, booked, policy)

    assert 9 in _starts(free)
    assert 11 in _starts(free)
    assert 10 not in _starts(free)


def test_basic_booking_blocks_overlapping_full_slot(policy):
    booked = [_appointment(1, datetime(2026, 10, 21, 10, 0))]

    free = resolve_free_slots(1, DAY, FULL, booked, policy)

    assert _starts(free) == [11, 13, 15]


def test_only_confirmed_appointments_of_the_groomer_on_the_day_block(policy):
    appointments = [
        _appointment(1, datetime(2026, 10, 21, 9, 0), status=AppointmentStatus.cancelled),
        _appointment(2, datetime(2026, 10, 21, 10, 0), status=AppointmentStatus.completed),
        _appointment(3, datetime(2026, 10, 21, 11, 0), groomer_id=2),
        _appointment(4, datetime(2026, 10, 22, 12, 0)),
        _appointment(5, datetime(2026, 10, 21, 13, 0)),
    ]

    free = resolve_free_slots(1, DAY, BASIC, appointments, policy)

    assert _starts(free) == [9, 10, 11, 12, 14, 15, 16]


def test_excluded_appointment_does_not_block(policy):
    booked = [_appointment(7, datetime(2026, 10, 21, 9, 0))]

    free = resolve_free_slots(1, DAY, FULL, booked, policy, exclude_id=7)

    assert _starts(free) == [9, 11, 13, 15]


def test_today_drops_started_slots(clock, policy):
    clock.now = datetime(2026, 10, 19, 11, 30)

    free = resolve_free_slots(1, date(2026, 10, 19), BASIC, [], policy)

    assert _starts(free) == [12, 13, 14, 15, 16]


def test_slot_starting_now_is_not_offered(clock, policy):
    clock.now = datetime(2026, 10, 19, 12, 0)

    free = resolve_free_slots(1, date(2026, 10, 19), BASIC, [], policy)

    assert _starts(free)[0] == 13


def test_future_days_ignore_the_current_time(clock, policy):
    clock.now = datetime(2026, 10, 20, 16, 30)

    assert len(resolve_free_slots(1, DAY, BASIC, [], policy)) == 8


def test_past_day_has_no_free_slots(policy):
    assert resolve_free_slots(1, date(2026, 10, 18), BASIC, [], policy) == []


@pytest.mark.parametrize(
    "groomer_id, d, duration",
    [
        (None, DAY, BASIC),
        (0, DAY, BASIC),
        (1, None, BASIC),
        (1, "2026-10-21", BASIC),
        (1, DAY, None),
        (1, DAY, timedelta(minutes=-60)),
    ],
)
def test_missing_or_invalid_input_gives_empty_list(policy, groomer_id, d, duration):
    assert resolve_free_slots(groomer_id, d, duration, [], policy) == []


def test_resolution_is_ordered_and_repeatable(policy):
    booked = [_appointment(2, datetime(2026, 10, 21, 14, 0)), _appointment(1, datetime(2026, 10, 21, 11, 0))]

    first = resolve_free_slots(1, DAY, BASIC, booked, policy)
    second = resolve_free_slots(1, DAY, BASIC, booked, policy)

    assert first == second
    assert [s.start for s in first] == sorted(s.start for s in first)


def test_business_hours_follow_the_configured_timezone():
    policy = TimePolicy("America/New_York", 9, 17, clock=lambda: datetime(2026, 10, 19, 8, 0))

    open_time, close_time = policy.business_hours(DAY)

    assert open_time == datetime(2026, 10, 21, 13, 0)
    assert close_time == datetime(2026, 10, 21, 21, 0)
    assert policy.local_date(datetime(2026, 10, 22, 2, 0)) == DAY
