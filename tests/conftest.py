"""
Общие фикстуры для тестов сервиса бронирования.
"""
from datetime import datetime, timezone

import pytest

from room_booking.booking.application import BookingApplicationService
from room_booking.booking.domain import CreateBookingRequest
from room_booking.booking.infrastructure import (
    InMemoryBookingRepository,
    RoomLockManager,
)

UTC = timezone.utc
FIXED_NOW = datetime(2027, 5, 1, 12, 0, tzinfo=UTC)


def at(day: int, hour: int, minute: int = 0, tz=UTC) -> datetime:
    """Момент времени в мае 2027 года."""
    return datetime(2027, 5, day, hour, minute, tzinfo=tz)


def make_request(
    start: datetime,
    end: datetime,
    room_id="A-101",
    reserved_by="Анна",
) -> CreateBookingRequest:
    return CreateBookingRequest(
        room_id=room_id, reserved_by=reserved_by, start=start, end=end
    )


@pytest.fixture
def repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def booking_service(repository) -> BookingApplicationService:
    """Сервис приложения с чистым хранилищем и фиксированными часами."""
    return BookingApplicationService(
        repository=repository,
        locks=RoomLockManager(),
        clock=lambda: FIXED_NOW,
    )
