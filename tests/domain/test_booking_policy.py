from datetime import timedelta

import pytest
from pydantic import ValidationError

from conftest import FIXED_NOW, at, make_request
from room_booking.booking.domain import Booking, BookingPolicy, CreateBookingRequest
from room_booking.shared_kernel import BusinessRuleValidationException


def test_valid_request_has_no_errors():
    """Тест: корректный запрос проходит все проверки."""
    request = make_request(at(6, 10), at(6, 11))
    assert BookingPolicy.validate_create_request(request, FIXED_NOW) == []


def test_all_errors_are_collected_in_order():
    """Тест: пустая комната, перевернутый интервал и прошлое дают три ошибки."""
    request = make_request(at(1, 9), at(1, 8), room_id="   ")

    errors = BookingPolicy.validate_create_request(request, FIXED_NOW)

    assert errors == [
        BookingPolicy.ROOM_ID_MISSING,
        BookingPolicy.START_NOT_BEFORE_END,
        BookingPolicy.START_IN_PAST,
    ]


def test_missing_fields_are_reported():
    """Тест: отсутствующие поля считаются пустыми."""
    request = CreateBookingRequest(start=at(6, 10), end=at(6, 11))

    errors = BookingPolicy.validate_create_request(request, FIXED_NOW)

    assert errors == [BookingPolicy.ROOM_ID_MISSING, BookingPolicy.RESERVED_BY_MISSING]


def test_zero_length_booking_is_rejected():
    request = make_request(at(6, 10), at(6, 10))
    assert BookingPolicy.validate_create_request(request, FIXED_NOW) == [
        BookingPolicy.START_NOT_BEFORE_END
    ]


def test_booking_may_start_exactly_now():
    """Тест: начало ровно в текущий момент не считается прошлым."""
    request = make_request(FIXED_NOW, FIXED_NOW + timedelta(hours=1))
    assert BookingPolicy.validate_create_request(request, FIXED_NOW) == []


def test_naive_datetimes_are_rejected_by_model():
    """Тест: время без смещения не принимается."""
    with pytest.raises(ValidationError):
        CreateBookingRequest(
            room_id="A-101",
            reserved_by="Анна",
            start=at(6, 10).replace(tzinfo=None),
            end=at(6, 11),
        )


def test_free_slots_request_collects_all_errors():
    errors = BookingPolicy.validate_free_slots_request(
        "", at(7, 0), at(6, 0), 0
    )

    assert errors == [
        BookingPolicy.ROOM_ID_MISSING,
        BookingPolicy.RANGE_NOT_POSITIVE,
        BookingPolicy.MIN_DURATION_NOT_POSITIVE,
    ]


def test_free_slots_request_rejects_negative_duration():
    errors = BookingPolicy.validate_free_slots_request(
        "A-101", at(6, 0), at(7, 0), -1
    )
    assert errors == [BookingPolicy.MIN_DURATION_NOT_POSITIVE]


def test_booking_create_echoes_request():
    """Тест: бронирование повторяет поля запроса и получает новый ID."""
    request = make_request(at(6, 10), at(6, 11))

    first = Booking.create(request)
    second = Booking.create(request)

    assert first.room_id == "A-101"
    assert first.reserved_by == "Анна"
    assert first.start == request.start
    assert first.end == request.end
    assert first.id != second.id


def test_booking_create_guards_invariant():
    """Тест: непроверенный запрос с перевернутым интервалом не превращается в бронь."""
    with pytest.raises(
        BusinessRuleValidationException, match=BookingPolicy.START_NOT_BEFORE_END
    ):
        Booking.create(make_request(at(6, 11), at(6, 10)))


def test_booking_create_requires_room_and_author():
    with pytest.raises(BusinessRuleValidationException, match=BookingPolicy.ROOM_ID_MISSING):
        Booking.create(make_request(at(6, 10), at(6, 11), room_id=""))
    with pytest.raises(
        BusinessRuleValidationException, match=BookingPolicy.RESERVED_BY_MISSING
    ):
        Booking.create(make_request(at(6, 10), at(6, 11), reserved_by=""))


def test_booking_is_immutable():
    booking = Booking.create(make_request(at(6, 10), at(6, 11)))
    with pytest.raises(ValidationError):
        booking.reserved_by = "Борис"


def test_room_match_ignores_case():
    booking = Booking.create(make_request(at(6, 10), at(6, 11), room_id="Room-A"))
    assert booking.is_in_room("room-a")
    assert booking.is_in_room("ROOM-A")
    assert not booking.is_in_room("Room-B")
