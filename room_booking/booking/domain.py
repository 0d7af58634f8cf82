"""
Доменная модель контекста бронирования переговорных комнат.

Содержит сущность бронирования, правила валидации запросов,
проверку пересечений и расчет свободных окон.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from ..shared_kernel import (
    BusinessRuleValidationException,
    EntityId,
    TimeRange,
    generate_id,
    normalize_room_id,
)


class CreateBookingRequest(BaseModel):
    """Запрос на создание бронирования."""

    model_config = ConfigDict(frozen=True)

    room_id: Optional[str] = None
    reserved_by: Optional[str] = None
    start: AwareDatetime
    end: AwareDatetime


class Booking(BaseModel):
    """Бронирование комнаты. Неизменяемо после создания."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=generate_id)
    room_id: str
    reserved_by: str
    start: AwareDatetime
    end: AwareDatetime

    def is_in_room(self, room_id: str) -> bool:
        """Сравнивает комнату без учета регистра."""
        return normalize_room_id(self.room_id) == normalize_room_id(room_id)

    @classmethod
    def create(cls, request: CreateBookingRequest) -> "Booking":
        """Создает новое бронирование из проверенного запроса."""
        if not request.room_id:
            raise BusinessRuleValidationException(BookingPolicy.ROOM_ID_MISSING)
        if not request.reserved_by:
            raise BusinessRuleValidationException(BookingPolicy.RESERVED_BY_MISSING)
        if request.start >= request.end:
            raise BusinessRuleValidationException(BookingPolicy.START_NOT_BEFORE_END)

        return cls(
            room_id=request.room_id,
            reserved_by=request.reserved_by,
            start=request.start,
            end=request.end,
        )


class FreeSlot(BaseModel):
    """Свободное окно в расписании комнаты."""

    model_config = ConfigDict(frozen=True)

    start: AwareDatetime
    end: AwareDatetime
    duration_hours: float

    @classmethod
    def from_range(cls, period: TimeRange) -> "FreeSlot":
        return cls(
            start=period.start,
            end=period.end,
            duration_hours=period.duration.total_seconds() / 3600,
        )


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class BookingPolicy:
    """Политики и бизнес-правила для бронирований.

    Все правила проверяются целиком, ошибки собираются в один список
    в фиксированном порядке.
    """

    ROOM_ID_MISSING = "Не указан идентификатор комнаты"
    RESERVED_BY_MISSING = "Не указано, кто бронирует комнату"
    START_NOT_BEFORE_END = "Время начала должно быть раньше времени окончания"
    START_IN_PAST = "Бронирование не может начинаться в прошлом"
    RANGE_NOT_POSITIVE = "Начало диапазона поиска должно быть раньше его конца"
    MIN_DURATION_NOT_POSITIVE = "Минимальная длительность должна быть больше нуля"

    @classmethod
    def validate_room_id(cls, room_id: Optional[str]) -> List[str]:
        """Проверяет, что идентификатор комнаты задан."""
        if _is_blank(room_id):
            return [cls.ROOM_ID_MISSING]
        return []

    @classmethod
    def validate_create_request(
        cls, request: CreateBookingRequest, now: datetime
    ) -> List[str]:
        """Проверяет запрос на создание бронирования относительно `now`."""
        errors = cls.validate_room_id(request.room_id)

        if _is_blank(request.reserved_by):
            errors.append(cls.RESERVED_BY_MISSING)

        if request.start >= request.end:
            errors.append(cls.START_NOT_BEFORE_END)

        if request.start < now:
            errors.append(cls.START_IN_PAST)

        return errors

    @classmethod
    def validate_free_slots_request(
        cls,
        room_id: Optional[str],
        range_start: datetime,
        range_end: datetime,
        min_hours: float,
    ) -> List[str]:
        """Проверяет параметры поиска свободных окон."""
        errors = cls.validate_room_id(room_id)

        if range_start >= range_end:
            errors.append(cls.RANGE_NOT_POSITIVE)

        if not min_hours > 0:
            errors.append(cls.MIN_DURATION_NOT_POSITIVE)

        return errors


def has_overlap(
    candidate_start: datetime,
    candidate_end: datetime,
    existing: Iterable[Booking],
) -> bool:
    """Пересекается ли интервал [start, end) хотя бы с одним бронированием.

    Бронирования встык (конец одного равен началу другого) не конфликтуют.
    """
    return any(
        candidate_start < booking.end and candidate_end > booking.start
        for booking in existing
    )


class FreeSlotCalculator:
    """Доменный сервис расчета свободных окон комнаты."""

    @staticmethod
    def busy_intervals(
        bookings: Iterable[Booking], search: TimeRange
    ) -> List[TimeRange]:
        """Занятые интервалы внутри диапазона, обрезанные и слитые.

        Соприкасающиеся интервалы сливаются в один.
        """
        clipped = []
        for booking in bookings:
            if not (booking.start < search.end and booking.end > search.start):
                continue
            start = max(booking.start, search.start)
            end = min(booking.end, search.end)
            if start >= end:
                continue
            clipped.append((start, end))

        clipped.sort(key=lambda interval: interval[0])

        merged: List[List[datetime]] = []
        for start, end in clipped:
            if merged and start <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])

        return [TimeRange(start=start, end=end) for start, end in merged]

    @classmethod
    def calculate(
        cls,
        bookings: Sequence[Booking],
        search: TimeRange,
        min_hours: float,
    ) -> List[FreeSlot]:
        """Все максимальные свободные окна длительностью не меньше `min_hours` часов."""
        slots: List[FreeSlot] = []
        cursor = search.start

        for busy in cls.busy_intervals(bookings, search):
            if cursor < busy.start:
                gap = TimeRange(start=cursor, end=busy.start)
                slot = FreeSlot.from_range(gap)
                if slot.duration_hours >= min_hours:
                    slots.append(slot)
            cursor = max(cursor, busy.end)

        if cursor < search.end:
            gap = TimeRange(start=cursor, end=search.end)
            slot = FreeSlot.from_range(gap)
            if slot.duration_hours >= min_hours:
                slots.append(slot)

        return slots
