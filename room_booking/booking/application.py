"""
Прикладной слой контекста бронирования.

Сервис приложения координирует валидацию, блокировку комнаты,
проверку пересечений и работу с хранилищем. Ошибки валидации и
конфликты возвращаются как значения, а не исключения.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Tuple, Union

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from ..shared_kernel import EntityId, TimeRange, now as utc_now
from . import interfaces as ports
from .domain import (
    Booking,
    BookingPolicy,
    CreateBookingRequest,
    FreeSlot,
    FreeSlotCalculator,
    has_overlap,
)

# DTO для входящих данных


class FreeSlotsQuery(BaseModel):
    """Запрос свободных окон комнаты."""

    model_config = ConfigDict(frozen=True)

    room_id: Optional[str] = None
    range_start: AwareDatetime
    range_end: AwareDatetime
    min_hours: float = Field(allow_inf_nan=False)


# DTO для исходящих данных


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    room_id: str
    reserved_by: str
    start: datetime
    end: datetime

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            room_id=booking.room_id,
            reserved_by=booking.reserved_by,
            start=booking.start,
            end=booking.end,
        )


class FreeSlotDTO(BaseModel):
    """DTO для представления свободного окна."""

    start: datetime
    end: datetime
    duration_hours: float

    @classmethod
    def from_domain(cls, slot: FreeSlot) -> "FreeSlotDTO":
        return cls(start=slot.start, end=slot.end, duration_hours=slot.duration_hours)


# Результаты сценариев


@dataclass(frozen=True)
class ValidationFailed:
    """Запрос некорректен; содержит все нарушенные правила."""

    errors: Tuple[str, ...]
    ok = False


@dataclass(frozen=True)
class Conflict:
    """Запрос корректен, но пересекается с существующим бронированием."""

    message: str
    ok = False


@dataclass(frozen=True)
class BookingCreated:
    booking: Booking
    ok = True


@dataclass(frozen=True)
class BookingList:
    bookings: Tuple[Booking, ...]
    ok = True


@dataclass(frozen=True)
class FreeSlotList:
    slots: Tuple[FreeSlot, ...]
    ok = True


CreateBookingResult = Union[BookingCreated, ValidationFailed, Conflict]
ListBookingsResult = Union[BookingList, ValidationFailed]
FreeSlotsResult = Union[FreeSlotList, ValidationFailed]


# Сервисы приложения


class BookingApplicationService:
    """Сервис приложения для работы с бронированиями комнат."""

    CONFLICT_MESSAGE = "Комната уже забронирована на этот интервал времени"

    def __init__(
        self,
        repository: ports.IBookingRepository,
        locks: ports.IRoomLockManager,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Инициализирует сервис."""
        self._repository = repository
        self._locks = locks
        self._clock = clock

    def create_booking(
        self, request: CreateBookingRequest, now: Optional[datetime] = None
    ) -> CreateBookingResult:
        """Создает новое бронирование."""
        current = now if now is not None else self._clock()
        errors = BookingPolicy.validate_create_request(request, current)
        if errors:
            return ValidationFailed(tuple(errors))

        # Проверка и вставка атомарны в пределах комнаты
        with self._locks.acquire_for_room(request.room_id):
            existing = self._repository.get_by_room(request.room_id)
            if has_overlap(request.start, request.end, existing):
                return Conflict(self.CONFLICT_MESSAGE)

            booking = self._repository.add(Booking.create(request))

        return BookingCreated(booking)

    def cancel_booking(self, booking_id: EntityId) -> bool:
        """Отменяет бронирование. Возвращает False, если его не было."""
        return self._repository.remove(booking_id)

    def list_bookings(self, room_id: Optional[str]) -> ListBookingsResult:
        """Возвращает бронирования комнаты по времени начала."""
        errors = BookingPolicy.validate_room_id(room_id)
        if errors:
            return ValidationFailed(tuple(errors))
        return BookingList(tuple(self._repository.get_by_room(room_id)))

    def get_free_slots(self, query: FreeSlotsQuery) -> FreeSlotsResult:
        """Возвращает свободные окна комнаты в диапазоне поиска."""
        errors = BookingPolicy.validate_free_slots_request(
            query.room_id, query.range_start, query.range_end, query.min_hours
        )
        if errors:
            return ValidationFailed(tuple(errors))

        search = TimeRange(start=query.range_start, end=query.range_end)
        slots = FreeSlotCalculator.calculate(
            self._repository.get_by_room(query.room_id), search, query.min_hours
        )
        return FreeSlotList(tuple(slots))

