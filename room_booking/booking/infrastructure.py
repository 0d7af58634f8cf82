"""
Инфраструктурный слой контекста бронирования.

Содержит потокобезопасное хранилище в памяти, менеджеры блокировок
комнат и адаптер логгера поверх стандартного `logging`.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ..shared_kernel import DuplicateBookingError, EntityId, normalize_room_id
from . import interfaces as ports
from .domain import Booking


class StdLibLogger(ports.ILogger):
    """Логгер, передающий сообщения в стандартный модуль `logging`."""

    def __init__(self, name: str = "room_booking.booking"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, context: Dict[str, Any]) -> None:
        if context:
            details = ", ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} [{details}]"
        self._logger.log(level, message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)


class InMemoryBookingRepository(ports.IBookingRepository):
    """Реализация хранилища бронирований в памяти."""

    def __init__(self) -> None:
        self._bookings: Dict[EntityId, Booking] = {}
        self._lock = threading.RLock()

    def add(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.id in self._bookings:
                raise DuplicateBookingError(booking.id)
            self._bookings[booking.id] = booking
        return booking

    def remove(self, booking_id: EntityId) -> bool:
        with self._lock:
            return self._bookings.pop(booking_id, None) is not None

    def get_by_id(self, booking_id: EntityId) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def get_by_room(self, room_id: str) -> List[Booking]:
        """Бронирования комнаты, отсортированные по времени начала."""
        with self._lock:
            snapshot = list(self._bookings.values())
        return sorted(
            (booking for booking in snapshot if booking.is_in_room(room_id)),
            key=lambda booking: booking.start,
        )


class RoomLockManager(ports.IRoomLockManager):
    """Отдельная блокировка на каждую комнату.

    Блокировки создаются при первом обращении и живут до конца процесса.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, room_id: str) -> threading.Lock:
        key = normalize_room_id(room_id)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def acquire_for_room(self, room_id: str) -> Iterator[None]:
        with self.lock_for(room_id):
            yield


class StripedRoomLockManager(ports.IRoomLockManager):
    """Фиксированная таблица блокировок, комната выбирает полосу по хэшу.

    Разные комнаты могут попасть в одну полосу и ждать друг друга,
    зато память не растет с числом комнат.
    """

    def __init__(self, stripes: int = 64) -> None:
        if stripes <= 0:
            raise ValueError("Количество полос должно быть положительным")
        self._locks = [threading.Lock() for _ in range(stripes)]

    def lock_for(self, room_id: str) -> threading.Lock:
        return self._locks[hash(normalize_room_id(room_id)) % len(self._locks)]

    @contextmanager
    def acquire_for_room(self, room_id: str) -> Iterator[None]:
        with self.lock_for(room_id):
            yield
