"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from typing import Any, ContextManager, List, Optional, Protocol

from ..shared_kernel import EntityId
from .domain import Booking


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IBookingRepository(Protocol):
    """Интерфейс хранилища бронирований."""

    def add(self, booking: Booking) -> Booking: ...
    def remove(self, booking_id: EntityId) -> bool: ...
    def get_by_id(self, booking_id: EntityId) -> Optional[Booking]: ...
    def get_by_room(self, room_id: str) -> List[Booking]: ...


class IRoomLockManager(Protocol):
    """Взаимное исключение в пределах одной комнаты."""

    def acquire_for_room(self, room_id: str) -> ContextManager[None]: ...
