"""
Общее ядро (Shared Kernel).

Типы и утилиты, которые используются всеми слоями сервиса бронирования.
"""

from .domain import (
    BusinessRuleValidationException,
    DomainException,
    DuplicateBookingError,
    EntityId,
    TimeRange,
    generate_id,
    normalize_room_id,
    now,
)

__all__ = [
    "BusinessRuleValidationException",
    "DomainException",
    "DuplicateBookingError",
    "EntityId",
    "TimeRange",
    "generate_id",
    "normalize_room_id",
    "now",
]
