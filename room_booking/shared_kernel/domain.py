"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, model_validator

# Общие типы идентификаторов
EntityId = UUID


def generate_id() -> UUID:
    """Генерирует новый UUID."""
    return uuid4()


def normalize_room_id(room_id: str) -> str:
    """Ключ комнаты для сравнения без учета регистра."""
    return room_id.casefold()


class TimeRange(BaseModel):
    """Полуоткрытый интервал времени [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: AwareDatetime
    end: AwareDatetime

    @model_validator(mode="after")
    def end_after_start(self) -> "TimeRange":
        if self.end <= self.start:
            raise ValueError("Конец интервала должен быть позже начала")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


class DuplicateBookingError(DomainException):
    """Бронирование с таким идентификатором уже есть в хранилище."""

    def __init__(self, booking_id: EntityId):
        super().__init__(f"Бронирование с ID {booking_id} уже существует")
        self.booking_id = booking_id


# Общие утилиты
def now() -> datetime:
    """Возвращает текущее время в UTC."""
    return datetime.now(timezone.utc)
