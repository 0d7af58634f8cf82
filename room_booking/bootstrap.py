import logging
from typing import Any, Dict, Optional

from .booking.api import create_app
from .booking.application import BookingApplicationService
from .booking.infrastructure import (
    InMemoryBookingRepository,
    RoomLockManager,
    StdLibLogger,
    StripedRoomLockManager,
)
from .config import Settings


def bootstrap_app(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or Settings.from_env()

    # 1. Логирование
    logging.basicConfig(level=settings.log_level, format=settings.log_format)

    # 2. Общие на весь процесс хранилище и блокировки
    repository = InMemoryBookingRepository()
    if settings.lock_stripes:
        locks = StripedRoomLockManager(settings.lock_stripes)
    else:
        locks = RoomLockManager()

    # 3. Сервисы и HTTP-приложение, получающие зависимости явно
    booking_service = BookingApplicationService(
        repository=repository,
        locks=locks,
    )
    app = create_app(booking_service, logger=StdLibLogger("room_booking.api"))

    return {
        "settings": settings,
        "repository": repository,
        "locks": locks,
        "booking_service": booking_service,
        "app": app,
    }
