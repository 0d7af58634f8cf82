"""
HTTP-интерфейс контекста бронирования на FastAPI.

Переводит запросы в вызовы сервиса приложения, а его результаты
в ответы с HTTP-статусами. Здесь же логируются изменения состояния
и отклоненные запросы: ядро не логирует.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .. import __version__
from . import interfaces as ports
from .application import (
    BookingApplicationService,
    BookingDTO,
    Conflict,
    FreeSlotDTO,
    FreeSlotsQuery,
    ValidationFailed,
)
from .domain import CreateBookingRequest
from .infrastructure import StdLibLogger

NOT_FOUND_MESSAGE = "Бронирование не найдено"

# Источник параметра не показывается клиенту
_LOCATION_SOURCES = ("body", "query", "path")

router = APIRouter(tags=["bookings"])


def get_booking_service(request: Request) -> BookingApplicationService:
    return request.app.state.booking_service


def get_logger(request: Request) -> ports.ILogger:
    return request.app.state.logger


def _error_messages(errors: Iterable[Dict[str, Any]]) -> List[str]:
    messages = []
    for error in errors:
        location = list(error["loc"])
        if location and location[0] in _LOCATION_SOURCES:
            location = location[1:]
        path = ".".join(str(part) for part in location)
        messages.append(f"{path}: {error['msg']}" if path else error["msg"])
    return messages


def _bad_request(logger: ports.ILogger, errors: List[str]) -> JSONResponse:
    logger.warning("Некорректный запрос", errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors}
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Нечитаемые тело, путь или параметры запроса дают 400, а не 422."""
    return _bad_request(request.app.state.logger, _error_messages(exc.errors()))


@router.post(
    "/bookings",
    status_code=status.HTTP_201_CREATED,
    response_model=BookingDTO,
)
def create_booking(
    payload: CreateBookingRequest,
    response: Response,
    service: BookingApplicationService = Depends(get_booking_service),
    logger: ports.ILogger = Depends(get_logger),
):
    """Создает бронирование и возвращает его с заголовком Location."""
    result = service.create_booking(payload)
    if isinstance(result, ValidationFailed):
        return _bad_request(logger, list(result.errors))
    if isinstance(result, Conflict):
        logger.warning(
            "Конфликт при создании бронирования",
            room_id=payload.room_id,
            start=payload.start.isoformat(),
            end=payload.end.isoformat(),
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"error": result.message}
        )

    booking = result.booking
    logger.info("Бронирование создано", booking_id=booking.id, room_id=booking.room_id)
    response.headers["Location"] = f"/bookings/{booking.id}"
    return BookingDTO.from_domain(booking)


@router.delete(
    "/bookings/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def cancel_booking(
    booking_id: uuid.UUID,
    service: BookingApplicationService = Depends(get_booking_service),
    logger: ports.ILogger = Depends(get_logger),
):
    if not service.cancel_booking(booking_id):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"error": NOT_FOUND_MESSAGE}
        )
    logger.info("Бронирование отменено", booking_id=booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/rooms/{room_id}/bookings", response_model=List[BookingDTO])
def list_bookings(
    room_id: str,
    service: BookingApplicationService = Depends(get_booking_service),
    logger: ports.ILogger = Depends(get_logger),
):
    """Бронирования комнаты по времени начала."""
    result = service.list_bookings(room_id)
    if isinstance(result, ValidationFailed):
        return _bad_request(logger, list(result.errors))
    return [BookingDTO.from_domain(booking) for booking in result.bookings]


@router.get("/rooms/{room_id}/free-slots", response_model=List[FreeSlotDTO])
def free_slots(
    room_id: str,
    range_start: datetime,
    range_end: datetime,
    min_hours: float,
    service: BookingApplicationService = Depends(get_booking_service),
    logger: ports.ILogger = Depends(get_logger),
):
    """Свободные окна комнаты в диапазоне не короче `min_hours` часов."""
    try:
        query = FreeSlotsQuery(
            room_id=room_id,
            range_start=range_start,
            range_end=range_end,
            min_hours=min_hours,
        )
    except ValidationError as exc:
        return _bad_request(logger, _error_messages(exc.errors()))

    result = service.get_free_slots(query)
    if isinstance(result, ValidationFailed):
        return _bad_request(logger, list(result.errors))
    return [FreeSlotDTO.from_domain(slot) for slot in result.slots]


def create_app(
    service: BookingApplicationService,
    logger: Optional[ports.ILogger] = None,
) -> FastAPI:
    """Собирает приложение FastAPI вокруг готового сервиса."""
    app = FastAPI(title="Room Booking API", version=__version__)
    app.state.booking_service = service
    app.state.logger = logger or StdLibLogger("room_booking.api")
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)
    return app
