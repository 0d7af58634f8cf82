"""
Модуль контекста бронирования (Booking Context).

Отвечает за бронирование переговорных комнат, включая:
- Создание и отмену бронирований
- Проверку пересечений с учетом конкурентных запросов
- Поиск свободных окон в расписании комнаты
"""

from . import api, application, domain, infrastructure, interfaces

__all__ = [
    "api",
    "application",
    "domain",
    "infrastructure",
    "interfaces",
]
