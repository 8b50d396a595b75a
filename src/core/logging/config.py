"""
Logging Config — централизованная настройка structlog

Все модули ядра получают логгер через get_logger(__name__).

ВАЖНО: точные суммы кошелька не логируются на уровне INFO и выше.
Parse-fallback и отклонённые валидации пишутся только на DEBUG.

Хост вызывает configure_logging() при старте. Без этого structlog
печатает все уровни, включая DEBUG, в stdout.
"""

import logging
import sys
from typing import Any, Optional

import structlog


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    extra_processors: Optional[list] = None,
) -> None:
    """
    Настройка structlog для всего приложения.

    Args:
        level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: JSON вывод вместо человекочитаемого
        include_timestamp: Добавлять ISO timestamp
        extra_processors: Дополнительные structlog процессоры

    Raises:
        ValueError: Если level не является уровнем logging
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown logging level: {level}")

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Получение structlog логгера.

    Возвращает ленивый прокси: класс обёртки определяется конфигурацией
    structlog на момент первого вызова (stdlib BoundLogger после
    configure_logging).

    Args:
        name: Имя логгера (обычно __name__)

    Returns:
        Логгер с привязанной подсистемой numeric_core
    """
    return structlog.get_logger(name, subsystem="numeric_core")
