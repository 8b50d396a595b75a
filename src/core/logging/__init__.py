"""
Logging — структурированное логирование ядра (structlog)
"""

from src.core.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
