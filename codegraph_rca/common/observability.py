"""
Common observability utilities.

All layers import loggers from here. The first call configures structlog
from the environment (LOG_LEVEL, CODEGRAPH_RCA_LOG_JSON).
"""

import os
from typing import Any

from codegraph_rca.common.logging_config import configure_logging
from codegraph_rca.common.logging_config import get_logger as get_structured_logger

# 전역 로거 캐시
_LOGGER_CACHE: dict[str, Any] = {}
_INITIALIZED = False


def get_logger(name: str):
    """
    로거 가져오기.

    첫 호출 시 자동으로 로깅 시스템 초기화.

    Args:
        name: 로거 이름 (보통 __name__)

    Returns:
        structlog 로거
    """
    global _INITIALIZED

    if not _INITIALIZED:
        _initialize_logging()
        _INITIALIZED = True

    if name in _LOGGER_CACHE:
        return _LOGGER_CACHE[name]

    logger = get_structured_logger(name)
    _LOGGER_CACHE[name] = logger
    return logger


def _initialize_logging() -> None:
    """로깅 시스템 초기화 (자동)"""
    json_format = os.getenv("CODEGRAPH_RCA_LOG_JSON", "").lower() in ("1", "true", "yes")
    configure_logging(json_format=json_format)


def reset_logging() -> None:
    """로깅 시스템 리셋 (테스트용)"""
    global _INITIALIZED
    _INITIALIZED = False
    _LOGGER_CACHE.clear()


__all__ = ["get_logger", "reset_logging"]
