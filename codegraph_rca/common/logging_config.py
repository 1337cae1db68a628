"""
구조화 로깅 설정

특징:
1. 구조화 (JSON, 분석 가능)
2. 배치 로깅 (N개 → 1개 요약)
3. 환경 변수 기반 레벨
"""

import logging
import os
import sys
import time
from typing import Any

import structlog
from structlog.processors import JSONRenderer

# ============================================================
# 환경 기반 로깅 레벨
# ============================================================


def get_log_level() -> str:
    """환경 변수 기반 로그 레벨"""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def is_debug_enabled() -> bool:
    """DEBUG 레벨 활성화 여부"""
    return get_log_level() == "DEBUG"


# ============================================================
# 구조화 로깅 설정
# ============================================================


def configure_logging(
    level: str | None = None,
    json_format: bool = False,
) -> None:
    """
    구조화 로깅 설정.

    Args:
        level: 로그 레벨 (None이면 환경변수 사용)
        json_format: JSON 포맷 (분석용)
    """
    if level is None:
        level = get_log_level()

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdlib logging 설정
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )


def get_logger(name: str):
    """구조화 로거 가져오기"""
    return structlog.get_logger(name)


# ============================================================
# 배치 로깅 헬퍼
# ============================================================


class BatchLogger:
    """
    배치 로깅 (hot path 최적화).

    파일 단위 반복 작업의 개별 로그 대신 요약 로그 1개를 남긴다.

    Example:
        with BatchLogger(logger, "chunk_files") as batch:
            for path in paths:
                batch.record(file_path=path, chunks=len(chunks))
        # 자동으로 요약 로그 출력
    """

    def __init__(self, logger, operation: str, sample_size: int = 3):
        self.logger = logger
        self.operation = operation
        self.sample_size = sample_size
        self.count = 0
        self.records: list[dict[str, Any]] = []
        self.start_time: float | None = None

    def __enter__(self) -> "BatchLogger":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = time.perf_counter() - (self.start_time or time.perf_counter())

        log_data: dict[str, Any] = {
            "count": self.count,
            "duration_ms": round(duration * 1000, 2),
        }
        if self.records:
            log_data["samples"] = self.records

        if exc_type is not None:
            self.logger.warning(f"{self.operation}_aborted", error=str(exc_val), **log_data)
        else:
            self.logger.info(f"{self.operation}_complete", **log_data)

    def record(self, **kwargs: Any) -> None:
        """레코드 추가 (샘플만 메모리에 보관)"""
        self.count += 1
        if len(self.records) < self.sample_size:
            self.records.append(kwargs)
