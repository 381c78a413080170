"""
Structured logging for Graph Explorer
구조화된 로깅 시스템 (structlog + 표준 logging)

환경 변수:
    LOG_LEVEL: 로그 레벨 (기본 INFO, production 기본 WARNING)
    LOG_FORMAT: console | json
    LOG_TO_FILE: true면 logs/app.log 에도 기록 (production 제외)
    LOG_QUERY_MAX_LENGTH: 로그에 남길 Gremlin 쿼리 최대 길이 (기본 500)
"""

import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, cast

import structlog
from structlog.stdlib import LoggerFactory

# 한국 시간대 (KST = UTC+9)
KST = timezone(timedelta(hours=9))

SERVICE_NAME = "gremlin-graph-explorer"

# 쿼리 문자열이 들어가는 이벤트 필드
QUERY_FIELDS = ("query", "gremlin", "stage_query")

_configured = False


def add_kst_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """KST(한국 시간) 타임스탬프 추가"""
    event_dict["timestamp"] = datetime.now(KST).isoformat()
    return event_dict


def add_service_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict["service"] = SERVICE_NAME
    event_dict["environment"] = os.getenv("NODE_ENV", "development")
    event_dict["pid"] = os.getpid()
    return event_dict


class QueryShortener:
    """
    긴 Gremlin 쿼리 축약 processor

    누락 정점 조회(g.V(id1, id2, ... id500)) 같은 내부 쿼리는 수 KB가 되므로
    로그에는 앞부분과 전체 길이만 남긴다.
    """

    def __init__(self, max_length: int = 500):
        self.max_length = max_length

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for field in QUERY_FIELDS:
            value = event_dict.get(field)
            if isinstance(value, str) and len(value) > self.max_length:
                event_dict[field] = f"{value[: self.max_length]}… ({len(value)} chars)"
        return event_dict


def _resolve_level() -> int:
    is_production = os.getenv("NODE_ENV", "development") == "production"
    level_name = os.getenv("LOG_LEVEL", "WARNING" if is_production else "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _build_handlers() -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    is_production = os.getenv("NODE_ENV", "development") == "production"
    if not is_production and os.getenv("LOG_TO_FILE", "false").lower() == "true":
        log_dir = Path("/app/logs") if os.path.exists("/app") else Path("./logs")
        log_dir.mkdir(exist_ok=True, parents=True)
        handlers.append(logging.FileHandler(log_dir / "app.log"))

    return handlers


def configure_logging(force: bool = False) -> None:
    """structlog / logging 설정 (프로세스당 한 번)"""
    global _configured
    if _configured and not force:
        return

    logging.basicConfig(level=_resolve_level(), format="%(message)s", handlers=_build_handlers(), force=force)

    # 웹소켓 프레임 단위 로그는 너무 많음
    for noisy_logger in ["aiohttp", "httpx", "httpcore", "asyncio"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    use_json = os.getenv("LOG_FORMAT", "console").lower() == "json"
    renderer: Any = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            add_kst_timestamp,  # type: ignore[list-item]
            QueryShortener(int(os.getenv("LOG_QUERY_MAX_LENGTH", "500"))),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,  # type: ignore[list-item]
            renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """로거 인스턴스 반환 (최초 호출 시 설정)"""
    configure_logging()
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name or __name__))
