"""
Error Logging Middleware (pure ASGI)

라우트 밖으로 빠져나가는 에러를 구조화된 로그로 남깁니다.
응답은 만들지 않고 항상 원본 예외를 다시 raise 합니다 (응답은 main.py 예외 핸들러 담당).

- QueryCancelledError: 클라이언트가 먼저 끊은 요청이므로 info
- GraphAppException: 에러 코드, HTTP 상태, 컨텍스트
- 그 외 Exception: 트레이스백

receive 채널은 그대로 전달해야 라우트에서 request.is_disconnected()가
클라이언트 연결 종료를 볼 수 있습니다. (BaseHTTPMiddleware는 이를 가림)
"""

import traceback
from time import perf_counter

from starlette.types import ASGIApp, Receive, Scope, Send

from app.lib.errors import GraphAppException, QueryCancelledError
from app.lib.logger import get_logger

logger = get_logger(__name__)


class ErrorLoggingMiddleware:
    """에러 로깅 미들웨어"""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = perf_counter()
        try:
            await self.app(scope, receive, send)
        except Exception as e:
            request_log = logger.bind(
                path=scope.get("path", ""),
                method=scope.get("method", ""),
                duration_ms=round((perf_counter() - started) * 1000, 2),
            )
            try:
                self._log_exception(request_log, e)
            except Exception as logging_error:
                # 로깅 실패가 원본 에러 전파를 막으면 안 됨
                logger.warning("error_logging_failed", logging_error=str(logging_error), original_error=str(e))
            raise

    @staticmethod
    def _log_exception(request_log, exc: Exception) -> None:
        if isinstance(exc, QueryCancelledError):
            request_log.info("🛑 query_cancelled", error_code=exc.error_code)
        elif isinstance(exc, GraphAppException):
            request_log.error(
                "graph_error_caught",
                error_code=exc.error_code,
                status_code=exc.status_code,
                message=exc.message,
                context=exc.context,
            )
        else:
            request_log.error(
                "unhandled_exception_caught",
                error=str(exc),
                error_type=type(exc).__name__,
                traceback=traceback.format_exc(),
            )
