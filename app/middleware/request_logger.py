"""
Request Logging Middleware (pure ASGI)

요청마다 메서드, 경로, 상태 코드, 처리 시간을 한 줄로 남깁니다.
상태 코드는 send로 나가는 http.response.start 메시지에서 읽습니다.
"""

from time import perf_counter

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.lib.logger import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware:
    """요청 로깅 미들웨어"""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = perf_counter()
        # 응답 시작 전에 예외가 나면 ServerErrorMiddleware가 500을 보냄
        status_code = 500

        async def send_with_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            process_time = perf_counter() - started
            method = scope.get("method", "")
            path = scope.get("path", "")
            client = scope.get("client")
            logger.info(
                f"{method} {path} - {status_code} - {process_time:.3f}s",
                method=method,
                path=path,
                status_code=status_code,
                process_time=process_time,
                client_ip=client[0] if client else None,
            )
