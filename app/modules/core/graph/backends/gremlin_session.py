"""
GremlinSession - Gremlin Server WebSocket 세션 (aiohttp)

Gremlin Server 프로토콜:
- 요청: {"requestId", "op": "eval", "processor": "", "args": {"gremlin", "language", "aliases"}}
- 바이너리 프레임 = [MIME 길이 1바이트][MIME 타입][JSON 요청]
- 응답: status.code 206(부분)을 200/204까지 누적, 그 외 코드는 GremlinServerError

세션은 단계마다 새로 열고 닫습니다. close()는 멱등이며
submit() 진행 중에 호출해도 안전합니다 (메인 쿼리 취소 경로).
"""

import json
import uuid
from typing import Any

import aiohttp

from app.config.schemas import GremlinConfig
from app.lib.logger import get_logger

from ..models import GraphEndpoint
from .graphson import decode_result_data

logger = get_logger(__name__)

STATUS_SUCCESS = 200
STATUS_NO_CONTENT = 204
STATUS_PARTIAL_CONTENT = 206
STATUS_AUTHENTICATE = 407


class GremlinServerError(Exception):
    """
    Gremlin Server가 오류 상태 코드로 응답

    Attributes:
        status_code: 응답 status.code (예: 597 스크립트 평가 오류)
        message: status.message
    """

    def __init__(self, status_code: int, message: str, attributes: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.attributes = attributes or {}
        super().__init__(f"{status_code}: {message}")


class GremlinSession:
    """
    aiohttp 기반 단일 Gremlin Server 세션

    Attributes:
        endpoint: 대상 엔드포인트
        url: WebSocket URL (ws://host:port/gremlin)
    """

    def __init__(self, endpoint: GraphEndpoint, settings: GremlinConfig) -> None:
        self.endpoint = endpoint
        self._settings = settings
        self.url = f"{settings.scheme}://{endpoint.host}:{endpoint.port}{settings.path}"
        self._http: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> None:
        if self._closed:
            raise RuntimeError("Gremlin session is already closed")
        if self._ws is not None:
            return

        timeout = aiohttp.ClientTimeout(total=None, connect=self._settings.connect_timeout)
        self._http = aiohttp.ClientSession(timeout=timeout)
        try:
            self._ws = await self._http.ws_connect(
                self.url,
                max_msg_size=self._settings.max_message_size,
                timeout=aiohttp.ClientWSTimeout(ws_receive=None, ws_close=self._settings.connect_timeout),
            )
        except Exception:
            await self._http.close()
            self._http = None
            raise
        logger.debug("Gremlin 세션 열림", url=self.url)

    def _frame(self, query: str) -> bytes:
        mime = self._settings.mime_type.encode("utf-8")
        message = {
            "requestId": str(uuid.uuid4()),
            "op": "eval",
            "processor": "",
            "args": {
                "gremlin": query,
                "language": "gremlin-groovy",
                "aliases": {"g": self._settings.traversal_source},
            },
        }
        return bytes([len(mime)]) + mime + json.dumps(message).encode("utf-8")

    async def submit(self, query: str) -> list[Any]:
        """
        쿼리를 그대로 전송하고 전체 결과 반환

        Raises:
            GremlinServerError: 오류 상태 코드 응답
            ConnectionResetError: 응답 완료 전에 연결이 닫힘
        """
        if self._ws is None or self._closed:
            raise RuntimeError("Gremlin session is not open")

        await self._ws.send_bytes(self._frame(query))

        results: list[Any] = []
        while True:
            message = await self._ws.receive()
            if message.type in (aiohttp.WSMsgType.BINARY, aiohttp.WSMsgType.TEXT):
                payload = json.loads(message.data)
            elif message.type == aiohttp.WSMsgType.ERROR:
                raise ConnectionResetError(f"WebSocket error: {self._ws.exception()}")
            else:
                raise ConnectionResetError("Gremlin Server closed the connection")

            status = payload.get("status") or {}
            code = status.get("code")

            if code == STATUS_NO_CONTENT:
                return results
            if code in (STATUS_SUCCESS, STATUS_PARTIAL_CONTENT):
                results.extend(decode_result_data((payload.get("result") or {}).get("data")))
                if code == STATUS_SUCCESS:
                    return results
                continue
            if code == STATUS_AUTHENTICATE:
                raise GremlinServerError(code, "authentication is not supported by this client")
            raise GremlinServerError(code or 0, status.get("message") or "", status.get("attributes"))

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        ws, http = self._ws, self._http
        self._ws, self._http = None, None
        try:
            if ws is not None and not ws.closed:
                await ws.close()
        finally:
            if http is not None:
                await http.close()
        logger.debug("Gremlin 세션 닫힘", url=self.url)


class GremlinSessionFactory:
    """
    요청 간 공유되는 세션 팩토리

    불변 설정만 가지므로 동시에 호출해도 안전합니다.
    """

    def __init__(self, settings: GremlinConfig | None = None) -> None:
        self.settings = settings or GremlinConfig()

    def create(self, endpoint: GraphEndpoint) -> GremlinSession:
        return GremlinSession(endpoint, self.settings)
