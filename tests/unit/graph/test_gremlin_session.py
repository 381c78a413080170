"""
GremlinSession 단위 테스트
WebSocket은 mock으로 대체하여 프레임 형식과 응답 상태 코드 처리 검증
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from app.config.schemas import GremlinConfig
from app.modules.core.graph.backends.gremlin_session import GremlinServerError, GremlinSession
from app.modules.core.graph.models import GraphEndpoint


def response(code, data=None, message=""):
    payload = {
        "requestId": "r",
        "status": {"code": code, "message": message, "attributes": {}},
        "result": {"data": data, "meta": {}},
    }
    return SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=json.dumps(payload))


@pytest.fixture
def session():
    return GremlinSession(GraphEndpoint(host="db", port=8182), GremlinConfig(traversal_source="gs"))


def attach_socket(session, *messages):
    ws = MagicMock()
    ws.closed = False
    ws.send_bytes = AsyncMock()
    ws.receive = AsyncMock(side_effect=list(messages))
    ws.close = AsyncMock()
    session._ws = ws
    return ws


class TestFrame:
    """요청 프레임 형식"""

    def test_frame_layout(self, session):
        """
        바이너리 프레임

        Given: 기본 MIME 타입
        When: _frame 호출
        Then: [MIME 길이][MIME][JSON] 순서, 쿼리는 그대로, g 별칭 바인딩
        """
        frame = session._frame("g.V().limit(1)")
        mime = b"application/vnd.gremlin-v3.0+json"

        assert frame[0] == len(mime)
        assert frame[1 : 1 + len(mime)] == mime
        message = json.loads(frame[1 + len(mime) :])
        assert message["op"] == "eval"
        assert message["args"]["gremlin"] == "g.V().limit(1)"
        assert message["args"]["aliases"] == {"g": "gs"}


class TestSubmit:
    """submit 응답 처리"""

    @pytest.mark.asyncio
    async def test_accumulates_partial_responses(self, session):
        attach_socket(
            session,
            response(206, {"@type": "g:List", "@value": [1, 2]}),
            response(200, {"@type": "g:List", "@value": [3]}),
        )

        assert await session.submit("g.V().id()") == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_no_content(self, session):
        attach_socket(session, response(204))

        assert await session.submit("g.V().drop()") == []

    @pytest.mark.asyncio
    async def test_error_status_raises(self, session):
        attach_socket(session, response(597, message="No such property: foo"))

        with pytest.raises(GremlinServerError) as exc_info:
            await session.submit("g.V().foo()")

        assert exc_info.value.status_code == 597
        assert "No such property" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_closed_mid_response(self, session):
        attach_socket(session, SimpleNamespace(type=aiohttp.WSMsgType.CLOSED, data=None))

        with pytest.raises(ConnectionResetError):
            await session.submit("g.V()")

    @pytest.mark.asyncio
    async def test_submit_requires_open_session(self, session):
        with pytest.raises(RuntimeError):
            await session.submit("g.V()")


class TestClose:
    """close 멱등성"""

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, session):
        ws = attach_socket(session)

        await session.close()
        await session.close()

        ws.close.assert_awaited_once()
        assert session.closed

    @pytest.mark.asyncio
    async def test_open_after_close_rejected(self, session):
        await session.close()

        with pytest.raises(RuntimeError):
            await session.open()
