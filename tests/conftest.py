"""
테스트 공통 설정 및 픽스처

pytest conftest.py - 모든 테스트에서 공유되는 설정과 픽스처 정의.
그래프 백엔드는 스크립트된 가짜 세션 팩토리로 대체합니다.
"""

import asyncio
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# 프로젝트 루트 경로를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def pytest_configure(config: pytest.Config) -> None:
    """
    pytest 설정 훅

    테스트 환경임을 명시하고 파일 로깅을 끕니다.
    """
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_TO_FILE"] = "false"


Responder = Callable[[str], Any]


class FakeGraphSession:
    """스크립트된 응답을 돌려주는 가짜 세션 (IGraphSession 구현)"""

    def __init__(self, factory: "FakeSessionFactory", endpoint: Any) -> None:
        self.factory = factory
        self.endpoint = endpoint
        self.opened = False
        self.closed = False
        self.closed_at: float | None = None
        self.queries: list[str] = []

    async def open(self) -> None:
        if self.factory.open_error is not None:
            raise self.factory.open_error
        self.opened = True

    async def submit(self, query: str) -> list[Any]:
        self.queries.append(query)
        self.factory.queries.append(query)
        if self.factory.delay:
            await asyncio.sleep(self.factory.delay)
        result = self.factory.responder(query)
        if isinstance(result, BaseException):
            raise result
        return list(result or [])

    async def close(self) -> None:
        self.closed = True
        self.closed_at = asyncio.get_running_loop().time()
        if self.factory.close_error is not None:
            raise self.factory.close_error


class FakeSessionFactory:
    """
    가짜 세션 팩토리 (IGraphSessionFactory 구현)

    Attributes:
        responder: 쿼리 문자열 → 결과 리스트 (예외 인스턴스를 반환하면 raise)
        sessions: 생성된 세션 (생성 순서)
        queries: 전송된 모든 쿼리 (전송 순서)
    """

    def __init__(
        self,
        responder: Responder | None = None,
        delay: float = 0.0,
        open_error: BaseException | None = None,
        close_error: BaseException | None = None,
    ) -> None:
        self.responder: Responder = responder or (lambda query: [])
        self.delay = delay
        self.open_error = open_error
        self.close_error = close_error
        self.sessions: list[FakeGraphSession] = []
        self.queries: list[str] = []

    def create(self, endpoint: Any) -> FakeGraphSession:
        session = FakeGraphSession(self, endpoint)
        self.sessions.append(session)
        return session


def scripted(routes: dict[str, Any], default: Any = None) -> Responder:
    """
    쿼리 prefix → 응답 매핑으로 responder 생성

    가장 긴 prefix가 우선합니다. 매칭되는 prefix가 없으면 default (없으면 빈 결과).
    """
    ordered = sorted(routes.items(), key=lambda item: len(item[0]), reverse=True)

    def respond(query: str) -> Any:
        for prefix, response in ordered:
            if query.startswith(prefix):
                return response(query) if callable(response) else response
        return default if default is not None else []

    return respond


@pytest.fixture(scope="session")
def project_root_path() -> Path:
    """프로젝트 루트 경로"""
    return project_root


@pytest.fixture
def fake_session_factory() -> FakeSessionFactory:
    """빈 결과를 돌려주는 기본 가짜 세션 팩토리"""
    return FakeSessionFactory()


@pytest.fixture
def endpoint():
    """기본 테스트 엔드포인트"""
    from app.modules.core.graph.models import GraphEndpoint

    return GraphEndpoint(host="localhost", port=8182)


@pytest.fixture
def pipeline_config():
    """빠른 테스트용 파이프라인 설정"""
    from app.config.schemas import PipelineConfig

    return PipelineConfig(
        query_timeout=5,
        stage_timeout=2,
        disconnect_poll_interval=0.01,
        cancel_grace_period=0.5,
    )


def edge(edge_id: Any, out_v: Any, in_v: Any, label: str = "knows", **properties: Any) -> dict[str, Any]:
    """GraphSON 디코딩 결과 형태의 엣지"""
    return {
        "id": edge_id,
        "label": label,
        "type": "edge",
        "inV": in_v,
        "outV": out_v,
        "inVLabel": "person",
        "outVLabel": "person",
        "properties": properties,
    }


def vertex(vertex_id: Any, label: str = "person", **properties: Any) -> dict[str, Any]:
    """GraphSON 디코딩 결과 형태의 정점 (다중 값 래퍼 속성)"""
    return {
        "id": vertex_id,
        "label": label,
        "type": "vertex",
        "properties": {
            key: [{"id": f"{vertex_id}-{key}", "value": value, "label": key}]
            for key, value in properties.items()
        },
    }


@pytest.fixture
def make_edge():
    """엣지 생성 헬퍼"""
    return edge


@pytest.fixture
def make_vertex():
    """정점 생성 헬퍼"""
    return vertex


@pytest.fixture
def make_session_factory():
    """FakeSessionFactory 생성 헬퍼"""
    return FakeSessionFactory


@pytest.fixture
def make_responder():
    """prefix 기반 responder 생성 헬퍼"""
    return scripted
