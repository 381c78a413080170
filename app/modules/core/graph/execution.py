"""
실행 로그 및 취소 래퍼

- 모든 하위 쿼리를 {type: 단계명, query, result: 원시 결과 스냅샷} 으로 도착 순서대로 기록
- 단계마다 새 세션을 열고 반드시 닫음 (세션 재사용 금지)
- 메인 쿼리는 요청 수명에 묶임: 클라이언트가 끊기면 진행 중인 세션을 닫고 취소
- 모든 백엔드 호출은 타임아웃을 가짐
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from app.config.schemas import PipelineConfig
from app.lib.errors import (
    ErrorCode,
    GraphAppException,
    GraphConnectionError,
    QueryCancelledError,
    QueryExecutionError,
)
from app.lib.logger import get_logger

from .backends.graphson import to_plain
from .interfaces import IGraphSession, IGraphSessionFactory
from .models import ExecutionLogEntry, GraphEndpoint

logger = get_logger(__name__)

T = TypeVar("T")

DisconnectCheck = Callable[[], Awaitable[bool]]

# 단계명 (실행 로그의 type 필드)
STAGE_MAIN_QUERY = "Main Query"
STAGE_MISSING_NODE_FETCH = "Missing Node Fetch"
STAGE_AUTO_CONNECT = "Auto-Connect"
STAGE_NODE_ENRICHMENT = "Node Enrichment"
STAGE_EDGE_ENRICHMENT = "Edge Enrichment"
STAGE_EDGE_PROPERTY_LOOKUP = "Edge Property Lookup"
STAGE_EXPLAIN = "Explain"
STAGE_PROFILE = "Profile"


class StageStatus(str, Enum):
    OK = "ok"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StageOutcome:
    """
    보강 단계 결과

    보강 단계는 예외를 던지지 않고 결과만 반환합니다.
    """

    stage: str
    status: StageStatus
    queries: int = 0
    failures: int = 0
    nodes_added: int = 0
    links_added: int = 0
    properties_filled: int = 0
    detail: str | None = None

    @classmethod
    def skipped(cls, stage: str, reason: str) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.SKIPPED, detail=reason)

    @classmethod
    def from_batches(
        cls, stage: str, queries: int, failures: int, detail: str | None = None, **counts: int
    ) -> "StageOutcome":
        if failures == 0:
            status = StageStatus.OK
        elif failures < queries:
            status = StageStatus.PARTIAL
        else:
            status = StageStatus.FAILED
        return cls(stage=stage, status=status, queries=queries, failures=failures, detail=detail, **counts)

    def summary(self) -> dict[str, Any]:
        summary: dict[str, Any] = {"stage": self.stage, "status": self.status.value}
        for name in ("queries", "failures", "nodes_added", "links_added", "properties_filled"):
            value = getattr(self, name)
            if value:
                summary[name] = value
        if self.detail:
            summary["detail"] = self.detail
        return summary


class ExecutionLog:
    """요청 단위 실행 로그"""

    def __init__(self) -> None:
        self._entries: list[ExecutionLogEntry] = []

    def record(self, stage: str, query: str, items: Any) -> None:
        self._entries.append(ExecutionLogEntry(type=stage, query=query, result=to_plain(items)))

    @property
    def entries(self) -> list[ExecutionLogEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


async def close_session_quietly(session: IGraphSession, stage: str, grace_period: float) -> None:
    """세션 종료 (유예 시간 내). 종료 실패는 원래 결과/예외를 가리지 않음"""
    try:
        await asyncio.wait_for(session.close(), timeout=grace_period)
    except TimeoutError:
        logger.warning("세션 종료 타임아웃", stage=stage, timeout=grace_period)
    except Exception as e:
        logger.warning("세션 종료 중 오류", stage=stage, error=str(e))


class StageRunner:
    """
    단계별 쿼리 실행기

    Attributes:
        endpoint: 대상 엔드포인트
        log: 실행 로그 (성공한 쿼리만 기록)
    """

    def __init__(
        self,
        session_factory: IGraphSessionFactory,
        endpoint: GraphEndpoint,
        log: ExecutionLog,
        config: PipelineConfig,
    ) -> None:
        self._session_factory = session_factory
        self.endpoint = endpoint
        self.log = log
        self._config = config

    async def run(self, stage: str, query: str, timeout: float | None = None) -> list[Any]:
        """
        보강 단계 쿼리 실행 (새 세션, 단계 타임아웃)

        취소 대상이 아니며, 실패는 그대로 전파되어 호출한 단계에서 처리합니다.
        """
        timeout = timeout or self._config.stage_timeout
        session = self._session_factory.create(self.endpoint)
        logger.info("🔎 하위 쿼리 실행", stage=stage, query=query)
        try:
            items = await asyncio.wait_for(self._open_and_submit(session, query), timeout=timeout)
        finally:
            await self._close_session(session, stage)

        self.log.record(stage, query, items)
        logger.info("✅ 하위 쿼리 완료", stage=stage, items=len(items))
        return items

    async def run_primary(self, query: str, is_disconnected: DisconnectCheck | None = None) -> list[Any]:
        """
        메인 쿼리 실행 (요청 수명에 묶인 취소 가능 실행)

        Raises:
            GraphConnectionError: 세션 열기 실패 (CONN-001) / 연결 타임아웃 (CONN-002)
            QueryExecutionError: 서버 측 실행 오류 (EXEC-001) / 실행 타임아웃 (EXEC-002)
            QueryCancelledError: 클라이언트 연결 종료 (EXEC-003)
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._config.query_timeout
        session = self._session_factory.create(self.endpoint)
        logger.info("🚀 메인 쿼리 실행", endpoint=self.endpoint.address, query=query)

        try:
            try:
                await self._bounded(session.open(), deadline, is_disconnected)
            except GraphAppException:
                raise
            except TimeoutError as e:
                raise GraphConnectionError(
                    ErrorCode.CONN_002,
                    endpoint=self.endpoint.address,
                    timeout=self._config.query_timeout,
                ) from e
            except Exception as e:
                raise GraphConnectionError(
                    ErrorCode.CONN_001,
                    endpoint=self.endpoint.address,
                    reason=str(e) or type(e).__name__,
                ) from e

            try:
                items = await self._bounded(session.submit(query), deadline, is_disconnected)
            except GraphAppException:
                raise
            except TimeoutError as e:
                raise QueryExecutionError(ErrorCode.EXEC_002, timeout=self._config.query_timeout) from e
            except Exception as e:
                raise QueryExecutionError(ErrorCode.EXEC_001, reason=str(e) or type(e).__name__) from e
        finally:
            await self._close_session(session, STAGE_MAIN_QUERY)

        self.log.record(STAGE_MAIN_QUERY, query, items)
        logger.info("✅ 메인 쿼리 완료", items=len(items))
        return items

    async def _bounded(
        self,
        awaitable: Awaitable[T],
        deadline: float,
        is_disconnected: DisconnectCheck | None,
    ) -> T:
        """
        데드라인과 클라이언트 연결 상태를 주기적으로 확인하며 대기

        클라이언트가 끊기면 작업을 취소하고 QueryCancelledError를 발생시킵니다.
        """
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(awaitable)
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise TimeoutError()
                done, _ = await asyncio.wait(
                    {task}, timeout=min(self._config.disconnect_poll_interval, remaining)
                )
                if task in done:
                    return task.result()
                if is_disconnected is not None and await is_disconnected():
                    logger.warning("🛑 클라이언트 연결 종료, 메인 쿼리 취소", endpoint=self.endpoint.address)
                    raise QueryCancelledError(ErrorCode.EXEC_003)
        finally:
            if not task.done():
                task.cancel()
                await asyncio.wait({task}, timeout=self._config.cancel_grace_period)

    async def _open_and_submit(self, session: IGraphSession, query: str) -> list[Any]:
        await session.open()
        return await session.submit(query)

    async def _close_session(self, session: IGraphSession, stage: str) -> None:
        await close_session_quietly(session, stage, self._config.cancel_grace_period)
