"""
그래프 결과 조정 파이프라인

요청 → 메인 쿼리(취소 가능) → 분류/조립 → 누락 노드 보충
     → [autoConnect] 유도 부분그래프 연결
     → [puppy] 속성 보강
     → [explain/profile] 진단
     → {raw, executionLog, graph: {nodes, links}}

단계는 엄격히 순차 실행됩니다. 메인 쿼리 실패만 호출자에게 전파되며,
보강 단계 실패는 로그만 남기고 결과 품질만 낮춥니다.
"""

import asyncio
from collections.abc import Awaitable
from typing import Any

from app.config.schemas import GremlinConfig, PipelineConfig
from app.lib.errors import ErrorCode, GraphConnectionError, QueryExecutionError, QueryInputError
from app.lib.logger import get_logger

from .assembler import GraphAssembler
from .backends.graphson import to_plain
from .connector import InducedSubgraphConnector
from .enrichment import PropertyEnricher, fetch_edge_properties
from .execution import (
    STAGE_EXPLAIN,
    STAGE_PROFILE,
    DisconnectCheck,
    ExecutionLog,
    StageOutcome,
    StageRunner,
    StageStatus,
    close_session_quietly,
)
from .factory import GraphBackendFactory
from .gap_resolver import GapResolver
from .interfaces import IGraphSessionFactory
from .models import GraphEndpoint, GraphQueryRequest, QueryOutcome
from .queries import diagnostic_query

logger = get_logger(__name__)


class GraphQueryPipeline:
    """
    그래프 쿼리 파이프라인

    요청 간 공유 상태는 세션 팩토리뿐이며,
    그래프/실행 로그는 execute() 호출마다 새로 만듭니다.
    """

    def __init__(
        self,
        session_factory: IGraphSessionFactory,
        config: PipelineConfig | None = None,
        gremlin_config: GremlinConfig | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.config = config or PipelineConfig()
        self.gremlin_config = gremlin_config or GremlinConfig()

        self.gap_resolver = GapResolver(
            batch_size=self.config.gap_resolution.batch_size,
            concurrency=self.config.gap_resolution.concurrency,
        )
        self.connector = InducedSubgraphConnector(max_nodes=self.config.auto_connect.max_nodes)
        self.enricher = PropertyEnricher(
            node_batch_size=self.config.enrichment.node_batch_size,
            edge_batch_size=self.config.enrichment.edge_batch_size,
            concurrency=self.config.enrichment.concurrency,
        )

    def resolve_endpoint(self, host: str | None = None, port: int | str | None = None) -> GraphEndpoint:
        """
        요청의 host/port로 엔드포인트 생성 (없으면 설정 기본값)

        Raises:
            QueryInputError: 포트가 정수가 아니거나 범위를 벗어남 (QUERY-003)
        """
        resolved_host = (host or "").strip() or self.gremlin_config.default_host
        if port is None or (isinstance(port, str) and not port.strip()):
            resolved_port: Any = self.gremlin_config.default_port
        else:
            resolved_port = port
        try:
            return GraphEndpoint(host=resolved_host, port=int(resolved_port))
        except ValueError as e:
            raise QueryInputError(ErrorCode.QUERY_003, reason=f"invalid port: {port}") from e

    def _runner(self, endpoint: GraphEndpoint, log: ExecutionLog) -> StageRunner:
        return StageRunner(self.session_factory, endpoint, log, self.config)

    async def execute(
        self,
        request: GraphQueryRequest,
        is_disconnected: DisconnectCheck | None = None,
    ) -> QueryOutcome:
        """
        파이프라인 실행

        Args:
            request: 쿼리 요청
            is_disconnected: 클라이언트 연결 종료 확인 함수 (메인 쿼리 취소용)

        Raises:
            QueryInputError: 쿼리 누락 (QUERY-001) / 지원하지 않는 백엔드 (QUERY-002)
            GraphConnectionError / QueryExecutionError / QueryCancelledError: 메인 쿼리 실패
        """
        if not request.query or not request.query.strip():
            raise QueryInputError(ErrorCode.QUERY_001)

        try:
            needs_enrichment = GraphBackendFactory.requires_property_enrichment(request.backend_type)
        except ValueError as e:
            raise QueryInputError(
                ErrorCode.QUERY_002,
                backend_type=request.backend_type,
                supported=", ".join(GraphBackendFactory.get_supported_backends()),
            ) from e

        log = ExecutionLog()
        runner = self._runner(request.endpoint, log)

        raw = await runner.run_primary(request.query, is_disconnected)

        assembler = GraphAssembler()
        initial = assembler.merge_items(raw)
        logger.info(
            "📊 초기 그래프 조립",
            items=len(raw),
            nodes=initial.nodes_added,
            links=initial.links_added,
        )

        outcomes: list[StageOutcome] = []
        outcomes.append(await self._best_effort("gap_resolution", self.gap_resolver.resolve(assembler, runner)))
        if request.auto_connect:
            outcomes.append(await self._best_effort("auto_connect", self.connector.connect(assembler, runner)))
        if needs_enrichment:
            outcomes.append(await self._best_effort("node_enrichment", self.enricher.enrich_nodes(assembler, runner)))
            outcomes.append(await self._best_effort("edge_enrichment", self.enricher.enrich_links(assembler, runner)))
        if request.explain:
            outcomes.append(await self._diagnose(STAGE_EXPLAIN, request.query, "explain", runner))
        if request.profile:
            outcomes.append(await self._diagnose(STAGE_PROFILE, request.query, "profile", runner))

        logger.info(
            "✅ 그래프 쿼리 파이프라인 완료",
            backend_type=request.backend_type,
            nodes=assembler.node_count,
            links=assembler.link_count,
            log_entries=len(log),
            stages=[outcome.summary() for outcome in outcomes],
        )

        return QueryOutcome(
            raw=to_plain(raw),
            execution_log=log.entries,
            graph=assembler.to_payload(),
        )

    async def _best_effort(self, name: str, stage: Awaitable[StageOutcome]) -> StageOutcome:
        """보강 단계 실행 (예외는 로그 후 failed 결과로 변환)"""
        try:
            return await stage
        except Exception as e:
            logger.warning("⚠️ 보강 단계 실패", stage=name, error=str(e) or type(e).__name__)
            return StageOutcome(stage=name, status=StageStatus.FAILED, failures=1, detail=str(e))

    async def _diagnose(self, stage: str, query: str, step: str, runner: StageRunner) -> StageOutcome:
        try:
            await runner.run(stage, diagnostic_query(query, step))
        except Exception as e:
            logger.warning("⚠️ 진단 쿼리 실패", stage=stage, error=str(e) or type(e).__name__)
            return StageOutcome(stage=stage, status=StageStatus.FAILED, queries=1, failures=1)
        return StageOutcome(stage=stage, status=StageStatus.OK, queries=1)

    async def fetch_edge_properties(
        self, endpoint: GraphEndpoint, source_id: Any, edge_id: Any
    ) -> dict[str, Any]:
        """
        단일 엣지 속성 조회

        메인 쿼리가 아니므로 실패는 QueryExecutionError(EXEC-001)로 변환합니다.
        """
        runner = self._runner(endpoint, ExecutionLog())
        try:
            return await fetch_edge_properties(runner, source_id, edge_id)
        except TimeoutError as e:
            raise QueryExecutionError(ErrorCode.EXEC_002, timeout=self.config.stage_timeout) from e
        except Exception as e:
            raise QueryExecutionError(ErrorCode.EXEC_001, reason=str(e) or type(e).__name__) from e

    async def test_connection(self, endpoint: GraphEndpoint) -> str:
        """
        연결 테스트 (세션 열기 후 즉시 닫기)

        Returns:
            성공 메시지

        Raises:
            GraphConnectionError: 연결 실패 (CONN-001) / 타임아웃 (CONN-002)
        """
        session = self.session_factory.create(endpoint)
        try:
            await asyncio.wait_for(session.open(), timeout=self.gremlin_config.connect_timeout)
        except TimeoutError as e:
            raise GraphConnectionError(
                ErrorCode.CONN_002,
                endpoint=endpoint.address,
                timeout=self.gremlin_config.connect_timeout,
            ) from e
        except Exception as e:
            raise GraphConnectionError(
                ErrorCode.CONN_001,
                endpoint=endpoint.address,
                reason=str(e) or type(e).__name__,
            ) from e
        finally:
            await close_session_quietly(session, "Connection Test", self.config.cancel_grace_period)

        logger.info("🔌 연결 테스트 성공", endpoint=endpoint.address)
        return f"Successfully connected to {endpoint.address}"
