"""
실행 로그 및 취소 래퍼 단위 테스트

메인 쿼리 오류 분류, 클라이언트 연결 종료 시 취소, 세션 종료 보장 검증
"""
import asyncio

import pytest

from app.config.schemas import PipelineConfig
from app.lib.errors import GraphConnectionError, QueryCancelledError, QueryExecutionError
from app.modules.core.graph.execution import (
    ExecutionLog,
    StageOutcome,
    StageRunner,
    StageStatus,
)


class TestStageOutcome:
    """StageOutcome 상태 계산"""

    @pytest.mark.parametrize(
        "queries,failures,expected",
        [(3, 0, StageStatus.OK), (3, 1, StageStatus.PARTIAL), (3, 3, StageStatus.FAILED)],
    )
    def test_from_batches(self, queries, failures, expected):
        outcome = StageOutcome.from_batches("Node Enrichment", queries=queries, failures=failures)

        assert outcome.status == expected

    def test_summary_omits_zero_counts(self):
        outcome = StageOutcome.from_batches("Auto-Connect", queries=1, failures=0, links_added=4)

        assert outcome.summary() == {
            "stage": "Auto-Connect",
            "status": "ok",
            "queries": 1,
            "links_added": 4,
        }


class TestExecutionLog:
    """ExecutionLog 테스트"""

    def test_records_in_arrival_order(self):
        log = ExecutionLog()

        log.record("Main Query", "g.V()", [{"id": 1}])
        log.record("Missing Node Fetch", "g.V(2).elementMap()", [])

        assert [entry.type for entry in log.entries] == ["Main Query", "Missing Node Fetch"]
        assert log.entries[0].result == [{"id": 1}]
        assert len(log) == 2


class TestStageRunner:
    """StageRunner.run (보강 단계) 테스트"""

    @pytest.mark.asyncio
    async def test_opens_new_session_per_call_and_closes(
        self, make_session_factory, endpoint, pipeline_config
    ):
        factory = make_session_factory(lambda query: [1])
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)

        await runner.run("Explain", "g.V().explain()")
        await runner.run("Profile", "g.V().profile()")

        assert len(factory.sessions) == 2
        assert all(session.opened and session.closed for session in factory.sessions)
        assert [entry.type for entry in runner.log.entries] == ["Explain", "Profile"]

    @pytest.mark.asyncio
    async def test_failure_propagates_and_is_not_logged(
        self, make_session_factory, endpoint, pipeline_config
    ):
        factory = make_session_factory(lambda query: RuntimeError("bad"))
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)

        with pytest.raises(RuntimeError):
            await runner.run("Explain", "g.V().explain()")

        assert factory.sessions[0].closed
        assert len(runner.log) == 0

    @pytest.mark.asyncio
    async def test_stage_timeout(self, make_session_factory, endpoint):
        config = PipelineConfig(stage_timeout=0.05, cancel_grace_period=0.1)
        factory = make_session_factory(delay=1.0)
        runner = StageRunner(factory, endpoint, ExecutionLog(), config)

        with pytest.raises(TimeoutError):
            await runner.run("Auto-Connect", "g.V()")

        assert factory.sessions[0].closed


class TestRunPrimary:
    """StageRunner.run_primary (메인 쿼리) 테스트"""

    @pytest.mark.asyncio
    async def test_success_recorded_as_main_query(self, make_session_factory, endpoint, pipeline_config):
        factory = make_session_factory(lambda query: [{"id": 1, "label": "person"}])
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)

        items = await runner.run_primary("g.V(1)")

        assert items == [{"id": 1, "label": "person"}]
        assert runner.log.entries[0].type == "Main Query"
        assert runner.log.entries[0].query == "g.V(1)"
        assert factory.sessions[0].closed

    @pytest.mark.asyncio
    async def test_client_disconnect_cancels_query(self, make_session_factory, endpoint, pipeline_config):
        """
        클라이언트 연결 종료 시 취소

        Given: 2초 걸리는 메인 쿼리
        When: 약 50ms 후 클라이언트가 연결을 끊음
        Then: QueryCancelledError, 세션은 즉시 닫히고 실행 로그는 비어 있음
        """
        factory = make_session_factory(lambda query: [1], delay=2.0)
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)
        loop = asyncio.get_running_loop()
        started = loop.time()

        async def is_disconnected() -> bool:
            return loop.time() - started >= 0.05

        with pytest.raises(QueryCancelledError) as exc_info:
            await runner.run_primary("g.V().repeat(out()).times(10)", is_disconnected)

        elapsed = loop.time() - started
        assert exc_info.value.error_code == "EXEC-003"
        assert exc_info.value.status_code == 499
        assert elapsed < 1.0
        assert factory.sessions[0].closed
        assert len(runner.log) == 0

    @pytest.mark.asyncio
    async def test_connected_client_waits_for_result(self, make_session_factory, endpoint, pipeline_config):
        factory = make_session_factory(lambda query: [1], delay=0.05)
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)

        async def is_disconnected() -> bool:
            return False

        assert await runner.run_primary("g.V()", is_disconnected) == [1]

    @pytest.mark.asyncio
    async def test_query_timeout(self, make_session_factory, endpoint):
        """메인 쿼리 타임아웃 → EXEC-002"""
        config = PipelineConfig(query_timeout=0.1, disconnect_poll_interval=0.01, cancel_grace_period=0.1)
        factory = make_session_factory(delay=2.0)
        runner = StageRunner(factory, endpoint, ExecutionLog(), config)

        with pytest.raises(QueryExecutionError) as exc_info:
            await runner.run_primary("g.V()")

        assert exc_info.value.error_code == "EXEC-002"
        assert factory.sessions[0].closed

    @pytest.mark.asyncio
    async def test_open_failure_is_connection_error(self, make_session_factory, endpoint, pipeline_config):
        """세션 열기 실패 → CONN-001 (503)"""
        factory = make_session_factory(open_error=OSError("Connection refused"))
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)

        with pytest.raises(GraphConnectionError) as exc_info:
            await runner.run_primary("g.V()")

        assert exc_info.value.error_code == "CONN-001"
        assert exc_info.value.status_code == 503
        assert "localhost:8182" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error_is_execution_error(self, make_session_factory, endpoint, pipeline_config):
        """서버 측 스크립트 오류 → EXEC-001 (500)"""
        factory = make_session_factory(lambda query: RuntimeError("No such property: foo"))
        runner = StageRunner(factory, endpoint, ExecutionLog(), pipeline_config)

        with pytest.raises(QueryExecutionError) as exc_info:
            await runner.run_primary("g.V().foo()")

        assert exc_info.value.error_code == "EXEC-001"
        assert exc_info.value.status_code == 500
        assert "No such property" in exc_info.value.message
