"""
속성 보강 (Property Enrichment Pass)

일부 백엔드 변형(puppy)은 정상적인 요소에서도 속성을 누락합니다.
속성이 비어 있는 노드/엣지를 배치로 다시 조회하여 채웁니다.

- 레코드 매칭: 정규화 키 → 문자열 변환 → 전체 JSON 구조
- 메타데이터 키(id, label, 방향 표시)는 병합 전에 제거
- 비어 있지 않은 속성 맵은 절대 덮어쓰지 않음
- 노드/엣지 보강은 독립적: 한쪽 실패가 다른 쪽을 막지 않음
"""

import asyncio
from typing import Any

from app.lib.logger import get_logger

from .assembler import GraphAssembler
from .execution import (
    STAGE_EDGE_ENRICHMENT,
    STAGE_EDGE_PROPERTY_LOOKUP,
    STAGE_NODE_ENRICHMENT,
    StageOutcome,
    StageRunner,
)
from .identity import canonical_key, resolve_match
from .queries import (
    chunked,
    id_list,
    incident_edge_properties_query,
    read_projection,
    source_id_literal,
    vertex_properties_query,
)

logger = get_logger(__name__)

NODE_METADATA_KEYS = frozenset({"id", "label"})
EDGE_METADATA_KEYS = NODE_METADATA_KEYS | frozenset({"IN", "OUT", "Direction.IN", "Direction.OUT"})


def _unique_ids(ids: list[Any]) -> list[Any]:
    unique: dict[str, Any] = {}
    for identifier in ids:
        unique.setdefault(canonical_key(identifier), identifier)
    return list(unique.values())


class PropertyEnricher:
    """
    빈 속성 맵 보강기

    Args:
        node_batch_size: 노드 보강 쿼리당 최대 ID 수
        edge_batch_size: 엣지 보강 쿼리당 최대 엣지 수
        concurrency: 동시 실행 배치 수
    """

    def __init__(self, node_batch_size: int = 200, edge_batch_size: int = 200, concurrency: int = 2) -> None:
        self.node_batch_size = node_batch_size
        self.edge_batch_size = edge_batch_size
        self.concurrency = concurrency

    async def enrich(self, assembler: GraphAssembler, runner: StageRunner) -> list[StageOutcome]:
        node_outcome = await self.enrich_nodes(assembler, runner)
        edge_outcome = await self.enrich_links(assembler, runner)
        return [node_outcome, edge_outcome]

    async def enrich_nodes(self, assembler: GraphAssembler, runner: StageRunner) -> StageOutcome:
        targets = assembler.nodes_without_properties()
        if not targets:
            return StageOutcome.skipped(STAGE_NODE_ENRICHMENT, "no nodes without properties")

        queries = [
            vertex_properties_query(batch)
            for batch in chunked([node.id for node in targets], self.node_batch_size)
        ]
        results, failures = await self._run_batches(STAGE_NODE_ENRICHMENT, queries, runner)

        filled = 0
        for records in results:
            for record in records:
                projection = read_projection(record, NODE_METADATA_KEYS)
                if projection is None:
                    continue
                record_id, properties = projection
                key = assembler.resolve_node_key(record_id)
                if key is not None and assembler.fill_node_properties(key, properties):
                    filled += 1

        logger.info("🧩 노드 속성 보강 완료", targets=len(targets), filled=filled, failures=failures)
        return StageOutcome.from_batches(
            STAGE_NODE_ENRICHMENT, queries=len(queries), failures=failures, properties_filled=filled
        )

    async def enrich_links(self, assembler: GraphAssembler, runner: StageRunner) -> StageOutcome:
        targets = assembler.links_without_properties()
        if not targets:
            return StageOutcome.skipped(STAGE_EDGE_ENRICHMENT, "no links without properties")

        queries = [
            incident_edge_properties_query(id_list(_unique_ids([link.source for link in batch])))
            for batch in chunked(targets, self.edge_batch_size)
        ]
        results, failures = await self._run_batches(STAGE_EDGE_ENRICHMENT, queries, runner)

        filled = 0
        for records in results:
            for record in records:
                projection = read_projection(record, EDGE_METADATA_KEYS)
                if projection is None:
                    continue
                record_id, properties = projection
                key = assembler.resolve_link_key(record_id)
                if key is not None and assembler.fill_link_properties(key, properties):
                    filled += 1

        logger.info("🧩 엣지 속성 보강 완료", targets=len(targets), filled=filled, failures=failures)
        return StageOutcome.from_batches(
            STAGE_EDGE_ENRICHMENT, queries=len(queries), failures=failures, properties_filled=filled
        )

    async def _run_batches(
        self, stage: str, queries: list[str], runner: StageRunner
    ) -> tuple[list[list[Any]], int]:
        """배치 쿼리 동시 실행 (실패 배치는 경고 후 제외)"""
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(query: str) -> list[Any]:
            async with semaphore:
                return await runner.run(stage, query)

        gathered = await asyncio.gather(*(run_one(q) for q in queries), return_exceptions=True)

        results: list[list[Any]] = []
        failures = 0
        for index, result in enumerate(gathered):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                failures += 1
                logger.warning(
                    "⚠️ 속성 보강 배치 실패 (건너뜀)",
                    stage=stage,
                    batch=index,
                    error=str(result) or type(result).__name__,
                )
                continue
            results.append(result)
        return results, failures


async def fetch_edge_properties(runner: StageRunner, source_id: Any, edge_id: Any) -> dict[str, Any]:
    """
    단일 엣지 속성 조회 (UI에서 엣지를 클릭했을 때 지연 로딩)

    Args:
        runner: 단계 실행기
        source_id: 엣지의 출발 정점 식별자
        edge_id: 대상 엣지 식별자

    Returns:
        메타데이터가 제거된 속성 맵 (찾지 못하면 빈 dict)
    """
    query = incident_edge_properties_query(source_id_literal(source_id))
    records = await runner.run(STAGE_EDGE_PROPERTY_LOOKUP, query)

    projections: dict[str, dict[str, Any]] = {}
    candidates: dict[str, Any] = {}
    for record in records:
        projection = read_projection(record, EDGE_METADATA_KEYS)
        if projection is None:
            continue
        record_id, properties = projection
        key = canonical_key(record_id)
        candidates.setdefault(key, record_id)
        projections.setdefault(key, properties)

    key = resolve_match(edge_id, candidates)
    if key is None:
        logger.info("엣지를 찾지 못함", source_id=str(source_id), edge_id=str(edge_id))
        return {}
    return projections[key]
