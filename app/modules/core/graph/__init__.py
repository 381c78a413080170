"""
그래프 결과 조정 모듈
Gremlin 쿼리 결과를 중복 없는 {nodes, links} 그래프로 조정

사용 예시:
    from app.modules.core.graph import GraphBackendFactory, GraphQueryRequest

    pipeline = GraphBackendFactory.create_pipeline(config)
    endpoint = pipeline.resolve_endpoint("localhost", 8182)

    outcome = await pipeline.execute(
        GraphQueryRequest(query="g.E().limit(10)", endpoint=endpoint, auto_connect=True)
    )
    outcome.graph.nodes, outcome.graph.links, outcome.execution_log
"""
from .assembler import GraphAssembler, MergeStats
from .classifier import EdgeElement, PathElement, VertexElement, classify, classify_items
from .connector import InducedSubgraphConnector
from .enrichment import PropertyEnricher, fetch_edge_properties
from .execution import ExecutionLog, StageOutcome, StageRunner, StageStatus
from .factory import SUPPORTED_BACKEND_VARIANTS, GraphBackendFactory
from .gap_resolver import GapResolver
from .identity import canonical_key, extract_id, ids_match
from .interfaces import IGraphSession, IGraphSessionFactory
from .models import (
    ExecutionLogEntry,
    GraphEndpoint,
    GraphPayload,
    GraphQueryRequest,
    Link,
    Node,
    QueryOutcome,
)
from .pipeline import GraphQueryPipeline

__all__ = [
    # 데이터 모델
    "Node",
    "Link",
    "GraphPayload",
    "ExecutionLogEntry",
    "QueryOutcome",
    "GraphEndpoint",
    "GraphQueryRequest",
    # 식별자 / 분류
    "canonical_key",
    "extract_id",
    "ids_match",
    "VertexElement",
    "EdgeElement",
    "PathElement",
    "classify",
    "classify_items",
    # 인터페이스
    "IGraphSession",
    "IGraphSessionFactory",
    # 파이프라인 단계
    "GraphAssembler",
    "MergeStats",
    "GapResolver",
    "InducedSubgraphConnector",
    "PropertyEnricher",
    "fetch_edge_properties",
    "ExecutionLog",
    "StageRunner",
    "StageOutcome",
    "StageStatus",
    # 팩토리 / 파이프라인
    "SUPPORTED_BACKEND_VARIANTS",
    "GraphBackendFactory",
    "GraphQueryPipeline",
]
