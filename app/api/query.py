"""
Graph Query API
Gremlin 쿼리 실행 및 {nodes, links} 그래프 반환 엔드포인트

- POST /api/query: 쿼리 실행 + 결과 조정
- POST /api/query/edge-properties: 단일 엣지 속성 지연 로딩
- POST /api/test-connection: Gremlin Server 연결 테스트

## Router Layer의 역할
- HTTP 요청/응답 처리만 담당
- 결과 조정 로직은 GraphQueryPipeline에 위임
- 에러는 GraphAppException으로 전파되어 main.py 핸들러가 응답 생성
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from ..lib.errors import ErrorCode, QueryInputError
from ..lib.logger import get_logger
from ..modules.core.graph import GraphQueryPipeline, GraphQueryRequest, QueryOutcome

logger = get_logger(__name__)
router = APIRouter(tags=["Graph Query"])

pipeline: GraphQueryPipeline = None  # type: ignore[assignment]


def set_dependencies(graph_pipeline: GraphQueryPipeline) -> None:
    """GraphQueryPipeline 의존성 주입 (앱 시작 시 호출)"""
    global pipeline
    pipeline = graph_pipeline
    logger.info("GraphQueryPipeline 주입 완료")


def _ensure_pipeline_initialized() -> GraphQueryPipeline:
    """
    파이프라인 초기화 확인 (Fail-Fast)

    Raises:
        HTTPException: pipeline이 None인 경우 503 에러
    """
    if pipeline is None:
        logger.error("🚨 GraphQueryPipeline 초기화되지 않음 - 요청 거부")
        raise HTTPException(
            status_code=503,
            detail={
                "error": "서비스 초기화 중",
                "message": "서비스가 시작 중입니다. 잠시 후 다시 시도해주세요",
                "retry_after": 5,
            },
        )
    return pipeline


class QueryRequestBody(BaseModel):
    """
    쿼리 요청 본문

    query 누락은 핸들러에서 QUERY-001로 처리합니다.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str | None = Field(default=None, description="Gremlin 쿼리 (그대로 전송)")
    host: str | None = Field(default="localhost", description="Gremlin Server 호스트")
    port: int | str | None = Field(default="8182", description="Gremlin Server 포트")
    backend_type: str = Field(default="janus", alias="type", description="백엔드 변형")
    auto_connect: bool = Field(default=False, alias="autoConnect", description="유도 부분그래프 연결")
    explain: bool = Field(default=False, description="explain() 진단 실행")
    profile: bool = Field(default=False, description="profile() 진단 실행")


class EdgePropertiesRequestBody(BaseModel):
    """단일 엣지 속성 조회 요청 본문"""

    model_config = ConfigDict(populate_by_name=True)

    host: str | None = "localhost"
    port: int | str | None = "8182"
    source_id: Any = Field(alias="sourceId")
    edge_id: Any = Field(alias="edgeId")


class EdgePropertiesResponse(BaseModel):
    properties: dict[str, Any] = Field(default_factory=dict)


class ConnectionTestRequestBody(BaseModel):
    host: str | None = "localhost"
    port: int | str | None = "8182"


class ConnectionTestResponse(BaseModel):
    status: str
    message: str


@router.post("/query", response_model=QueryOutcome, response_model_by_alias=True)
async def run_query(body: QueryRequestBody, request: Request) -> QueryOutcome:
    """
    Gremlin 쿼리 실행 및 결과 그래프 조정

    클라이언트 연결이 끊기면 진행 중인 메인 쿼리를 취소합니다 (499).
    """
    graph_pipeline = _ensure_pipeline_initialized()

    if body.query is None or not body.query.strip():
        raise QueryInputError(ErrorCode.QUERY_001)

    endpoint = graph_pipeline.resolve_endpoint(body.host, body.port)
    graph_request = GraphQueryRequest(
        query=body.query,
        endpoint=endpoint,
        backend_type=body.backend_type,
        auto_connect=body.auto_connect,
        explain=body.explain,
        profile=body.profile,
    )
    return await graph_pipeline.execute(graph_request, is_disconnected=request.is_disconnected)


@router.post("/query/edge-properties", response_model=EdgePropertiesResponse)
async def get_edge_properties(body: EdgePropertiesRequestBody) -> EdgePropertiesResponse:
    """단일 엣지 속성 조회 (출발 정점의 bothE() 기준)"""
    graph_pipeline = _ensure_pipeline_initialized()

    if body.source_id is None or body.edge_id is None:
        raise QueryInputError(ErrorCode.QUERY_003, reason="sourceId and edgeId are required")

    endpoint = graph_pipeline.resolve_endpoint(body.host, body.port)
    properties = await graph_pipeline.fetch_edge_properties(endpoint, body.source_id, body.edge_id)
    return EdgePropertiesResponse(properties=properties)


@router.post("/test-connection", response_model=ConnectionTestResponse)
async def test_connection(body: ConnectionTestRequestBody) -> ConnectionTestResponse:
    """Gremlin Server 연결 테스트 (세션 열기 후 즉시 닫기)"""
    graph_pipeline = _ensure_pipeline_initialized()

    endpoint = graph_pipeline.resolve_endpoint(body.host, body.port)
    message = await graph_pipeline.test_connection(endpoint)
    return ConnectionTestResponse(status="connected", message=message)
