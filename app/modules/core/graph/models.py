"""
그래프 결과 데이터 모델
노드, 링크, 실행 로그, 요청/결과 정의

모든 엔티티는 단일 요청 범위입니다. 요청 간에 유지되는 그래프 상태는 없습니다.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Node(BaseModel):
    """
    그래프 노드 (Vertex)

    Attributes:
        id: 백엔드 식별자 (스칼라 또는 복합 객체)
        label: 정점 레이블
        properties: 속성 (비어 있을 수 있으며 보강 단계에서 채워짐)
    """

    id: Any
    label: str
    properties: dict[str, Any] = Field(default_factory=dict)


class Link(BaseModel):
    """
    그래프 링크 (Edge)

    동일한 엔드포인트 쌍 사이의 여러 엣지는 각각 별개의 링크입니다.

    Attributes:
        id: 엣지 자체의 식별자
        label: 엣지 레이블
        source: 출발 정점 식별자 (outV)
        target: 도착 정점 식별자 (inV)
        properties: 속성
    """

    id: Any
    label: str
    source: Any
    target: Any
    properties: dict[str, Any] = Field(default_factory=dict)


class GraphPayload(BaseModel):
    """시각화용 {nodes, links} 그래프"""

    nodes: list[Node] = Field(default_factory=list)
    links: list[Link] = Field(default_factory=list)


class ExecutionLogEntry(BaseModel):
    """실행 로그 항목 ({type: 단계명, query, result})"""

    type: str
    query: str
    result: Any = None


class QueryOutcome(BaseModel):
    """파이프라인 최종 결과"""

    model_config = ConfigDict(populate_by_name=True)

    raw: list[Any] = Field(default_factory=list)
    execution_log: list[ExecutionLogEntry] = Field(default_factory=list, alias="executionLog")
    graph: GraphPayload = Field(default_factory=GraphPayload)


class GraphEndpoint(BaseModel):
    """대상 Gremlin Server 엔드포인트"""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(ge=1, le=65535)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class GraphQueryRequest(BaseModel):
    """
    파이프라인 실행 요청

    Attributes:
        query: 불투명한 쿼리 문자열 (그대로 전송)
        endpoint: 대상 엔드포인트
        backend_type: 백엔드 변형 (속성 보강 실행 여부 결정)
        auto_connect: 유도 부분그래프 연결 실행 여부
        explain: explain() 진단 실행 여부
        profile: profile() 진단 실행 여부
    """

    query: str
    endpoint: GraphEndpoint
    backend_type: str = "janus"
    auto_connect: bool = False
    explain: bool = False
    profile: bool = False
