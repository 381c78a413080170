"""
Gremlin 백엔드 및 그래프 조정 파이프라인 설정 스키마

연결(엔드포인트, 타임아웃)과 파이프라인 단계별 배치/상한 값을 정의합니다.
"""

from pydantic import Field, field_validator

from .base import BaseConfig


class GremlinConfig(BaseConfig):
    """
    Gremlin Server 연결 설정

    요청 본문에 host/port가 없을 때 사용하는 기본값과
    WebSocket 세션 옵션을 정의합니다.
    """

    default_host: str = Field(default="localhost", description="기본 Gremlin Server 호스트")
    default_port: int = Field(default=8182, ge=1, le=65535, description="기본 Gremlin Server 포트")
    scheme: str = Field(default="ws", pattern="^(ws|wss)$", description="WebSocket 스킴")
    path: str = Field(default="/gremlin", description="Gremlin 엔드포인트 경로")
    traversal_source: str = Field(default="g", description="g 별칭에 바인딩할 traversal source")
    mime_type: str = Field(
        default="application/vnd.gremlin-v3.0+json",
        description="요청/응답 직렬화 MIME 타입 (GraphSON v3)",
    )
    connect_timeout: float = Field(default=10.0, gt=0, le=120, description="세션 열기 타임아웃 (초)")
    max_message_size: int = Field(
        default=0,
        ge=0,
        description="WebSocket 최대 메시지 크기 (바이트, 0이면 무제한)",
    )

    @field_validator("path")
    @classmethod
    def path_must_be_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            return f"/{value}"
        return value


class GapResolutionConfig(BaseConfig):
    """누락 엔드포인트 노드 보충 설정"""

    batch_size: int = Field(default=500, ge=1, le=5000, description="조회 쿼리당 최대 ID 수")
    concurrency: int = Field(default=4, ge=1, le=32, description="동시 실행 배치 수")


class AutoConnectConfig(BaseConfig):
    """유도 부분그래프 연결 설정"""

    max_nodes: int = Field(
        default=1000,
        ge=1,
        description="노드 수가 이 값 이상이면 자동 연결을 건너뜀",
    )


class EnrichmentConfig(BaseConfig):
    """속성 보강 설정 (백엔드 변형 전용)"""

    node_batch_size: int = Field(default=200, ge=1, le=5000, description="노드 보강 배치 크기")
    edge_batch_size: int = Field(default=200, ge=1, le=5000, description="엣지 보강 배치 크기")
    concurrency: int = Field(default=2, ge=1, le=32, description="동시 실행 배치 수")


class PipelineConfig(BaseConfig):
    """
    그래프 결과 조정 파이프라인 설정

    모든 백엔드 호출은 타임아웃을 가집니다.
    메인 쿼리는 query_timeout, 보강 단계는 stage_timeout을 사용합니다.
    """

    query_timeout: float = Field(default=120.0, gt=0, description="메인 쿼리 타임아웃 (초)")
    stage_timeout: float = Field(default=30.0, gt=0, description="보강 단계 쿼리 타임아웃 (초)")
    disconnect_poll_interval: float = Field(
        default=0.05,
        gt=0,
        le=5,
        description="클라이언트 연결 종료 확인 주기 (초)",
    )
    cancel_grace_period: float = Field(
        default=2.0,
        gt=0,
        le=30,
        description="취소 시 백엔드 세션 종료 대기 시간 (초)",
    )
    gap_resolution: GapResolutionConfig = Field(default_factory=GapResolutionConfig)
    auto_connect: AutoConnectConfig = Field(default_factory=AutoConnectConfig)
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)
