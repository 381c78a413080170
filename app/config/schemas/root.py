"""
Root 설정 스키마

전체 애플리케이션 설정을 통합하고 검증하는 최상위 스키마입니다.
"""

from typing import Any

from pydantic import Field, ValidationError

from .base import BaseConfig
from .gremlin import GremlinConfig, PipelineConfig


class RootConfig(BaseConfig):
    """
    전체 설정 통합 스키마

    gremlin, pipeline 섹션은 타입 검증하고,
    나머지(server, logging, cors 등)는 dict로 유연하게 처리합니다.
    """

    gremlin: GremlinConfig = Field(
        default_factory=GremlinConfig,
        description="Gremlin Server 연결 설정",
    )

    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig,
        description="그래프 결과 조정 파이프라인 설정",
    )

    server: dict[str, Any] | None = Field(default=None, description="HTTP 서버 설정")

    logging: dict[str, Any] | None = Field(default=None, description="로깅 설정")

    cors: dict[str, Any] | None = Field(default=None, description="CORS 설정")


def validate_config(config_dict: dict[str, Any]) -> tuple[RootConfig | None, list[str]]:
    """
    설정 딕셔너리를 Pydantic 모델로 검증

    Returns:
        tuple[RootConfig | None, list[str]]:
            - RootConfig: 검증된 설정 객체 (실패 시 None)
            - list[str]: 검증 오류 메시지 목록 (성공 시 빈 리스트)

    Examples:
        >>> validated, errors = validate_config({"pipeline": {"query_timeout": 30}})
        >>> validated.pipeline.query_timeout
        30.0
    """
    try:
        return RootConfig(**config_dict), []
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            loc = " → ".join(str(x) for x in error["loc"])
            error_messages.append(f"[{loc}] {error['msg']} (type: {error['type']})")
        return None, error_messages
