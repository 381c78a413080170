"""
Pydantic 기본 설정 클래스와 환경 변수 치환

YAML 로더와 스키마 검증이 같은 `${VAR}` / `${VAR:-default}` 규칙을 사용합니다.
"""

import os
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _replace_env_var(match: re.Match[str]) -> str:
    expr = match.group(1)
    if ":-" in expr:
        name, default = expr.split(":-", 1)
        return os.getenv(name, default)
    # 정의되지 않은 변수는 원문 유지 (검증 단계에서 드러나도록)
    return os.getenv(expr, match.group(0))


def substitute_env_vars(value: Any) -> Any:
    """
    문자열/딕셔너리/리스트를 재귀적으로 돌며 환경 변수 치환

    Examples:
        "${GREMLIN_HOST:-localhost}"      -> "localhost"
        "ws://${GREMLIN_HOST}:8182/gremlin" -> "ws://db:8182/gremlin"
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_replace_env_var, value)
    if isinstance(value, dict):
        return {key: substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


class BaseConfig(BaseModel):
    """
    모든 설정 스키마의 기본 클래스

    - extra="allow": YAML에 새 키가 생겨도 시작 실패하지 않음
    - validate_assignment: 테스트에서 값을 바꿔도 범위 검증 유지
    """

    model_config = ConfigDict(
        extra="allow",
        validate_assignment=True,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _expand_env(cls, value: Any) -> Any:
        return substitute_env_vars(value)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
