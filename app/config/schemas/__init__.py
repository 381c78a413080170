"""
Pydantic 기반 설정 스키마 모듈

YAML 설정 파일의 타입 안정성과 검증을 제공합니다.

사용법:
    from app.config.schemas import validate_config

    validated, errors = validate_config(config_dict)
"""

from .base import BaseConfig, substitute_env_vars
from .gremlin import (
    AutoConnectConfig,
    EnrichmentConfig,
    GapResolutionConfig,
    GremlinConfig,
    PipelineConfig,
)
from .root import RootConfig, validate_config

__all__ = [
    "BaseConfig",
    "substitute_env_vars",
    "GremlinConfig",
    "PipelineConfig",
    "GapResolutionConfig",
    "AutoConnectConfig",
    "EnrichmentConfig",
    "RootConfig",
    "validate_config",
]
