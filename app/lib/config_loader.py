"""
Configuration loader for Graph Explorer
YAML 기반 계층적 설정 로더 + Pydantic 검증

- base.yaml + environments/<env>.yaml 병합
- ${VAR} / ${VAR:-default} 환경 변수 치환
- 환경 변수 오버라이드 (GREMLIN_HOST, PORT 등)
- Graceful Degradation (strict가 아니면 검증 실패해도 시스템 동작)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from ..config.schemas import substitute_env_vars, validate_config
from .errors import ConfigError, ErrorCode
from .logger import get_logger

logger = get_logger(__name__)

SUPPORTED_ENVIRONMENTS = ("development", "test", "production")


def detect_environment() -> str:
    """ENVIRONMENT → NODE_ENV 순으로 실행 환경 감지 (알 수 없는 값은 development)"""
    env_value = (os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV") or "development").lower()
    if env_value == "prod":
        env_value = "production"
    if env_value not in SUPPORTED_ENVIRONMENTS:
        return "development"
    return env_value


class ConfigLoader:
    """설정 로더 클래스"""

    # 환경 변수 → 설정 경로 매핑
    ENV_MAPPINGS: dict[str, tuple[str, ...]] = {
        "PORT": ("server", "port"),
        "HOST": ("server", "host"),
        "LOG_LEVEL": ("logging", "level"),
        "GREMLIN_HOST": ("gremlin", "default_host"),
        "GREMLIN_PORT": ("gremlin", "default_port"),
        "GREMLIN_TRAVERSAL_SOURCE": ("gremlin", "traversal_source"),
        "GREMLIN_QUERY_TIMEOUT": ("pipeline", "query_timeout"),
    }

    def __init__(self, base_path: Path | None = None, environment: str | None = None) -> None:
        env_file = Path(__file__).parent.parent.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)
        self.base_path = base_path or Path(__file__).parent.parent / "config"
        self.environment = environment or detect_environment()
        logger.debug("🔧 환경 감지", environment=self.environment)

    def load_config(self, validate: bool = True, strict: bool = False) -> dict[str, Any]:
        """
        설정 로드 및 병합 (base.yaml + 환경별 설정)

        Args:
            validate: Pydantic 검증 활성화 여부 (기본 True)
            strict: 검증 실패 시 예외 발생 여부 (기본 False)
                - False: Graceful Degradation (검증되지 않은 dict 반환)
                - True: ConfigError(CONFIG-002) 발생

        Returns:
            검증된 설정 딕셔너리 (또는 검증되지 않은 원본 dict)
        """
        base_config_path = self.base_path / "base.yaml"
        if not base_config_path.exists():
            raise ConfigError(
                ErrorCode.CONFIG_001,
                searched_paths=[str(base_config_path)],
                environment=self.environment,
            )

        try:
            config = self._load_yaml_file(base_config_path)
            env_config_path = self.base_path / "environments" / f"{self.environment}.yaml"
            if env_config_path.exists():
                config = self._merge_configs(config, self._load_yaml_file(env_config_path))
            config = substitute_env_vars(config)
            config = self._apply_env_overrides(config)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(
                ErrorCode.CONFIG_003,
                original_error=str(e),
                environment=self.environment,
            ) from e

        if not validate:
            return config

        validated, errors = validate_config(config)
        if validated is None:
            if strict:
                raise ConfigError(
                    ErrorCode.CONFIG_002,
                    validation_errors="; ".join(errors),
                    environment=self.environment,
                )
            logger.warning(
                "⚠️ 설정 검증 실패, 검증 없이 설정을 로드합니다",
                errors=errors,
                environment=self.environment,
            )
            return config

        logger.info("✅ 설정 검증 완료", environment=self.environment)
        return validated.model_dump(exclude_none=False)

    def _load_yaml_file(self, file_path: Path) -> dict[str, Any]:
        """YAML 파일 로드 (없으면 빈 dict)"""
        if not file_path.exists():
            return {}
        with open(file_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """설정 깊은 병합"""
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """환경 변수 오버라이드 적용"""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is not None and value != "":
                self._set_nested_value(config, config_path, value)
        return config

    def _set_nested_value(self, config: dict[str, Any], path: tuple[str, ...], value: str) -> None:
        """중첩된 딕셔너리에 값 설정"""
        current = config
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = self._convert_value(value)

    def _convert_value(self, value: str) -> Any:
        """환경 변수 값 타입 변환"""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            return value


def load_config(validate: bool = True, strict: bool = False) -> dict[str, Any]:
    """
    전역 설정 로드 함수

    Examples:
        >>> config = load_config()
        >>> config["pipeline"]["gap_resolution"]["batch_size"]
        500
        >>>
        >>> # 개발 환경: 엄격한 검증
        >>> config = load_config(strict=True)
    """
    return ConfigLoader().load_config(validate=validate, strict=strict)
