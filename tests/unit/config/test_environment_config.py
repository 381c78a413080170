"""
환경별 설정 분리 테스트

환경(development, test, production)에 따라 다른 설정값이 적용되는지 검증.
"""

import os
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def clear_overrides(monkeypatch):
    """환경 변수 오버라이드가 결과에 섞이지 않도록 제거"""
    for name in ("PORT", "HOST", "LOG_LEVEL", "GREMLIN_HOST", "GREMLIN_PORT",
                 "GREMLIN_TRAVERSAL_SOURCE", "GREMLIN_QUERY_TIMEOUT", "GREMLIN_SCHEME"):
        monkeypatch.delenv(name, raising=False)


class TestEnvironmentConfigSeparation:
    """환경별 설정 분리 테스트"""

    def test_test_environment_short_timeouts(self):
        """테스트 환경에서 타임아웃이 짧게 설정되는지 확인"""
        from app.lib.config_loader import ConfigLoader

        config = ConfigLoader(environment="test").load_config()

        assert config["pipeline"]["query_timeout"] == 10
        assert config["pipeline"]["stage_timeout"] == 5
        assert config["gremlin"]["connect_timeout"] == 2
        # base.yaml 값은 유지
        assert config["pipeline"]["gap_resolution"]["batch_size"] == 500

    def test_development_debug_logging(self):
        from app.lib.config_loader import ConfigLoader

        config = ConfigLoader(environment="development").load_config()

        assert config["logging"]["level"] == "DEBUG"
        assert config["pipeline"]["query_timeout"] == 120

    def test_production_scheme_from_environment(self):
        """프로덕션에서 GREMLIN_SCHEME 치환"""
        with patch.dict(os.environ, {"GREMLIN_SCHEME": "wss"}, clear=False):
            from app.lib.config_loader import ConfigLoader

            config = ConfigLoader(environment="production").load_config()

            assert config["gremlin"]["scheme"] == "wss"
            assert config["cors"]["allow_origins"] == []


class TestDetectEnvironment:
    """detect_environment 테스트"""

    @pytest.mark.parametrize(
        "value,expected",
        [("prod", "production"), ("test", "test"), ("staging", "development")],
    )
    def test_detect(self, value, expected):
        with patch.dict(os.environ, {"ENVIRONMENT": value}, clear=False):
            from app.lib.config_loader import detect_environment

            assert detect_environment() == expected
