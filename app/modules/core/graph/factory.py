"""
GraphBackendFactory - 설정 기반 백엔드 세션 팩토리 / 파이프라인 생성

지원 백엔드 변형 레지스트리를 관리하며,
변형에 따라 속성 보강 단계 실행 여부가 결정됩니다.

사용 예시:
    from app.modules.core.graph import GraphBackendFactory

    session_factory = GraphBackendFactory.create_session_factory(config)
    pipeline = GraphBackendFactory.create_pipeline(config, session_factory)

    GraphBackendFactory.get_supported_backends()  # ["janus", "puppy", "tinkergraph"]

지원 변형:
    - janus: JanusGraph (기본값)
    - puppy: 속성을 누락하는 변형 (속성 보강 필요)
    - tinkergraph: TinkerGraph (Gremlin Server 기본 그래프)
"""
from typing import TYPE_CHECKING, Any

from app.config.schemas import GremlinConfig, PipelineConfig
from app.lib.logger import get_logger

from .backends.gremlin_session import GremlinSessionFactory
from .interfaces import IGraphSessionFactory

if TYPE_CHECKING:
    from .pipeline import GraphQueryPipeline

logger = get_logger(__name__)


# 지원 백엔드 변형 레지스트리
SUPPORTED_BACKEND_VARIANTS: dict[str, dict[str, Any]] = {
    "janus": {
        "type": "gremlin-server",
        "class": "GremlinSession",
        "description": "JanusGraph (복합 RelationIdentifier 엣지 id, 기본값)",
        "requires_property_enrichment": False,
        "default_config": {"traversal_source": "g"},
    },
    "puppy": {
        "type": "gremlin-server",
        "class": "GremlinSession",
        "description": "PuppyGraph (요소 속성이 비어 있을 수 있어 보강 단계 실행)",
        "requires_property_enrichment": True,
        "default_config": {"traversal_source": "g"},
    },
    "tinkergraph": {
        "type": "gremlin-server",
        "class": "GremlinSession",
        "description": "TinkerGraph (인메모리 참조 구현)",
        "requires_property_enrichment": False,
        "default_config": {"traversal_source": "g"},
    },
}


class GraphBackendFactory:
    """
    설정 기반 그래프 백엔드 팩토리

    설정 예시 (base.yaml):
        gremlin:
          default_host: "localhost"
          default_port: 8182
          traversal_source: "g"
        pipeline:
          query_timeout: 120
          gap_resolution:
            batch_size: 500
    """

    @staticmethod
    def create_session_factory(config: dict[str, Any]) -> GremlinSessionFactory:
        """
        요청 간 공유되는 Gremlin 세션 팩토리 생성

        Args:
            config: 전체 설정 딕셔너리 (gremlin 섹션 포함)
        """
        settings = GremlinConfig(**(config.get("gremlin") or {}))
        logger.info(
            f"✅ GremlinSessionFactory 생성: scheme={settings.scheme}, path={settings.path}, "
            f"traversal_source={settings.traversal_source}"
        )
        return GremlinSessionFactory(settings)

    @staticmethod
    def create_pipeline(
        config: dict[str, Any],
        session_factory: IGraphSessionFactory | None = None,
    ) -> "GraphQueryPipeline":
        """
        그래프 쿼리 파이프라인 생성

        Args:
            config: 전체 설정 딕셔너리 (gremlin, pipeline 섹션)
            session_factory: 세션 팩토리 (None이면 설정으로 생성)
        """
        from .pipeline import GraphQueryPipeline

        if session_factory is None:
            session_factory = GraphBackendFactory.create_session_factory(config)

        pipeline_config = PipelineConfig(**(config.get("pipeline") or {}))
        gremlin_config = GremlinConfig(**(config.get("gremlin") or {}))

        logger.info(
            f"✅ GraphQueryPipeline 생성: query_timeout={pipeline_config.query_timeout}s, "
            f"gap_batch={pipeline_config.gap_resolution.batch_size}, "
            f"auto_connect_max={pipeline_config.auto_connect.max_nodes}"
        )
        return GraphQueryPipeline(session_factory, pipeline_config, gremlin_config)

    @staticmethod
    def get_supported_backends() -> list[str]:
        """지원하는 모든 백엔드 변형 이름 반환"""
        return list(SUPPORTED_BACKEND_VARIANTS.keys())

    @staticmethod
    def get_backend_info(name: str) -> dict[str, Any] | None:
        """특정 백엔드 변형의 상세 정보 반환"""
        return SUPPORTED_BACKEND_VARIANTS.get(name)

    @staticmethod
    def requires_property_enrichment(name: str) -> bool:
        """
        속성 보강 단계 실행 여부

        Raises:
            ValueError: 지원하지 않는 변형인 경우
        """
        info = SUPPORTED_BACKEND_VARIANTS.get(name)
        if info is None:
            raise ValueError(
                f"지원하지 않는 백엔드 변형: {name}. "
                f"지원 목록: {GraphBackendFactory.get_supported_backends()}"
            )
        return bool(info["requires_property_enrichment"])
