"""
유도 부분그래프 연결 (Induced-Subgraph Connector)

현재 노드 집합에 닿는 모든 엣지를 조회한 뒤,
양 끝 엔드포인트가 모두 노드 맵에 있는 엣지만 추가합니다. 노드는 절대 추가하지 않습니다.
"""

from app.lib.logger import get_logger

from .assembler import GraphAssembler
from .classifier import EdgeElement, classify
from .execution import STAGE_AUTO_CONNECT, StageOutcome, StageRunner, StageStatus
from .identity import canonical_key
from .queries import induced_edges_query

logger = get_logger(__name__)


class InducedSubgraphConnector:
    """노드 집합 간 엣지 연결기 (요청 플래그 autoConnect)"""

    def __init__(self, max_nodes: int = 1000) -> None:
        self.max_nodes = max_nodes

    async def connect(self, assembler: GraphAssembler, runner: StageRunner) -> StageOutcome:
        node_count = assembler.node_count
        if node_count == 0:
            return StageOutcome.skipped(STAGE_AUTO_CONNECT, "no nodes")
        if node_count >= self.max_nodes:
            logger.info(
                "ℹ️ 노드 수가 상한 이상이라 자동 연결을 건너뜀",
                nodes=node_count,
                max_nodes=self.max_nodes,
            )
            return StageOutcome.skipped(STAGE_AUTO_CONNECT, f"node count {node_count} >= {self.max_nodes}")

        query = induced_edges_query(node.id for node in assembler.nodes)
        try:
            records = await runner.run(STAGE_AUTO_CONNECT, query)
        except Exception as e:
            logger.warning("⚠️ 자동 연결 실패", stage=STAGE_AUTO_CONNECT, error=str(e) or type(e).__name__)
            return StageOutcome(stage=STAGE_AUTO_CONNECT, status=StageStatus.FAILED, queries=1, failures=1)

        node_keys = assembler.node_keys()
        induced = []
        for record in records:
            edge = classify(record)
            if not isinstance(edge, EdgeElement):
                continue
            if canonical_key(edge.source) in node_keys and canonical_key(edge.target) in node_keys:
                induced.append(edge)

        stats = assembler.merge(induced)
        logger.info("🔗 자동 연결 완료", candidates=len(records), links_added=stats.links_added)
        return StageOutcome.from_batches(
            STAGE_AUTO_CONNECT, queries=1, failures=0, links_added=stats.links_added
        )
