"""
누락 노드 보충 (Gap Resolver)

링크가 참조하지만 노드 맵에 없는 엔드포인트를 배치로 조회하여 정점으로 병합합니다.
배치 실패는 경고 로그만 남기며, 해당 엔드포인트는 매달린(dangling) 상태로 남습니다.
"""

import asyncio
from typing import Any

from app.lib.logger import get_logger

from .assembler import GraphAssembler
from .classifier import as_vertex
from .execution import STAGE_MISSING_NODE_FETCH, StageOutcome, StageRunner
from .queries import chunked, element_map_query

logger = get_logger(__name__)


class GapResolver:
    """
    누락 엔드포인트 정점 보충기

    배치는 동시에 실행될 수 있지만 (세마포어로 제한),
    결과 병합은 모든 배치가 끝난 뒤 순차적으로 수행합니다.
    """

    def __init__(self, batch_size: int = 500, concurrency: int = 4) -> None:
        self.batch_size = batch_size
        self.concurrency = concurrency

    async def resolve(self, assembler: GraphAssembler, runner: StageRunner) -> StageOutcome:
        missing = assembler.missing_endpoint_ids()
        if not missing:
            return StageOutcome.skipped(STAGE_MISSING_NODE_FETCH, "no missing endpoints")

        batches = list(chunked(missing, self.batch_size))
        logger.info(
            f"🔗 누락 노드 조회: {len(missing)}개 ({len(batches)} 배치)",
            stage=STAGE_MISSING_NODE_FETCH,
        )

        semaphore = asyncio.Semaphore(self.concurrency)

        async def fetch(batch: list[Any]) -> list[Any]:
            async with semaphore:
                return await runner.run(STAGE_MISSING_NODE_FETCH, element_map_query(batch))

        results = await asyncio.gather(*(fetch(batch) for batch in batches), return_exceptions=True)

        failures = 0
        nodes_added = 0
        fetched: list[Any] = []
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                failures += 1
                logger.warning(
                    "⚠️ 누락 노드 배치 조회 실패 (건너뜀)",
                    stage=STAGE_MISSING_NODE_FETCH,
                    batch=index,
                    batch_size=len(batches[index]),
                    error=str(result) or type(result).__name__,
                )
                continue

            vertices = [v for v in (as_vertex(item) for item in result) if v is not None]
            nodes_added += assembler.merge(vertices).nodes_added
            fetched.extend(batches[index])

        # 조회는 성공했지만 백엔드에 없는 정점 (삭제되었거나 id 형태가 다름)
        not_found = [identifier for identifier in fetched if not assembler.has_node(identifier)]
        if not_found:
            logger.warning(
                "⚠️ 백엔드에서 찾지 못한 엔드포인트",
                stage=STAGE_MISSING_NODE_FETCH,
                count=len(not_found),
                sample=not_found[:10],
            )

        return StageOutcome.from_batches(
            STAGE_MISSING_NODE_FETCH,
            queries=len(batches),
            failures=failures,
            detail=f"{len(not_found)} endpoints not found" if not_found else None,
            nodes_added=nodes_added,
        )
