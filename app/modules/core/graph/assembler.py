"""
그래프 조립기 (Graph Assembler)

분류된 요소를 정규화 키 기준의 노드 맵/링크 맵에 누적합니다.

규칙:
- 정점: first-write-wins. 이후 관측이 기존 속성을 덮어쓰지 않음
  (단, 값이 없는 속성 맵은 이후 관측으로 채울 수 있음.
   빈 맵이나 {"name": []} 처럼 모든 속성의 대표 값이 없는 맵)
- 엣지: 엔드포인트 쌍이 아니라 엣지 자체 id로 키잉 (병렬 엣지 공존)
- 멱등: 같은 요소를 두 번 병합해도 변화 없음
- 요청 범위 내에서 노드는 삭제되지 않음
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from app.lib.logger import get_logger

from .classifier import EdgeElement, GraphElement, PathElement, VertexElement, classify_items, primary_value
from .identity import canonical_key, ids_match, resolve_match
from .models import GraphPayload, Link, Node

logger = get_logger(__name__)


def has_values(properties: Mapping[str, Any]) -> bool:
    """대표 값이 있는 속성이 하나라도 있는지"""
    return any(primary_value(value) is not None for value in properties.values())


@dataclass
class MergeStats:
    """병합 결과 통계"""

    nodes_added: int = 0
    links_added: int = 0

    def __iadd__(self, other: "MergeStats") -> "MergeStats":
        self.nodes_added += other.nodes_added
        self.links_added += other.links_added
        return self


class GraphAssembler:
    """
    요청 단위 그래프 누적기

    노드/링크 맵은 병합 단계에서만 변경됩니다.
    보강 단계의 배치 쿼리가 동시에 실행되더라도 결과 병합은 순차적으로 수행해야 합니다.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._links: dict[str, Link] = {}

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def link_count(self) -> int:
        return len(self._links)

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    @property
    def links(self) -> list[Link]:
        return list(self._links.values())

    def merge_items(self, items: Iterable[Any]) -> MergeStats:
        """원시 결과 항목을 분류 후 병합 (형식이 맞지 않는 항목은 무시)"""
        return self.merge(classify_items(items))

    def merge(self, elements: Iterable[GraphElement]) -> MergeStats:
        """분류된 요소 병합"""
        stats = MergeStats()
        for element in elements:
            if isinstance(element, EdgeElement):
                stats.links_added += self._upsert_link(element)
            elif isinstance(element, VertexElement):
                stats.nodes_added += self._upsert_node(element)
            elif isinstance(element, PathElement):
                stats += self.merge(element.elements)
        return stats

    def _upsert_node(self, vertex: VertexElement) -> int:
        key = canonical_key(vertex.id)
        existing = self._nodes.get(key)
        if existing is None:
            self._nodes[key] = Node(
                id=vertex.id,
                label=vertex.label,
                properties=dict(vertex.properties),
            )
            return 1
        if not has_values(existing.properties) and has_values(vertex.properties):
            existing.properties = dict(vertex.properties)
        return 0

    def _upsert_link(self, edge: EdgeElement) -> int:
        key = canonical_key(edge.id)
        existing = self._links.get(key)
        if existing is None:
            self._links[key] = Link(
                id=edge.id,
                label=edge.label,
                source=edge.source,
                target=edge.target,
                properties=dict(edge.properties),
            )
            return 1
        if not has_values(existing.properties) and has_values(edge.properties):
            existing.properties = dict(edge.properties)
        return 0

    def has_node(self, identifier: Any) -> bool:
        """노드 존재 여부 (정규화 키 조회 실패 시 관대한 비교)"""
        if canonical_key(identifier) in self._nodes:
            return True
        return any(ids_match(identifier, node.id) for node in self._nodes.values())

    def node_keys(self) -> set[str]:
        return set(self._nodes)

    def missing_endpoint_ids(self) -> list[Any]:
        """
        노드 맵에 없는 링크 엔드포인트 식별자

        Returns:
            정규화 키 기준으로 중복 제거된 식별자 (링크 순서 유지)
        """
        missing: list[Any] = []
        seen: set[str] = set()
        for link in self._links.values():
            for endpoint in (link.source, link.target):
                key = canonical_key(endpoint)
                if key in self._nodes or key in seen:
                    continue
                seen.add(key)
                missing.append(endpoint)
        return missing

    def nodes_without_properties(self) -> list[Node]:
        return [node for node in self._nodes.values() if not has_values(node.properties)]

    def links_without_properties(self) -> list[Link]:
        return [link for link in self._links.values() if not has_values(link.properties)]

    def resolve_node_key(self, identifier: Any) -> str | None:
        return resolve_match(identifier, {key: node.id for key, node in self._nodes.items()})

    def resolve_link_key(self, identifier: Any) -> str | None:
        return resolve_match(identifier, {key: link.id for key, link in self._links.items()})

    def fill_node_properties(self, key: str, properties: Mapping[str, Any]) -> bool:
        """값이 없는 속성 맵만 채움 (값이 있는 맵은 덮어쓰지 않음)"""
        node = self._nodes.get(key)
        if node is None or has_values(node.properties) or not has_values(properties):
            return False
        node.properties = dict(properties)
        return True

    def fill_link_properties(self, key: str, properties: Mapping[str, Any]) -> bool:
        """값이 없는 속성 맵만 채움 (값이 있는 맵은 덮어쓰지 않음)"""
        link = self._links.get(key)
        if link is None or has_values(link.properties) or not has_values(properties):
            return False
        link.properties = dict(properties)
        return True

    def to_payload(self) -> GraphPayload:
        dangling = len(self.missing_endpoint_ids())
        if dangling:
            logger.debug("dangling endpoints remain", count=dangling)
        return GraphPayload(
            nodes=[node.model_copy(deep=True) for node in self._nodes.values()],
            links=[link.model_copy(deep=True) for link in self._links.values()],
        )
