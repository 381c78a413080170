"""
결과 항목 분류기 (Element Classifier)

타입이 없는 백엔드 결과 항목 하나를 검사하여
정점(Vertex), 엣지(Edge), 경로(Path) 중 하나로 분류합니다.

- 엣지를 정점보다 먼저 판별 (일부 백엔드의 엣지 레코드는 정점 형태로도 읽힘)
- 어느 것에도 해당하지 않는 항목은 None (raw 결과에는 그대로 남음)
- 순수 함수이며 부작용이 없습니다
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from .identity import extract_id

# (inV, outV) 형태: GraphSON 엣지, project() 결과
# (IN, OUT) 형태: 엣지의 elementMap() 결과
ENDPOINT_KEY_PAIRS: tuple[tuple[str, str], ...] = (
    ("inV", "outV"),
    ("IN", "OUT"),
    ("Direction.IN", "Direction.OUT"),
)

VERTEX_METADATA_KEYS = frozenset({"id", "label"})
EDGE_METADATA_KEYS = VERTEX_METADATA_KEYS | frozenset(
    {"IN", "OUT", "Direction.IN", "Direction.OUT", "inV", "outV", "inVLabel", "outVLabel"}
)
GRAPHSON_ELEMENT_TYPES = frozenset({"vertex", "edge"})


@dataclass(frozen=True)
class VertexElement:
    id: Any
    label: str
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EdgeElement:
    id: Any
    label: str
    source: Any
    target: Any
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PathElement:
    elements: tuple[Union[VertexElement, EdgeElement], ...] = ()


GraphElement = Union[VertexElement, EdgeElement, PathElement]


def _has_identity(item: Mapping[str, Any]) -> bool:
    label = item.get("label")
    return item.get("id") is not None and label is not None and label != ""


def _endpoints(item: Mapping[str, Any]) -> tuple[Any, Any] | None:
    """(source, target) 엔드포인트 참조 반환 (없으면 None)"""
    for in_key, out_key in ENDPOINT_KEY_PAIRS:
        if item.get(in_key) is not None and item.get(out_key) is not None:
            return extract_id(item[out_key]), extract_id(item[in_key])
    return None


def zip_properties(keys: Sequence[Any], values: Sequence[Any]) -> dict[str, Any]:
    """key 리스트/value 리스트를 속성 맵으로 결합 (중복 키는 마지막 값)"""
    properties: dict[str, Any] = {}
    for key, value in zip(keys, values):
        properties[str(key)] = value
    return properties


def _is_zipped(item: Mapping[str, Any]) -> bool:
    return isinstance(item.get("keys"), list) and isinstance(item.get("vals"), list)


def extract_properties(item: Mapping[str, Any], metadata_keys: frozenset[str]) -> dict[str, Any]:
    """
    항목에서 속성 맵 추출

    - properties 매핑이 있으면 그대로 사용
    - keys/vals 병렬 리스트(project 결과)는 결합
    - elementMap() 형태(properties 키와 GraphSON type 표시 없음)는 메타데이터 외 모든 키가 속성
    """
    properties = item.get("properties")
    if isinstance(properties, Mapping):
        return dict(properties)
    if _is_zipped(item):
        return zip_properties(item["keys"], item["vals"])
    if item.get("type") in GRAPHSON_ELEMENT_TYPES:
        return {}
    return {key: value for key, value in item.items() if key not in metadata_keys}


def _classify_element(item: Mapping[str, Any]) -> VertexElement | EdgeElement | None:
    if not _has_identity(item):
        return None

    endpoints = _endpoints(item)
    if endpoints is not None:
        source, target = endpoints
        return EdgeElement(
            id=item["id"],
            label=str(item["label"]),
            source=source,
            target=target,
            properties=extract_properties(item, EDGE_METADATA_KEYS),
        )

    return VertexElement(
        id=item["id"],
        label=str(item["label"]),
        properties=extract_properties(item, VERTEX_METADATA_KEYS),
    )


def _path_objects(item: Mapping[str, Any]) -> Sequence[Any] | None:
    objects = item.get("objects")
    if isinstance(objects, list):
        return objects
    path = item.get("path")
    if isinstance(path, Mapping) and isinstance(path.get("objects"), list):
        return path["objects"]
    return None


def classify(item: Any) -> GraphElement | None:
    """
    결과 항목 하나를 분류

    Args:
        item: 디코딩된 결과 항목

    Returns:
        EdgeElement / VertexElement / PathElement, 해당 없으면 None
    """
    if not isinstance(item, Mapping):
        return None

    element = _classify_element(item)
    if element is not None:
        return element

    objects = _path_objects(item)
    if objects is None:
        return None

    inner = []
    for obj in objects:
        if isinstance(obj, Mapping):
            inner_element = _classify_element(obj)
            if inner_element is not None:
                inner.append(inner_element)
    return PathElement(elements=tuple(inner))


def classify_items(items: Iterable[Any]) -> list[GraphElement]:
    """결과 항목 시퀀스 분류 (분류되지 않는 항목은 제외)"""
    classified = []
    for item in items:
        element = classify(item)
        if element is not None:
            classified.append(element)
    return classified


def as_vertex(item: Any) -> VertexElement | None:
    """
    조회 결과를 항상 정점으로 해석

    누락 노드 조회(elementMap) 결과에 사용합니다. label이 없으면 "unknown".
    """
    if not isinstance(item, Mapping) or item.get("id") is None:
        return None
    label = item.get("label")
    return VertexElement(
        id=item["id"],
        label=str(label) if label not in (None, "") else "unknown",
        properties=extract_properties(item, VERTEX_METADATA_KEYS),
    )


def primary_value(prop: Any) -> Any:
    """
    속성 값의 대표 값

    다중 값 래퍼([{value, ...}, ...])는 첫 번째 레코드의 value를 반환합니다.
    """
    if isinstance(prop, list):
        if not prop:
            return None
        first = prop[0]
        if isinstance(first, Mapping) and "value" in first:
            return first["value"]
        return first
    if isinstance(prop, Mapping) and "value" in prop:
        return prop["value"]
    return prop
