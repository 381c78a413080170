"""
GraphSON v3 디코더

Gremlin Server 응답(application/vnd.gremlin-v3.0+json)의 타입 래퍼
({"@type": ..., "@value": ...})를 JSON으로 직렬화 가능한 순수 Python 데이터로 변환합니다.

출력 형태:
- Vertex: {id, label, type: "vertex", properties: {key: [{id, value, label}]}}
- Edge:   {id, label, type: "edge", inV, outV, inVLabel, outVLabel, properties: {key: value}}
- Path:   {labels, objects}
- elementMap()의 T/Direction 키: "id", "label", "IN", "OUT"
"""

from collections.abc import Callable, Mapping
from typing import Any

from ..identity import canonical_key

# 문자열 값으로 표현되는 enum 타입
ENUM_TYPES = frozenset(
    {
        "g:T",
        "g:Direction",
        "g:Cardinality",
        "g:Column",
        "g:Order",
        "g:Pop",
        "g:Operator",
        "g:Scope",
        "g:Barrier",
        "g:Pick",
        "g:Merge",
    }
)

NUMERIC_TYPES = frozenset(
    {
        "g:Int32",
        "g:Int64",
        "g:Float",
        "g:Double",
        "gx:Byte",
        "gx:Int16",
        "gx:BigInteger",
        "gx:BigDecimal",
    }
)


def _is_scalar_key(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _decode_list(value: Any) -> list[Any]:
    return [decode(item) for item in value or []]


def _decode_bulk_set(value: Any) -> list[Any]:
    items = list(value or [])
    expanded: list[Any] = []
    for index in range(0, len(items) - 1, 2):
        element = decode(items[index])
        bulk = decode(items[index + 1])
        expanded.extend([element] * int(bulk))
    return expanded


def _decode_map(value: Any) -> dict[Any, Any]:
    items = list(value or [])
    result: dict[Any, Any] = {}
    for index in range(0, len(items) - 1, 2):
        key = decode(items[index])
        if not _is_scalar_key(key):
            key = canonical_key(key)
        result[key] = decode(items[index + 1])
    return result


def _decode_number(value: Any) -> Any:
    # NaN / Infinity는 문자열로 전달되며 그대로 유지
    return value


def _decode_vertex_property(value: Mapping[str, Any]) -> dict[str, Any]:
    record = {
        "id": decode(value.get("id")),
        "value": decode(value.get("value")),
        "label": value.get("label"),
    }
    if value.get("properties"):
        record["properties"] = {k: decode(v) for k, v in value["properties"].items()}
    return record


def _decode_vertex(value: Mapping[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for key, records in (value.get("properties") or {}).items():
        properties[key] = [decode(record) for record in records]
    return {
        "id": decode(value.get("id")),
        "label": value.get("label", "vertex"),
        "type": "vertex",
        "properties": properties,
    }


def _decode_edge(value: Mapping[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for key, prop in (value.get("properties") or {}).items():
        decoded = decode(prop)
        properties[key] = decoded["value"] if isinstance(decoded, dict) and "value" in decoded else decoded
    return {
        "id": decode(value.get("id")),
        "label": value.get("label", "edge"),
        "type": "edge",
        "inV": decode(value.get("inV")),
        "outV": decode(value.get("outV")),
        "inVLabel": value.get("inVLabel"),
        "outVLabel": value.get("outVLabel"),
        "properties": properties,
    }


def _decode_property(value: Mapping[str, Any]) -> dict[str, Any]:
    return {"key": value.get("key"), "value": decode(value.get("value"))}


def _decode_path(value: Mapping[str, Any]) -> dict[str, Any]:
    labels = decode(value.get("labels"))
    objects = decode(value.get("objects"))
    return {"labels": labels or [], "objects": objects or []}


def _decode_value(value: Any) -> Any:
    return decode(value)


TYPE_DECODERS: dict[str, Callable[[Any], Any]] = {
    "g:List": _decode_list,
    "g:Set": _decode_list,
    "g:BulkSet": _decode_bulk_set,
    "g:Map": _decode_map,
    "g:UUID": str,
    "g:Date": _decode_number,
    "g:Timestamp": _decode_number,
    "g:Class": str,
    "g:Vertex": _decode_vertex,
    "g:VertexProperty": _decode_vertex_property,
    "g:Edge": _decode_edge,
    "g:Property": _decode_property,
    "g:Path": _decode_path,
    "g:TraversalMetrics": _decode_value,
    "g:Metrics": _decode_value,
    "g:TraversalExplanation": _decode_value,
    "janusgraph:RelationIdentifier": _decode_value,
}


def decode(value: Any) -> Any:
    """
    GraphSON v3 값을 순수 Python 데이터로 디코딩

    알 수 없는 @type은 @value를 재귀적으로 디코딩한 결과를 반환합니다.
    """
    if isinstance(value, list):
        return [decode(item) for item in value]
    if not isinstance(value, dict):
        return value

    type_name = value.get("@type")
    if type_name is None or "@value" not in value:
        return {key: decode(item) for key, item in value.items()}

    raw = value["@value"]
    if type_name in NUMERIC_TYPES:
        return _decode_number(raw)
    if type_name in ENUM_TYPES:
        return str(raw)
    decoder = TYPE_DECODERS.get(type_name, _decode_value)
    return decoder(raw)


def decode_result_data(data: Any) -> list[Any]:
    """응답 result.data를 결과 항목 리스트로 디코딩"""
    decoded = decode(data)
    if decoded is None:
        return []
    if isinstance(decoded, list):
        return decoded
    return [decoded]


def to_plain(value: Any) -> Any:
    """
    JSON 직렬화 가능한 스냅샷 생성

    문자열이 아닌 dict 키는 정규화 키로, tuple/set은 리스트로 변환합니다.
    """
    if isinstance(value, Mapping):
        return {
            (key if isinstance(key, str) else canonical_key(key)): to_plain(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_plain(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return canonical_key(value)
