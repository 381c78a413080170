"""
파이프라인이 직접 생성하는 Gremlin 쿼리

사용자 쿼리는 해석하지 않고 그대로 전송하며,
여기서는 보강 단계의 조회 쿼리만 만듭니다.

project()는 key/value 병렬 리스트로 속성을 받습니다.
일부 백엔드/드라이버 조합은 진짜 Map 결과 타입을 만드는 데 불안정합니다.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, TypeVar

from .classifier import zip_properties
from .identity import format_id_literal

T = TypeVar("T")

PROPERTY_PROJECTION = ".by(__.properties().key().fold()).by(__.properties().value().fold())"


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """고정 크기 배치로 분할"""
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def id_list(ids: Iterable[Any]) -> str:
    return ", ".join(format_id_literal(identifier) for identifier in ids)


def element_map_query(ids: Iterable[Any]) -> str:
    """누락 노드 조회: g.V(ids).elementMap()"""
    return f"g.V({id_list(ids)}).elementMap()"


def induced_edges_query(ids: Iterable[Any]) -> str:
    """노드 집합에 닿는 모든 엣지 조회 (id, label, 엔드포인트, 속성)"""
    return (
        f"g.V({id_list(ids)}).bothE()"
        ".project('id','label','inV','outV','keys','vals')"
        ".by(__.id()).by(__.label()).by(__.inV().id()).by(__.outV().id())"
        f"{PROPERTY_PROJECTION}"
    )


def vertex_properties_query(ids: Iterable[Any]) -> str:
    """정점 속성 보강 조회"""
    return f"g.V({id_list(ids)}).project('id','keys','vals').by(__.id()){PROPERTY_PROJECTION}"


def incident_edge_properties_query(source_literals: str) -> str:
    """
    출발 정점 기준 엣지 속성 조회

    복합 엣지 id는 g.E(id) 조회가 불안정하므로 출발 정점에서 bothE()로 찾습니다.
    """
    return (
        f"g.V({source_literals}).bothE().project('id','keys','vals').by(__.id())"
        f"{PROPERTY_PROJECTION}"
    )


def source_id_literal(source_id: Any) -> str:
    """
    단일 출발 정점 식별자 리터럴

    이미 객체 리터럴처럼 보이는 문자열("{...}")은 그대로, 나머지는 인코딩합니다.
    """
    if isinstance(source_id, str) and source_id.lstrip().startswith("{"):
        return source_id
    return format_id_literal(source_id)


def diagnostic_query(query: str, step: str) -> str:
    """<query>.explain() / <query>.profile() (끝의 세미콜론 제거)"""
    return f"{query.strip().rstrip(';').rstrip()}.{step}()"


def read_projection(
    record: Any, metadata_keys: frozenset[str] = frozenset({"id", "label"})
) -> tuple[Any, dict[str, Any]] | None:
    """
    보강 쿼리 레코드를 (id, 속성) 으로 해석

    keys/vals 병렬 리스트가 기본이며, elementMap() 형태도 허용합니다.
    메타데이터 키는 제거됩니다.
    """
    if not isinstance(record, Mapping) or record.get("id") is None:
        return None

    keys, vals = record.get("keys"), record.get("vals")
    if isinstance(keys, list) and isinstance(vals, list):
        properties = zip_properties(keys, vals)
    else:
        properties = {k: v for k, v in record.items() if k not in ("keys", "vals")}

    stripped = {k: v for k, v in properties.items() if k not in metadata_keys}
    return record["id"], stripped
