"""
식별자 정규화 (Identity Canonicalizer)

그래프 백엔드가 반환하는 식별자(숫자, 문자열, 복합 객체)를
결정적인 비교 키 문자열로 변환합니다.

- 42, 42.0, "42" → "42"
- {"b": 1, "a": 2} 와 {"a": 2, "b": 1} → 동일한 키
- 복합 객체 필드 순서에 의존하지 않음

모든 함수는 순수 함수이며 부작용이 없습니다.
"""

import json
from collections.abc import Mapping
from typing import Any


def _json_default(value: Any) -> Any:
    """JSON으로 표현할 수 없는 값의 직렬화 형태"""
    fields = _instance_fields(value)
    if fields:
        return fields
    return str(value)


def _to_json(value: Any) -> str:
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_default,
        ensure_ascii=False,
    )


def _instance_fields(value: Any) -> dict[str, Any]:
    try:
        fields = vars(value)
    except TypeError:
        return {}
    return {k: v for k, v in fields.items() if not k.startswith("_")}


def _has_custom_str(value: Any) -> bool:
    if type(value).__str__ is object.__str__:
        return False
    text = str(value)
    return bool(text) and text != object.__repr__(value)


def canonical_key(identifier: Any) -> str:
    """
    식별자를 정규화된 비교 키로 변환

    Args:
        identifier: 백엔드 식별자 (스칼라 또는 복합 객체)

    Returns:
        결정적인 비교 키 문자열

    Examples:
        >>> canonical_key(42) == canonical_key("42") == canonical_key(42.0)
        True
        >>> canonical_key({"relationId": "x", "outV": 1})
        '{"outV":1,"relationId":"x"}'
    """
    if isinstance(identifier, str):
        return identifier
    if identifier is None or isinstance(identifier, bool):
        return json.dumps(identifier)
    if isinstance(identifier, int):
        return str(identifier)
    if isinstance(identifier, float):
        if identifier.is_integer():
            return str(int(identifier))
        return str(identifier)
    if isinstance(identifier, Mapping):
        return _to_json(dict(identifier))
    if isinstance(identifier, (list, tuple)):
        return _to_json(list(identifier))

    fields = _instance_fields(identifier)
    if fields:
        return _to_json(fields)
    if _has_custom_str(identifier):
        return str(identifier)
    return "{}"


def extract_id(value: Any) -> Any:
    """
    엔드포인트 참조에서 식별자 추출

    엔드포인트는 식별자 자체이거나 {id, label} 형태의 참조일 수 있습니다.
    """
    if isinstance(value, Mapping) and value.get("id") is not None:
        return value["id"]
    return value


def ids_match(a: Any, b: Any) -> bool:
    """
    관대한 식별자 비교

    정규화 키 조회가 실패한 경우에 사용하는 호환성 비교입니다.
    순서: (1) 정규화 키 동일 → (2) 문자열 변환 동일 → (3) 전체 JSON 구조 동일
    """
    if canonical_key(a) == canonical_key(b):
        return True
    if str(a) == str(b):
        return True
    try:
        return _to_json(a) == _to_json(b)
    except (TypeError, ValueError):
        return False


def format_id_literal(identifier: Any) -> str:
    """
    Gremlin 쿼리에 삽입할 식별자 리터럴

    bool이 아닌 숫자는 그대로, 나머지는 JSON 인코딩합니다.
    """
    if isinstance(identifier, (int, float)) and not isinstance(identifier, bool):
        if isinstance(identifier, float) and identifier.is_integer():
            return str(int(identifier))
        return str(identifier)
    return json.dumps(identifier, default=_json_default, ensure_ascii=False)


def resolve_match(identifier: Any, candidates: Mapping[str, Any]) -> str | None:
    """
    후보 중 식별자와 일치하는 항목의 정규화 키 반환

    Args:
        identifier: 찾을 식별자
        candidates: 정규화 키 → 원본 식별자

    Returns:
        일치하는 후보의 키 (없으면 None)

    Note:
        보강 쿼리는 메인 쿼리와 미묘하게 다른 형태로 식별자를 반환할 수 있어
        정규화 키 → 문자열 변환 → 전체 JSON 구조 순으로 비교합니다.
        호환성 처리이며 정확한 일치를 보장하지 않습니다.
    """
    key = canonical_key(identifier)
    if key in candidates:
        return key

    text = str(identifier)
    for candidate_key, candidate in candidates.items():
        if str(candidate) == text:
            return candidate_key

    try:
        target = _to_json(identifier)
    except (TypeError, ValueError):
        return None
    for candidate_key, candidate in candidates.items():
        try:
            if _to_json(candidate) == target:
                return candidate_key
        except (TypeError, ValueError):
            continue
    return None
