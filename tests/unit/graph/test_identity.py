"""
식별자 정규화 단위 테스트
정규화 키 결정성, 관대한 비교, 쿼리 리터럴 형식 검증
"""
import pytest

from app.modules.core.graph.identity import (
    canonical_key,
    extract_id,
    format_id_literal,
    ids_match,
    resolve_match,
)


class RelationIdentifier:
    """필드를 가진 복합 식별자 객체"""

    def __init__(self, relation_id, out_v):
        self.relation_id = relation_id
        self.out_v = out_v


class OpaqueId:
    """필드 없이 문자열 형태만 가진 식별자"""

    __slots__ = ()

    def __str__(self):
        return "opaque-7"


class TestCanonicalKey:
    """canonical_key 테스트"""

    @pytest.mark.parametrize("identifier", [42, 42.0, "42"])
    def test_number_and_numeric_string_agree(self, identifier):
        """숫자/정수형 실수/숫자 문자열은 같은 키"""
        assert canonical_key(identifier) == "42"

    def test_non_integral_float_keeps_fraction(self):
        assert canonical_key(1.5) == "1.5"

    def test_composite_key_independent_of_field_order(self):
        """
        복합 식별자 필드 순서 무관

        Given: 같은 필드를 다른 순서로 가진 두 dict
        When: canonical_key 계산
        Then: 동일한 키
        """
        a = {"relationId": "4r-8-2dx-g", "outV": 8, "inV": 16}
        b = {"inV": 16, "outV": 8, "relationId": "4r-8-2dx-g"}

        assert canonical_key(a) == canonical_key(b)
        assert canonical_key(a) == '{"inV":16,"outV":8,"relationId":"4r-8-2dx-g"}'

    def test_nested_composite_sorted_recursively(self):
        a = {"outer": {"b": 1, "a": 2}}
        b = {"outer": {"a": 2, "b": 1}}

        assert canonical_key(a) == canonical_key(b)

    def test_object_with_fields_serialized_sorted(self):
        key = canonical_key(RelationIdentifier("abc", 4))

        assert key == '{"out_v":4,"relation_id":"abc"}'

    def test_object_without_fields_uses_string_form(self):
        """필드가 없고 문자열 형태가 있으면 그 문자열"""
        assert canonical_key(OpaqueId()) == "opaque-7"

    def test_plain_object_without_fields_or_string_form(self):
        assert canonical_key(object()) == "{}"

    def test_bool_and_none_are_json_literals(self):
        assert canonical_key(True) == "true"
        assert canonical_key(None) == "null"

    def test_pure_function(self):
        """같은 입력은 항상 같은 키, 입력 변경 없음"""
        identifier = {"b": [1, 2], "a": "x"}
        snapshot = dict(identifier)

        assert canonical_key(identifier) == canonical_key(identifier)
        assert identifier == snapshot


class TestExtractId:
    """extract_id 테스트"""

    def test_bare_identifier(self):
        assert extract_id(7) == 7

    def test_reference_stub(self):
        assert extract_id({"id": 7, "label": "person"}) == 7

    def test_mapping_without_id_is_returned_as_is(self):
        composite = {"relationId": "x"}
        assert extract_id(composite) is composite


class TestIdsMatch:
    """ids_match 관대한 비교 테스트"""

    def test_canonical_match(self):
        assert ids_match(42, "42")

    def test_string_coercion_match(self):
        assert ids_match(OpaqueId(), "opaque-7")

    def test_structure_match(self):
        assert ids_match({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_different_ids(self):
        assert not ids_match(1, 2)


class TestResolveMatch:
    """resolve_match 3단계 매칭 테스트"""

    def test_canonical_key_first(self):
        candidates = {"42": 42, "7": "7"}
        assert resolve_match("42", candidates) == "42"

    def test_string_coercion_fallback(self):
        candidates = {"opaque-key": OpaqueId()}
        assert resolve_match("opaque-7", candidates) == "opaque-key"

    def test_no_match(self):
        assert resolve_match("missing", {"1": 1}) is None


class TestFormatIdLiteral:
    """Gremlin 쿼리 리터럴 형식"""

    def test_numbers_verbatim(self):
        assert format_id_literal(42) == "42"
        assert format_id_literal(4.0) == "4"

    def test_strings_json_encoded(self):
        assert format_id_literal("v-1") == '"v-1"'

    def test_bool_is_json_encoded(self):
        assert format_id_literal(True) == "true"
