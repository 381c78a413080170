"""
그래프 조립기 단위 테스트
키잉, 멱등성, first-write-wins 검증
"""

from app.modules.core.graph.assembler import GraphAssembler, MergeStats, has_values


class TestGraphAssemblerMerge:
    """merge_items 테스트"""

    def test_parallel_edges_kept_separately(self, make_edge):
        """
        병렬 엣지 공존

        Given: 같은 엔드포인트 쌍을 가진 서로 다른 엣지 e1, e2
        When: 병합
        Then: 링크 2개
        """
        assembler = GraphAssembler()

        stats = assembler.merge_items([make_edge("e1", 1, 2), make_edge("e2", 1, 2)])

        assert stats.links_added == 2
        assert assembler.link_count == 2

    def test_merge_is_idempotent(self, make_edge, make_vertex):
        assembler = GraphAssembler()
        items = [make_vertex(1, name="a"), make_edge("e1", 1, 2)]

        assembler.merge_items(items)
        second = assembler.merge_items(items)

        assert second == MergeStats()
        assert assembler.node_count == 1
        assert assembler.link_count == 1

    def test_numeric_and_string_ids_share_node(self, make_vertex):
        assembler = GraphAssembler()

        assembler.merge_items([make_vertex(42), make_vertex("42")])

        assert assembler.node_count == 1

    def test_first_write_wins(self):
        """
        먼저 관측된 속성 유지

        Given: 같은 정점의 서로 다른 속성 관측 두 개
        When: 순서대로 병합
        Then: 첫 번째 속성이 유지
        """
        assembler = GraphAssembler()

        assembler.merge_items([{"id": 1, "label": "person", "name": "first"}])
        assembler.merge_items([{"id": 1, "label": "person", "name": "second"}])

        assert assembler.nodes[0].properties == {"name": "first"}

    def test_empty_properties_filled_by_later_observation(self):
        assembler = GraphAssembler()

        assembler.merge_items([{"id": 1, "label": "person", "type": "vertex"}])
        assembler.merge_items([{"id": 1, "label": "person", "name": "marko"}])

        assert assembler.nodes[0].properties == {"name": "marko"}

    def test_valueless_wrappers_filled_by_later_observation(self, make_vertex):
        """
        대표 값이 없는 다중 값 래퍼는 빈 맵과 같게 취급

        Given: name 래퍼가 빈 리스트인 정점 1
        When: 같은 정점을 값과 함께 다시 병합
        Then: 속성이 채워지고, 이후 관측은 다시 덮어쓰지 않음
        """
        assembler = GraphAssembler()
        assembler.merge_items([{"id": 1, "label": "person", "type": "vertex", "properties": {"name": []}}])

        assert [node.id for node in assembler.nodes_without_properties()] == [1]

        assembler.merge_items([make_vertex(1, name="marko")])
        assembler.merge_items([make_vertex(1, name="other")])

        assert assembler.nodes[0].properties["name"][0]["value"] == "marko"
        assert assembler.nodes_without_properties() == []

    def test_path_elements_merged(self, make_edge, make_vertex):
        assembler = GraphAssembler()

        stats = assembler.merge_items(
            [{"objects": [make_vertex(1), make_edge("e1", 1, 2), make_vertex(2)]}]
        )

        assert stats.nodes_added == 2
        assert stats.links_added == 1


class TestGraphAssemblerQueries:
    """조회/채우기 테스트"""

    def test_missing_endpoint_ids(self, make_edge, make_vertex):
        """
        누락 엔드포인트

        Given: 노드 1만 존재, 엣지 1→2, 1→"2", 3→1
        When: missing_endpoint_ids 호출
        Then: 2와 3만 (2와 "2"는 하나로)
        """
        assembler = GraphAssembler()
        assembler.merge_items(
            [
                make_vertex(1),
                make_edge("e1", 1, 2),
                make_edge("e2", 1, "2"),
                make_edge("e3", 3, 1),
            ]
        )

        assert assembler.missing_endpoint_ids() == [2, 3]

    def test_has_node_lenient(self, make_vertex):
        assembler = GraphAssembler()
        assembler.merge_items([make_vertex(7)])

        assert assembler.has_node("7")
        assert not assembler.has_node(8)

    def test_fill_node_properties_never_overwrites(self):
        assembler = GraphAssembler()
        assembler.merge_items([{"id": 1, "label": "person", "name": "a"}])
        key = assembler.resolve_node_key(1)

        assert not assembler.fill_node_properties(key, {"name": "b"})
        assert assembler.nodes[0].properties == {"name": "a"}

    def test_fill_skips_valueless_properties(self):
        assembler = GraphAssembler()
        assembler.merge_items([{"id": 1, "label": "person", "type": "vertex"}])
        key = assembler.resolve_node_key(1)

        assert not assembler.fill_node_properties(key, {"name": [{"value": None}]})
        assert assembler.fill_node_properties(key, {"name": "a"})

    def test_fill_link_properties(self, make_edge):
        assembler = GraphAssembler()
        assembler.merge_items([make_edge("e1", 1, 2)])
        key = assembler.resolve_link_key("e1")

        assert assembler.links_without_properties()
        assert assembler.fill_link_properties(key, {"since": 2010})
        assert assembler.links[0].properties == {"since": 2010}
        assert not assembler.links_without_properties()

    def test_to_payload_is_a_copy(self, make_vertex):
        assembler = GraphAssembler()
        assembler.merge_items([{"id": 1, "label": "person", "name": "a"}])

        payload = assembler.to_payload()
        payload.nodes[0].properties["name"] = "changed"

        assert assembler.nodes[0].properties == {"name": "a"}


class TestHasValues:
    def test_has_values(self):
        assert has_values({"name": "a"})
        assert has_values({"name": [], "age": [{"value": 3}]})
        assert not has_values({})
        assert not has_values({"name": [], "nick": [{"value": None}]})
