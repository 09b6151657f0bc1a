import networkx as nx
import numpy as np
import pandas as pd
import pytest

from matleiden.core.types import Source
from matleiden.graph.edges import edge_table_from_tuples, edges_to_matrix, sorted_vertex_ids
from matleiden.graph.source import (
    InvalidAdjacencyMatrixError,
    build_source,
    build_source_from_edges,
    build_source_from_matrix,
    build_source_from_networkx,
)


class TestMatrixValidation:

    @pytest.mark.parametrize("matrix,message", [
        ([[0, 1, 0], [1, 0, 1]], "square"),
        ([[0, 1], [2, 0]], "symmetric"),
        ([[1, 1], [1, 0]], "zero diagonal"),
        ([[0, -1], [-1, 0]], "negative"),
        ([[0, np.inf], [np.inf, 0]], "infinite or NaN"),
        ([[0, np.nan], [np.nan, 0]], "infinite or NaN"),
    ])
    def test_rejects(self, matrix, message):
        with pytest.raises(InvalidAdjacencyMatrixError, match=message):
            build_source_from_matrix(matrix)

    def test_non_numeric(self):
        with pytest.raises(InvalidAdjacencyMatrixError, match="numeric"):
            build_source_from_matrix([["a", "b"], ["c", "d"]])

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            build_source_from_matrix([[0, 1], [0, 0]])


class TestOrphans:

    def test_orphans_are_removed(self):
        matrix = np.array([
            [0, 1, 0, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ], dtype=float)
        source = build_source_from_matrix(matrix)
        np.testing.assert_array_equal(source.adjacency_matrix, [[0, 1], [1, 0]])
        assert source.orphan_communities == [2, 3]
        assert source.degree_sequence == [0, 1]

    def test_all_orphans(self):
        source = build_source_from_matrix(np.zeros((3, 3)))
        assert source.adjacency_matrix.shape == (0, 0)
        assert source.orphan_communities == [0, 1, 2]
        assert source.vertex_count == 0
        assert source.total_edge_weight == 0.0

    def test_empty_input(self):
        assert build_source_from_matrix([]).adjacency_matrix.shape == (0, 0)
        assert build_source([]).vertex_count == 0

    def test_vertex_labels(self):
        source = build_source_from_matrix([[0, 0, 0], [0, 0, 2], [0, 2, 0]], vertices=["x", "y", "z"])
        assert source.orphan_communities == ["x"]
        assert source.degree_sequence == ["y", "z"]
        assert source.total_edge_weight == 2.0

    def test_label_count_must_match(self):
        with pytest.raises(ValueError, match="vertex labels"):
            build_source_from_matrix([[0, 1], [1, 0]], vertices=["a"])


class TestEdgeInputs:

    def test_weighted_edge_list(self):
        source = build_source([(0, 1, 2.0), (1, 2, 0.5)])
        np.testing.assert_array_equal(source.adjacency_matrix, [[0, 2, 0], [2, 0, 0.5], [0, 0.5, 0]])

    def test_unweighted_edges_default_to_one(self):
        source = build_source([("b", "a"), ("b", "c")])
        assert source.degree_sequence == ["a", "b", "c"]
        np.testing.assert_array_equal(source.adjacency_matrix, [[0, 1, 0], [1, 0, 1], [0, 1, 0]])

    def test_duplicate_edges_add_up(self):
        source = build_source([(0, 1), (1, 0), (0, 1, 3)])
        assert source.adjacency_matrix[0, 1] == 5.0
        assert source.adjacency_matrix[1, 0] == 5.0

    def test_self_loops_dropped(self):
        source = build_source([(0, 0, 4), (0, 1)])
        assert source.total_edge_weight == 1.0

    def test_vertices_edges_pair_keeps_order_and_orphans(self):
        source = build_source((["c", "a", "b", "z"], [("a", "b"), ("b", "c"), ("a", "q")]))
        assert source.degree_sequence == ["c", "a", "b"]
        assert source.orphan_communities == ["z"]
        # ("a", "q") names an unknown vertex
        assert source.total_edge_weight == 2.0

    def test_pair_with_no_edges(self):
        source = build_source(([1, 2, 3], []))
        assert source.vertex_count == 0
        assert source.orphan_communities == [1, 2, 3]

    def test_duplicate_vertices(self):
        with pytest.raises(ValueError, match="duplicates"):
            build_source(([1, 1, 2], [(1, 2)]))

    @pytest.mark.parametrize("edges", [[(0,)], [(0, 1, 2, 3)], [(0, 1, "heavy")]])
    def test_bad_tuples(self, edges):
        with pytest.raises(ValueError):
            edge_table_from_tuples(edges)

    def test_dataframe_input(self):
        df = pd.DataFrame({"u": [0, 1], "v": [1, 2], "weight": [1.5, 2.5]})
        source = build_source(df)
        assert source.total_edge_weight == 4.0

    def test_dataframe_without_weight(self):
        source = build_source_from_edges(pd.DataFrame({"u": [0], "v": [1]}))
        assert source.total_edge_weight == 1.0

    def test_dataframe_missing_columns(self):
        with pytest.raises(ValueError, match="missing columns"):
            build_source(pd.DataFrame({"src": [0], "dst": [1]}))

    def test_edges_to_matrix_ignores_unknown(self):
        edges = edge_table_from_tuples([(0, 1), (1, 9)])
        np.testing.assert_array_equal(edges_to_matrix(edges, [0, 1]), [[0, 1], [1, 0]])

    def test_sorted_vertex_ids_mixed_types(self):
        assert sorted_vertex_ids([3, "b", 1, "a", 3]) == [1, 3, "a", "b"]


class TestOtherInputs:

    def test_networkx_graph(self):
        g = nx.Graph()
        g.add_edge("u", "w", weight=3.0)
        g.add_edge("u", "v")
        g.add_node("lonely")
        source = build_source(g)
        assert source.degree_sequence == ["u", "v", "w"]
        assert source.orphan_communities == ["lonely"]
        np.testing.assert_array_equal(source.adjacency_matrix, [[0, 1, 3], [1, 0, 0], [3, 0, 0]])

    def test_networkx_directed_rejected(self):
        with pytest.raises(ValueError, match="undirected"):
            build_source_from_networkx(nx.DiGraph([(0, 1)]))

    def test_karate_from_networkx(self, karate):
        source = build_source(nx.karate_club_graph())
        assert source.vertex_count == 34
        np.testing.assert_array_equal(source.adjacency_matrix > 0, karate > 0)

    def test_numpy_and_nested_list(self, triangle):
        a = build_source(triangle)
        b = build_source(triangle.tolist())
        np.testing.assert_array_equal(a.adjacency_matrix, b.adjacency_matrix)

    def test_source_passes_through(self, empty_source):
        assert build_source(empty_source) is empty_source

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="Unsupported graph input"):
            build_source("0 1\n1 2")

    def test_source_properties(self, path3):
        source = Source(adjacency_matrix=path3)
        assert source.vertex_count == 3
        assert source.total_edge_weight == 2.0
