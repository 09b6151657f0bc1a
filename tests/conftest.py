import networkx as nx
import numpy as np
import pytest

from matleiden.core.types import Source
from matleiden.graph.source import build_source_from_matrix


# =============================================================================
# FIXTURES: small canonical graphs
# =============================================================================

@pytest.fixture
def path3():
    """0 - 1 - 2"""
    return np.array([
        [0, 1, 0],
        [1, 0, 1],
        [0, 1, 0],
    ], dtype=float)


@pytest.fixture
def path4():
    """0 - 1 - 2 - 3"""
    return np.array([
        [0, 1, 0, 0],
        [1, 0, 1, 0],
        [0, 1, 0, 1],
        [0, 0, 1, 0],
    ], dtype=float)


@pytest.fixture
def triangle():
    return np.array([
        [0, 1, 1],
        [1, 0, 1],
        [1, 1, 0],
    ], dtype=float)


@pytest.fixture
def star3():
    """Node 0 linked to 1 and 2"""
    return np.array([
        [0, 1, 1],
        [1, 0, 0],
        [1, 0, 0],
    ], dtype=float)


@pytest.fixture
def two_triangles():
    """Triangles {0,1,2} and {3,4,5} joined by the bridge 2 - 3"""
    g = nx.Graph()
    g.add_edges_from([(0, 1), (0, 2), (1, 2), (3, 4), (3, 5), (4, 5), (2, 3)])
    return nx.to_numpy_array(g, nodelist=range(6))


@pytest.fixture
def karate():
    g = nx.karate_club_graph()
    return nx.to_numpy_array(g, nodelist=sorted(g.nodes()), weight=None)


@pytest.fixture
def karate_source(karate):
    return build_source_from_matrix(karate)


@pytest.fixture
def two_triangles_source(two_triangles):
    return build_source_from_matrix(two_triangles)


@pytest.fixture
def empty_source():
    """Three vertices, no edges, built without orphan removal."""
    return Source(adjacency_matrix=np.zeros((3, 3)), orphan_communities=[], degree_sequence=[0, 1, 2])


@pytest.fixture
def rng():
    return np.random.default_rng(7)


def assert_partition(partition, n_rows):
    """Every row of a partition matrix holds exactly one 1."""
    assert partition.shape[0] == n_rows
    assert set(np.unique(partition).tolist()) <= {0.0, 1.0}
    assert np.all(partition.sum(axis=1) == 1)
