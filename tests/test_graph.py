import numpy as np
import pytest
from scipy import sparse

from fillmap.inference.graph import (
    adjacency_from_layer,
    load_graph,
    read_graph_file,
    write_graph_file,
)


def test_rook_adjacency_on_grid(grid_layer) -> None:
    adj = adjacency_from_layer(grid_layer, "rook")
    degrees = np.asarray(adj.sum(axis=1)).ravel()

    assert adj.shape == (12, 12)
    assert degrees[0] == 2  # corner
    assert degrees[1] == 3  # edge
    assert degrees[5] == 4  # interior
    assert (adj != adj.T).nnz == 0


def test_queen_adds_corner_neighbors(grid_layer) -> None:
    rook = adjacency_from_layer(grid_layer, "rook")
    queen = adjacency_from_layer(grid_layer, "queen")
    assert queen.sum() > rook.sum()
    assert queen[0, 5] == 1


def test_unknown_contiguity(grid_layer) -> None:
    with pytest.raises(ValueError):
        adjacency_from_layer(grid_layer, "bishop")


def test_graph_file_written_with_one_based_ids(tmp_path) -> None:
    adj = np.array([[0, 1, 0], [1, 0, 1], [0, 1, 0]])
    path = write_graph_file(adj, tmp_path / "graph.dat")
    assert path.read_text().splitlines() == ["3", "1 1 2", "2 2 1 3", "3 1 2"]


def test_graph_file_read_back(tmp_path, grid_layer) -> None:
    adj = adjacency_from_layer(grid_layer)
    path = write_graph_file(adj, tmp_path / "grid.graph")
    loaded = read_graph_file(path)
    assert (loaded != adj).nnz == 0


def test_read_zero_based_and_wrapped_tokens(tmp_path) -> None:
    path = tmp_path / "g.txt"
    path.write_text("3 0 1 1\n1 2 0 2 2 1\n1\n")
    adj = read_graph_file(path)
    np.testing.assert_array_equal(adj.toarray(), [[0, 1, 0], [1, 0, 1], [0, 1, 0]])


def test_read_truncated_file(tmp_path) -> None:
    path = tmp_path / "g.txt"
    path.write_text("3\n1 1 2\n2 2 1\n")
    with pytest.raises(ValueError):
        read_graph_file(path)


def test_read_out_of_range_ids(tmp_path) -> None:
    path = tmp_path / "g.txt"
    path.write_text("2\n1 1 5\n2 0\n")
    with pytest.raises(ValueError):
        read_graph_file(path)


def test_load_graph_rejects_asymmetric() -> None:
    with pytest.raises(ValueError, match="symmetric"):
        load_graph(np.array([[0, 1], [0, 0]]))


def test_load_graph_binarizes_and_drops_diagonal() -> None:
    adj = load_graph(sparse.csr_matrix(np.array([[3.0, 0.5], [0.5, 1.0]])))
    np.testing.assert_array_equal(adj.toarray(), [[0, 1], [1, 0]])
