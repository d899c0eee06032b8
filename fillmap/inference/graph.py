"""Neighbor graphs over geographic units.

Graphs are kept as symmetric 0/1 ``scipy.sparse`` adjacency matrices. They
can be built from polygon contiguity with libpysal, or exchanged as plain
text graph files::

    4
    1 2 2 3
    2 2 1 4
    3 2 1 4
    4 2 2 3

The first token is the number of nodes; each node then lists its id, its
neighbor count and its neighbor ids. Ids are 1-based (0-based files are
detected and accepted).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import geopandas as gpd
import numpy as np
from libpysal.weights import Queen, Rook, W
from scipy import sparse

from ..utils.geo_utils import Layer, as_geoseries

logger = logging.getLogger(__name__)

GraphLike = Union[str, Path, np.ndarray, sparse.spmatrix, W]


def adjacency_from_layer(layer: Layer, contiguity: str = "rook") -> sparse.csr_matrix:
    """Contiguity adjacency of the layer's polygons, in row order.

    ``rook`` links units sharing an edge, ``queen`` also links units that
    only touch at a corner.
    """
    builders = {"rook": Rook, "queen": Queen}
    key = contiguity.lower()
    if key not in builders:
        raise ValueError(f"contiguity must be 'rook' or 'queen', got {contiguity!r}")

    geoms = as_geoseries(layer).reset_index(drop=True)
    frame = gpd.GeoDataFrame(geometry=geoms)
    w = builders[key].from_dataframe(frame, use_index=True)
    if w.islands:
        logger.warning("%d units have no neighbors: %s", len(w.islands), w.islands)
    return _normalize(w.sparse)


def _normalize(matrix) -> sparse.csr_matrix:
    adj = sparse.csr_matrix(matrix, dtype=float)
    if adj.shape[0] != adj.shape[1]:
        raise ValueError(f"Adjacency must be square, got shape {adj.shape}")
    adj = (adj != 0).astype(float).tocsr()
    adj = (adj - sparse.diags(adj.diagonal())).tocsr()
    adj.eliminate_zeros()
    if (adj != adj.T).nnz:
        raise ValueError("Adjacency must be symmetric")
    return adj


def write_graph_file(adjacency: GraphLike, path: Union[str, Path]) -> Path:
    """Write ``adjacency`` as a text graph file with 1-based ids."""
    adj = load_graph(adjacency)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [str(adj.shape[0])]
    for i in range(adj.shape[0]):
        nbrs = adj.indices[adj.indptr[i]:adj.indptr[i + 1]]
        nbrs = np.sort(nbrs) + 1
        lines.append(" ".join(str(t) for t in [i + 1, len(nbrs), *nbrs]))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.info("Wrote graph with %d nodes to %s", adj.shape[0], path)
    return path


def read_graph_file(path: Union[str, Path]) -> sparse.csr_matrix:
    """Parse a text graph file into a symmetric adjacency matrix."""
    path = Path(path)
    tokens = path.read_text(encoding="utf-8").split()
    if not tokens:
        raise ValueError(f"Graph file {path} is empty")
    try:
        values = [int(t) for t in tokens]
    except ValueError as exc:
        raise ValueError(f"Graph file {path} holds non-integer tokens") from exc

    n = values[0]
    pos = 1
    records = []
    for _ in range(n):
        if pos + 1 >= len(values):
            raise ValueError(f"Graph file {path} ends early")
        node, count = values[pos], values[pos + 1]
        nbrs = values[pos + 2:pos + 2 + count]
        if len(nbrs) != count:
            raise ValueError(f"Graph file {path} ends early at node {node}")
        records.append((node, nbrs))
        pos += 2 + count

    ids = [node for node, _ in records] + [j for _, nbrs in records for j in nbrs]
    offset = 0 if ids and min(ids) == 0 else 1
    rows, cols = [], []
    for node, nbrs in records:
        for j in nbrs:
            rows.append(node - offset)
            cols.append(j - offset)
    if any(r < 0 or r >= n for r in rows + cols):
        raise ValueError(f"Graph file {path} references ids outside 1..{n}")

    adj = sparse.coo_matrix((np.ones(len(rows)), (rows, cols)), shape=(n, n))
    return _normalize(adj)


def load_graph(graph: GraphLike) -> sparse.csr_matrix:
    """Accept a graph file path, a dense or sparse matrix, or a libpysal ``W``."""
    if isinstance(graph, (str, Path)):
        return read_graph_file(graph)
    if isinstance(graph, W):
        return _normalize(graph.sparse)
    if sparse.issparse(graph):
        return _normalize(graph)
    return _normalize(np.asarray(graph, dtype=float))
