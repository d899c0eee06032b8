"""Figure layout from a panel-number matrix.

A layout matrix such as::

    [[1, 2, 3],
     [4, 4, 4]]

places panels 1-3 on the first row and lets panel 4 (typically a shared
legend) span the whole second row. Cells holding 0 stay empty.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import matplotlib.gridspec as gridspec
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure


def default_layout(n_panels: int, extra_cell: bool = False) -> np.ndarray:
    """Single row holding every panel, plus one more cell when requested."""
    n_cells = n_panels + (1 if extra_cell else 0)
    return np.arange(1, n_cells + 1).reshape(1, n_cells)


def panel_count(layout_matrix) -> int:
    """Number of distinct panels a layout matrix defines."""
    mat = np.asarray(layout_matrix)
    return int(np.unique(mat[mat > 0]).size)


def build_layout(
    fig: Figure,
    layout_matrix=None,
    widths: Optional[Sequence[float]] = None,
    heights: Optional[Sequence[float]] = None,
) -> List[Axes]:
    """Create one axes per panel number, ordered by panel number.

    Raises:
        ValueError: malformed matrix, ratios of the wrong length, or a panel
            whose cells do not form a rectangle.
    """
    mat = np.atleast_2d(np.asarray([[1]] if layout_matrix is None else layout_matrix))
    if mat.ndim != 2:
        raise ValueError(f"Layout matrix must be 2-D, got shape {mat.shape}")
    if not np.issubdtype(mat.dtype, np.integer):
        if not np.all(np.equal(np.mod(mat, 1), 0)):
            raise ValueError("Layout matrix entries must be integers")
        mat = mat.astype(int)
    nrows, ncols = mat.shape

    widths = list(widths) if widths is not None else [1.0] * ncols
    heights = list(heights) if heights is not None else [1.0] * nrows
    if len(widths) != ncols:
        raise ValueError(f"Expected {ncols} widths, got {len(widths)}")
    if len(heights) != nrows:
        raise ValueError(f"Expected {nrows} heights, got {len(heights)}")

    grid = gridspec.GridSpec(
        nrows, ncols, figure=fig, width_ratios=widths, height_ratios=heights
    )

    axes = []
    for panel in np.unique(mat[mat > 0]):
        rows, cols = np.nonzero(mat == panel)
        r0, r1 = rows.min(), rows.max() + 1
        c0, c1 = cols.min(), cols.max() + 1
        if np.any(mat[r0:r1, c0:c1] != panel):
            raise ValueError(f"Panel {panel} does not occupy a rectangular block")
        axes.append(fig.add_subplot(grid[r0:r1, c0:c1]))
    if not axes:
        raise ValueError("Layout matrix defines no panels")
    return axes
