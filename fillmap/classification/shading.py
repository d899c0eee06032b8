"""Value to color mapping.

Discrete shading: grayscale classes looked up through the bin edges.
Continuous shading: one ramp step per distinct value, chosen by rank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import matplotlib as mpl
import matplotlib.colors as mcolors
import numpy as np

from .breaks import LengthMismatchError

logger = logging.getLogger(__name__)


def gray_shades(n_col: int) -> List[str]:
    """Grayscale palette with one shade per class, lowest class first.

    Gray levels run ``0 .. 1`` (black to white) and are reversed, so the
    lowest class is white and the highest is black.
    """
    n_col = int(n_col)
    if n_col < 1:
        raise ValueError(f"n_col must be >= 1, got {n_col}")
    if n_col == 1:
        return [mcolors.to_hex((0.0, 0.0, 0.0))]
    levels = np.arange(n_col) / (n_col - 1)
    return [mcolors.to_hex((lvl, lvl, lvl)) for lvl in levels[::-1]]


def bin_index(values, edges) -> np.ndarray:
    """Zero-based class index of every value.

    Interior bins are ``[e_i, e_i+1)``, the last bin is closed on the right
    and anything outside the edges is clamped into the first or last bin.
    """
    edges = np.asarray(edges, dtype=float).ravel()
    if edges.size < 2:
        raise ValueError("Need at least two edges to form a bin")
    if np.any(np.diff(edges) < 0):
        raise ValueError(f"Bin edges must be non-decreasing: {edges}")
    vals = np.asarray(values, dtype=float)
    idx = np.searchsorted(edges, vals, side="right") - 1
    return np.clip(idx, 0, edges.size - 2)


def assign_colors(values, edges, palette: Optional[Sequence[str]] = None) -> np.ndarray:
    """Return one color per value, in input order."""
    n_bins = np.asarray(edges).size - 1
    if palette is None:
        palette = gray_shades(n_bins)
    if len(palette) != n_bins:
        raise LengthMismatchError(
            f"Palette has {len(palette)} colors for {n_bins} bins",
            expected=n_bins,
            actual=len(palette),
        )
    idx = bin_index(values, edges)
    return np.asarray(palette, dtype=object)[idx]


@dataclass
class ContinuousShading:
    """Continuous ramp assignment and its legend samples."""

    colors: np.ndarray  # one hex color per input value
    ramp: List[str]  # one color per distinct value, lowest first
    unique_values: np.ndarray
    ranks: np.ndarray  # ramp position of each input value
    sample_positions: np.ndarray
    sample_labels: np.ndarray
    sample_colors: List[str]


def assign_continuous_colors(
    values,
    scale_values=None,
    cmap: str = "viridis_r",
    n_samples: int = 5,
    legend_round: int = 0,
) -> ContinuousShading:
    """Map values onto a continuous color ramp by sorted rank.

    Args:
        values: Values to color.
        scale_values: Optional reference values merged into the ramp so that
            several figures share one color scale. Need not match ``values``
            in length.
        cmap: Matplotlib colormap name.
        n_samples: Number of legend samples taken along the ramp.
        legend_round: Decimals kept in the legend labels.
    """
    vals = np.asarray(values, dtype=float).ravel()
    if vals.size == 0:
        raise ValueError("Cannot shade an empty value array")
    if scale_values is not None:
        pool = np.concatenate([vals, np.asarray(scale_values, dtype=float).ravel()])
    else:
        pool = vals
    if not np.all(np.isfinite(pool)):
        raise ValueError("Values must be finite for continuous shading")

    unique_values, inverse = np.unique(pool, return_inverse=True)
    ranks = inverse.ravel()[: vals.size]

    n_steps = unique_values.size
    colormap = mpl.colormaps[cmap]
    ramp = [mcolors.to_hex(c) for c in colormap(np.linspace(0.0, 1.0, n_steps))]
    colors = np.asarray(ramp, dtype=object)[ranks]

    positions = np.floor(np.linspace(0, n_steps - 1, n_samples)).astype(int)
    labels = np.round(unique_values[positions], legend_round)

    return ContinuousShading(
        colors=colors,
        ramp=ramp,
        unique_values=unique_values,
        ranks=ranks,
        sample_positions=positions,
        sample_labels=labels,
        sample_colors=[ramp[p] for p in positions],
    )
