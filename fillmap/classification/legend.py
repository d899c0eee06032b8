"""Legend label formatting for classed maps."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .breaks import LengthMismatchError

logger = logging.getLogger(__name__)

LABEL_DECIMALS = 2


class _Sentinel:
    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


AUTO = _Sentinel("AUTO")  # derive bracket labels from the edges
NO_LEGEND = _Sentinel("NO_LEGEND")  # draw the map without a legend

LEGEND_LOCATIONS = {
    "bottomright": "lower right",
    "bottom": "lower center",
    "bottomleft": "lower left",
    "left": "center left",
    "topleft": "upper left",
    "top": "upper center",
    "topright": "upper right",
    "right": "center right",
    "center": "center",
}


@dataclass
class LegendPlacement:
    loc: str
    anchor: Optional[Tuple[float, float]] = None  # data coordinates


def _is_missing(value) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _is_auto(labels) -> bool:
    if labels is AUTO:
        return True
    if isinstance(labels, str):
        return labels == ""
    return isinstance(labels, (list, tuple, np.ndarray)) and len(labels) > 0 and str(labels[0]) == ""


def _is_no_legend(labels) -> bool:
    if labels is NO_LEGEND or labels is None:
        return True
    if isinstance(labels, float):
        return math.isnan(labels)
    return isinstance(labels, (list, tuple, np.ndarray)) and len(labels) > 0 and _is_missing(labels[0])


def format_number(value: float) -> str:
    """Plain decimal form of a number with no trailing zeros or exponent."""
    return np.format_float_positional(float(value) + 0.0, trim="-")


def format_labels(
    edges: Sequence[float],
    n_col: int,
    user_labels=AUTO,
) -> Optional[List[str]]:
    """Build the legend labels for ``n_col`` classes.

    Auto-derived labels read ``[e0,e1)`` ... ``[e_n-1,e_n]`` and are returned
    highest class first, matching a legend read top to bottom.

    Returns ``None`` when no legend is wanted.

    Raises:
        LengthMismatchError: explicit labels whose count differs from ``n_col``.
    """
    if _is_no_legend(user_labels):
        logger.info("No legend specified")
        return None

    if not _is_auto(user_labels):
        labels = [str(lbl) for lbl in user_labels]
        if len(labels) != n_col:
            raise LengthMismatchError(
                f"Length of legend labels must equal n_col ({len(labels)} != {n_col})",
                expected=n_col,
                actual=len(labels),
            )
        return labels

    br = np.round(np.asarray(edges, dtype=float).ravel(), LABEL_DECIMALS)
    if br.size != n_col + 1:
        raise LengthMismatchError(
            f"Need {n_col + 1} edges to label {n_col} classes, got {br.size}",
            expected=n_col + 1,
            actual=int(br.size),
        )
    txt = [format_number(b) for b in br]
    labels = [f"[{txt[j]},{txt[j + 1]})" for j in range(n_col - 1)]
    labels.append(f"[{txt[n_col - 1]},{txt[n_col]}]")
    return labels[::-1]


def legend_fills(palette: Sequence[str], user_labels=AUTO) -> List[str]:
    """Fill colors in legend order.

    Auto labels are listed highest class first, so the palette is reversed
    with them. Explicit labels are taken to follow the class order.
    """
    if _is_auto(user_labels):
        return list(palette)[::-1]
    return list(palette)


def resolve_legend_location(loc: Union[str, Sequence[float]]) -> LegendPlacement:
    """Translate a compact keyword (``bottomright``) or an (x, y) pair into a placement."""
    if isinstance(loc, str):
        key = loc.strip().lower()
        if key in LEGEND_LOCATIONS:
            return LegendPlacement(loc=LEGEND_LOCATIONS[key])
        if key in LEGEND_LOCATIONS.values() or key == "best":
            return LegendPlacement(loc=key)
        raise ValueError(
            f"Unknown legend location {loc!r}; use one of {sorted(LEGEND_LOCATIONS)} "
            "or an (x, y) pair"
        )
    x, y = loc
    return LegendPlacement(loc="upper left", anchor=(float(x), float(y)))
