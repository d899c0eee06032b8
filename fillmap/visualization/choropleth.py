"""Classed choropleth maps with a grayscale legend.

Single panel entry point is :func:`fillmap`. The drawing helpers here are
shared with the multi-panel orchestrator in :mod:`fillmap.visualization.panels`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

import matplotlib as mpl
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.patches import Patch

from ..classification.breaks import BreakStrategy, LengthMismatchError, compute_breaks
from ..classification.legend import (
    AUTO,
    format_labels,
    legend_fills,
    resolve_legend_location,
)
from ..classification.shading import assign_colors, gray_shades
from ..config.parameters import MapStyle, get_default_parameters
from ..utils.geo_utils import Layer, as_geoseries, require_unit_values

logger = logging.getLogger(__name__)

# Integer line types as used by classic plotting devices
LINE_TYPES = {
    0: "None",
    1: "-",
    2: "--",
    3: ":",
    4: "-.",
    5: (0, (8, 4)),
    6: (0, (2, 2, 6, 2)),
}
LINE_HEIGHT = 1.2  # text line height relative to the font size


class PanelStatus(Enum):
    """Outcome of one panel render."""
    OK = "ok"
    NO_LEGEND = "no_legend"
    CUTS_MISMATCH = "cuts_mismatch"
    LEGEND_MISMATCH = "legend_mismatch"
    SKIPPED = "skipped"


@dataclass
class PanelResult:
    index: int
    title: str
    status: PanelStatus
    edges: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None
    labels: Optional[List[str]] = None
    message: str = ""
    ax: Optional[Axes] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        """Polygons drawn and no mismatch reported."""
        return self.status in (PanelStatus.OK, PanelStatus.NO_LEGEND)


def resolve_line_style(line_style: Union[int, str, tuple]):
    if isinstance(line_style, (int, np.integer)) and not isinstance(line_style, bool):
        if int(line_style) not in LINE_TYPES:
            raise ValueError(f"Unknown line type {line_style}")
        return LINE_TYPES[int(line_style)]
    return line_style


def _font_size(scale: float) -> float:
    return float(mpl.rcParams["font.size"]) * float(scale)


def draw_polygons(ax: Axes, layer: Layer, colors: Sequence[str], style: MapStyle) -> None:
    """Fill every unit with its color and hide the axes."""
    as_geoseries(layer).plot(
        ax=ax,
        color=list(colors),
        edgecolor=style.edge_color,
        linewidth=style.line_width,
        linestyle=resolve_line_style(style.line_style),
    )
    ax.set_axis_off()


def draw_title(ax: Axes, title: str, scale: float, line: float) -> None:
    """Title at ``line`` text lines above the axes; negative lines sit inside."""
    if not title:
        return
    size = _font_size(scale)
    ax.set_title(title, fontsize=size, pad=line * size * LINE_HEIGHT)


def draw_legend(
    ax: Axes,
    labels: Sequence[str],
    fills: Sequence[str],
    style: MapStyle,
):
    """Patch legend without a frame, one column or one row."""
    placement = resolve_legend_location(style.legend_loc)
    handles = [
        Patch(facecolor=fill, edgecolor="black", label=label)
        for label, fill in zip(labels, fills)
    ]
    kwargs = {}
    if placement.anchor is not None:
        kwargs["bbox_to_anchor"] = placement.anchor
        kwargs["bbox_transform"] = ax.transData
    return ax.legend(
        handles=handles,
        loc=placement.loc,
        ncol=len(handles) if style.legend_horizontal else 1,
        frameon=False,
        fontsize=_font_size(style.legend_scale),
        **kwargs,
    )


def render_panel(
    ax: Axes,
    layer: Layer,
    title: str,
    values: np.ndarray,
    edges: np.ndarray,
    style: MapStyle,
    legend_labels=AUTO,
    with_legend: bool = True,
    index: int = 0,
) -> PanelResult:
    """Shade, draw and title one panel, then add its legend if asked."""
    n_col = len(edges) - 1
    palette = gray_shades(n_col)
    colors = assign_colors(values, edges, palette)

    draw_polygons(ax, layer, colors, style)
    draw_title(ax, title, style.title_scale, style.title_line)

    result = PanelResult(
        index=index, title=title, status=PanelStatus.OK,
        edges=edges, colors=colors, ax=ax,
    )
    if not with_legend:
        return result

    try:
        labels = format_labels(edges, n_col, legend_labels)
    except LengthMismatchError as exc:
        logger.warning("Panel %d (%s): %s", index, title, exc)
        result.status = PanelStatus.LEGEND_MISMATCH
        result.message = str(exc)
        return result

    if labels is None:
        result.status = PanelStatus.NO_LEGEND
        result.message = "No legend specified"
        return result

    draw_legend(ax, labels, legend_fills(palette, legend_labels), style)
    result.labels = labels
    return result


def fillmap(
    layer: Layer,
    title: str,
    values,
    n_col: int,
    strategy: Union[str, BreakStrategy] = BreakStrategy.EQUAL,
    user_cuts: Optional[Sequence[float]] = None,
    legend_labels=AUTO,
    style: Optional[MapStyle] = None,
    ax: Optional[Axes] = None,
) -> PanelResult:
    """Draw a single grayscale choropleth with a class legend.

    Args:
        layer: Polygons, one row per geographic unit.
        title: Title drawn over the map.
        values: One value per unit.
        n_col: Number of classes.
        strategy: ``equal``, ``quantile`` or ``user`` breaks.
        user_cuts: ``n_col + 1`` edges for the ``user`` strategy.
        legend_labels: ``AUTO`` for bracket labels, ``NO_LEGEND`` to skip the
            legend, or ``n_col`` explicit labels in class order.
        style: Fonts, legend placement and line style.
        ax: Target axes; a new figure is created when omitted.

    Returns:
        PanelResult. A cut or legend mismatch is reported in its status and
        logged, not raised.
    """
    style = style or get_default_parameters().map_style
    vals = require_unit_values(layer, values)

    if ax is None:
        _, ax = plt.subplots(figsize=style.figure_size)

    try:
        edges = compute_breaks(vals, n_col, strategy, user_cuts)
    except LengthMismatchError as exc:
        logger.warning("%s: %s", title or "map", exc)
        return PanelResult(
            index=0, title=title, status=PanelStatus.CUTS_MISMATCH,
            message=str(exc), ax=ax,
        )

    return render_panel(ax, layer, title, vals, edges, style, legend_labels)
