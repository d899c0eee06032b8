"""Multi-panel choropleths with per-panel or shared legends."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from ..classification.breaks import BreakStrategy, LengthMismatchError, compute_breaks
from ..classification.legend import AUTO, format_labels, legend_fills
from ..classification.shading import gray_shades
from ..config.parameters import MapStyle, get_default_parameters
from ..utils.geo_utils import Layer, require_unit_values, unit_count
from .choropleth import PanelResult, PanelStatus, draw_legend, render_panel
from .layout import build_layout, default_layout, panel_count

logger = logging.getLogger(__name__)


class PanelsStatus(Enum):
    OK = "ok"
    DEGRADED = "degraded"  # at least one panel or the shared legend failed
    DIMENSION_ERROR = "dimension_error"


@dataclass
class PanelsResult:
    figure: Optional[Figure]
    panels: List[PanelResult] = field(default_factory=list)
    status: PanelsStatus = PanelsStatus.OK
    shared_edges: Optional[np.ndarray] = None
    legend_status: Optional[PanelStatus] = None  # shared legend only
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is PanelsStatus.OK

    @property
    def edges(self) -> List[Optional[np.ndarray]]:
        return [p.edges for p in self.panels]


def split_panels(layer: Layer, data: np.ndarray, panel_axis: int = 1) -> List[np.ndarray]:
    """Cut a value table into one vector per panel.

    ``panel_axis`` names the axis that indexes panels; the other axis must
    have one entry per geographic unit.
    """
    if data.ndim == 1:
        return [require_unit_values(layer, data)]
    if panel_axis not in (0, 1):
        raise ValueError(f"panel_axis must be 0 or 1, got {panel_axis}")
    unit_axis = 1 - panel_axis
    n_units = unit_count(layer)
    if data.shape[unit_axis] != n_units:
        raise ValueError(
            f"Axis {unit_axis} of the value table has {data.shape[unit_axis]} "
            f"entries but the layer has {n_units} units"
        )
    return [np.take(data, i, axis=panel_axis) for i in range(data.shape[panel_axis])]


def _panel_titles(titles: Union[str, Sequence[str], None], n_panels: int) -> List[str]:
    if titles is None:
        return [""] * n_panels
    if isinstance(titles, str):
        return [titles] * n_panels
    titles = [str(t) for t in titles]
    if len(titles) < n_panels:
        titles += [""] * (n_panels - len(titles))
    return titles[:n_panels]


def fillmaps(
    layer: Layer,
    titles: Union[str, Sequence[str], None],
    table,
    n_col: int,
    strategy: Union[str, BreakStrategy] = BreakStrategy.EQUAL,
    user_cuts: Optional[Sequence[float]] = None,
    legend_labels=AUTO,
    shared_legend: bool = False,
    panel_axis: int = 1,
    layout_matrix=None,
    widths: Optional[Sequence[float]] = None,
    heights: Optional[Sequence[float]] = None,
    style: Optional[MapStyle] = None,
    stop_on_mismatch: bool = False,
    fig: Optional[Figure] = None,
) -> PanelsResult:
    """Draw one grayscale choropleth per column of ``table``.

    With ``shared_legend`` the breaks come from the whole table, every panel
    uses the same classes and a single legend is drawn in the layout cell
    after the last panel. Otherwise each panel is classed on its own values
    and carries its own legend.

    Mismatched cuts or legend labels are reported per panel. By default the
    remaining panels are still drawn; ``stop_on_mismatch`` marks them skipped
    instead.
    """
    style = style or get_default_parameters().map_style
    data = np.asarray(table, dtype=float)

    if data.ndim > 2:
        msg = f"Cannot handle values of dim > 2 (got shape {data.shape})"
        logger.error(msg)
        return PanelsResult(figure=None, status=PanelsStatus.DIMENSION_ERROR, message=msg)

    columns = split_panels(layer, data, panel_axis)
    n_panels = len(columns)
    panel_titles = _panel_titles(titles, n_panels)

    if layout_matrix is None:
        layout_matrix = default_layout(n_panels, extra_cell=shared_legend)
    needed = n_panels + (1 if shared_legend else 0)
    if panel_count(layout_matrix) < needed:
        raise ValueError(
            f"Layout defines {panel_count(layout_matrix)} cells, {needed} needed"
        )

    if fig is None:
        nrows, ncols = np.atleast_2d(np.asarray(layout_matrix)).shape
        w, h = style.figure_size
        fig = plt.figure(figsize=(w * ncols / max(nrows, 1), h))
    axes = build_layout(fig, layout_matrix, widths, heights)
    for ax in axes[n_panels:]:
        ax.set_axis_off()

    result = PanelsResult(figure=fig)
    if shared_legend:
        try:
            result.shared_edges = compute_breaks(data, n_col, strategy, user_cuts)
        except LengthMismatchError as exc:
            logger.warning("Shared breaks: %s", exc)
            for i, ax in enumerate(axes[:n_panels]):
                ax.set_axis_off()
                result.panels.append(PanelResult(
                    index=i, title=panel_titles[i], status=PanelStatus.CUTS_MISMATCH,
                    message=str(exc), ax=ax,
                ))
            result.status = PanelsStatus.DEGRADED
            result.message = str(exc)
            return result

    stopped = False
    for i, (ax, values, title) in enumerate(zip(axes, columns, panel_titles)):
        if stopped:
            ax.set_axis_off()
            result.panels.append(PanelResult(
                index=i, title=title, status=PanelStatus.SKIPPED, ax=ax,
            ))
            continue

        if shared_legend:
            edges = result.shared_edges
        else:
            try:
                edges = compute_breaks(values, n_col, strategy, user_cuts)
            except LengthMismatchError as exc:
                logger.warning("Panel %d (%s): %s", i, title, exc)
                ax.set_axis_off()
                result.panels.append(PanelResult(
                    index=i, title=title, status=PanelStatus.CUTS_MISMATCH,
                    message=str(exc), ax=ax,
                ))
                stopped = stop_on_mismatch
                continue

        panel = render_panel(
            ax, layer, title, values, edges, style,
            legend_labels=legend_labels,
            with_legend=not shared_legend,
            index=i,
        )
        result.panels.append(panel)
        if not panel.ok and stop_on_mismatch:
            stopped = True

    if shared_legend:
        result.legend_status = _draw_shared_legend(
            axes[n_panels], result.shared_edges, n_col, legend_labels, style
        )

    failed = [p for p in result.panels if not p.ok]
    if failed or result.legend_status is PanelStatus.LEGEND_MISMATCH:
        result.status = PanelsStatus.DEGRADED
        logger.info("%d of %d panels not fully rendered", len(failed), n_panels)
    return result


def _draw_shared_legend(ax, edges, n_col: int, legend_labels, style: MapStyle) -> PanelStatus:
    try:
        labels = format_labels(edges, n_col, legend_labels)
    except LengthMismatchError as exc:
        logger.warning("Shared legend: %s", exc)
        return PanelStatus.LEGEND_MISMATCH
    if labels is None:
        return PanelStatus.NO_LEGEND
    palette = gray_shades(n_col)
    draw_legend(ax, labels, legend_fills(palette, legend_labels), style)
    return PanelStatus.OK
