"""Single map with a continuous color ramp and a color-bar style legend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..classification.legend import format_number
from ..classification.shading import ContinuousShading, assign_continuous_colors
from ..config.parameters import ContinuousMapConfig, MapStyle, get_default_parameters
from ..utils.geo_utils import Layer, require_unit_values
from .choropleth import draw_polygons, draw_title
from .layout import build_layout

logger = logging.getLogger(__name__)

LEGEND_BESIDE = "beside"
LEGEND_BELOW = "below"


@dataclass
class ContinuousMapResult:
    figure: Figure
    map_ax: Axes
    legend_ax: Axes
    shading: ContinuousShading
    legend_loc: str


def _draw_ramp(ax: Axes, shading: ContinuousShading, vertical: bool, fontsize: float) -> None:
    """Paint the ramp as an image and label the sampled positions."""
    n_steps = len(shading.ramp)
    cmap = mcolors.ListedColormap(shading.ramp)
    steps = np.arange(n_steps)
    labels = [format_number(v) for v in shading.sample_labels]
    n_samples = len(labels)

    if vertical:
        # Lowest value at the top of the bar
        ax.imshow(steps.reshape(-1, 1), cmap=cmap, aspect="auto",
                  origin="upper", extent=(0, 1, 0, 1), interpolation="nearest")
        ys = np.linspace(0, 1, n_samples)
        for y, label in zip(ys, labels[::-1]):
            ax.text(1.6, y, label, ha="center", va="center", fontsize=fontsize)
        ax.set_xlim(0, 2)
    else:
        ax.imshow(steps.reshape(1, -1), cmap=cmap, aspect="auto",
                  origin="upper", extent=(0, 2, 0, 1), interpolation="nearest")
        xs = np.linspace(0, 2, n_samples)
        for x, label in zip(xs, labels):
            ax.text(x, -0.25, label, ha="center", va="center", fontsize=fontsize)
        ax.set_ylim(-0.5, 1)
    ax.set_axis_off()


def fillmap_continuous(
    layer: Layer,
    title: str,
    values,
    legend_loc: Optional[str] = None,
    scale_values=None,
    style: Optional[MapStyle] = None,
    config: Optional[ContinuousMapConfig] = None,
    legend_round: Optional[int] = None,
    legend_scale: Optional[float] = None,
    cmap: Optional[str] = None,
    fig: Optional[Figure] = None,
) -> ContinuousMapResult:
    """Draw a map colored along a continuous ramp.

    Args:
        layer: Polygons, one row per unit.
        title: Map title.
        values: One value per unit.
        legend_loc: ``beside`` (vertical bar right of the map) or ``below``
            (horizontal bar under it).
        scale_values: Extra values folded into the ramp so several maps can
            share one color scale.
        style: Line style and title font settings.
        config: Ramp, legend sampling and cell proportions.
        legend_round: Decimals in the legend labels.
        legend_scale: Legend font size relative to the base font.
        cmap: Matplotlib colormap name for the ramp.
        fig: Target figure; a new one is created when omitted.
    """
    params = get_default_parameters()
    style = style or params.map_style
    config = config or params.continuous
    legend_loc = legend_loc or config.legend_loc
    legend_round = config.legend_round if legend_round is None else legend_round
    legend_scale = config.legend_scale if legend_scale is None else legend_scale
    cmap = cmap or config.cmap

    vals = require_unit_values(layer, values)
    shading = assign_continuous_colors(
        vals,
        scale_values=scale_values,
        cmap=cmap,
        n_samples=config.n_samples,
        legend_round=legend_round,
    )

    if fig is None:
        fig = plt.figure(figsize=style.figure_size)

    if legend_loc == LEGEND_BESIDE:
        map_ax, legend_ax = build_layout(fig, [[1, 2]], widths=config.beside_widths)
    else:
        if legend_loc != LEGEND_BELOW:
            logger.warning(
                "Legend location options are 'below' or 'beside', got %r; drawing below",
                legend_loc,
            )
            legend_loc = LEGEND_BELOW
        map_ax, legend_ax = build_layout(fig, [[1], [2]], heights=config.below_heights)

    draw_polygons(map_ax, layer, shading.colors, style)
    draw_title(map_ax, title, style.title_scale, config.title_line)

    fontsize = float(plt.rcParams["font.size"]) * legend_scale
    _draw_ramp(legend_ax, shading, vertical=legend_loc == LEGEND_BESIDE, fontsize=fontsize)

    logger.debug("Continuous map '%s': %d ramp steps", title, len(shading.ramp))
    return ContinuousMapResult(
        figure=fig,
        map_ax=map_ax,
        legend_ax=legend_ax,
        shading=shading,
        legend_loc=legend_loc,
    )
