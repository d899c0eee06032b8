"""Value classification: breaks, shading and legend labels."""

from .breaks import BreakStrategy, LengthMismatchError, compute_breaks
from .legend import (
    AUTO,
    NO_LEGEND,
    LegendPlacement,
    format_labels,
    format_number,
    legend_fills,
    resolve_legend_location,
)
from .shading import (
    ContinuousShading,
    assign_colors,
    assign_continuous_colors,
    bin_index,
    gray_shades,
)

__all__ = [
    'BreakStrategy',
    'LengthMismatchError',
    'compute_breaks',
    'AUTO',
    'NO_LEGEND',
    'LegendPlacement',
    'format_labels',
    'format_number',
    'legend_fills',
    'resolve_legend_location',
    'ContinuousShading',
    'assign_colors',
    'assign_continuous_colors',
    'bin_index',
    'gray_shades',
]
