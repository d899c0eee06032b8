"""Choropleth helpers for disease mapping.

- ``fillmap``: single grayscale choropleth with a class legend
- ``fillmaps``: several panels, each with its own legend or one shared legend
- ``fillmap_continuous``: continuous color ramp with a color-bar legend
- ``assessmap``: compare a covariate across groups of a spatial random effect
"""

from .classification import AUTO, NO_LEGEND, LengthMismatchError, compute_breaks
from .inference import assessmap, group_random_effect, write_graph_file
from .visualization import fillmap, fillmap_continuous, fillmaps

__version__ = "0.1.0"

__all__ = [
    'AUTO',
    'NO_LEGEND',
    'LengthMismatchError',
    'compute_breaks',
    'assessmap',
    'group_random_effect',
    'write_graph_file',
    'fillmap',
    'fillmap_continuous',
    'fillmaps',
]
