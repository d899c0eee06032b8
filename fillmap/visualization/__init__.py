"""Choropleth rendering."""

from .choropleth import PanelResult, PanelStatus, draw_legend, fillmap
from .continuous import ContinuousMapResult, fillmap_continuous
from .layout import build_layout, default_layout
from .panels import PanelsResult, PanelsStatus, fillmaps, split_panels

__all__ = [
    'PanelResult',
    'PanelStatus',
    'draw_legend',
    'fillmap',
    'ContinuousMapResult',
    'fillmap_continuous',
    'build_layout',
    'default_layout',
    'PanelsResult',
    'PanelsStatus',
    'fillmaps',
    'split_panels',
]
