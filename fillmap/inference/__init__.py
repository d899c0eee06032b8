"""Secondary assessment of spatial random effects."""

from .assessment import GroupingResult, assessmap, group_random_effect, rank_groups
from .graph import adjacency_from_layer, load_graph, read_graph_file, write_graph_file
from .spatial_regression import (
    BYMRegression,
    RegressionFit,
    SpatialRegressionEngine,
    besag_covariance,
)

__all__ = [
    'GroupingResult',
    'assessmap',
    'group_random_effect',
    'rank_groups',
    'adjacency_from_layer',
    'load_graph',
    'read_graph_file',
    'write_graph_file',
    'BYMRegression',
    'RegressionFit',
    'SpatialRegressionEngine',
    'besag_covariance',
]
