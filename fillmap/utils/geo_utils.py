"""Geospatial helper functions with explicit validation."""
from typing import Union

import geopandas as gpd
import numpy as np

Layer = Union[gpd.GeoDataFrame, gpd.GeoSeries]


def as_geoseries(layer: Layer) -> gpd.GeoSeries:
    """Return the polygon geometries of a layer."""
    if isinstance(layer, gpd.GeoDataFrame):
        return layer.geometry
    if isinstance(layer, gpd.GeoSeries):
        return layer
    raise TypeError(
        f"Expected a GeoDataFrame or GeoSeries, got {type(layer).__name__}"
    )


def unit_count(layer: Layer) -> int:
    """Number of geographic units (rows) in the layer."""
    return len(as_geoseries(layer))


def require_unit_values(layer: Layer, values, context: str = "values") -> np.ndarray:
    """Return ``values`` as a 1-D float array with one entry per unit."""
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.ravel()
    if arr.ndim != 1:
        raise ValueError(f"{context} must be one-dimensional, got shape {arr.shape}")
    n_units = unit_count(layer)
    if arr.size != n_units:
        raise ValueError(
            f"{context} has {arr.size} entries but the layer has {n_units} units"
        )
    return arr
