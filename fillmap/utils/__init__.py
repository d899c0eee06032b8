"""Shared helpers."""

from .geo_utils import as_geoseries, require_unit_values, unit_count

__all__ = ['as_geoseries', 'require_unit_values', 'unit_count']
