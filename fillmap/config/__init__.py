"""Configuration: paths, logging and default parameters."""

from .logging_config import setup_logging
from .parameters import (
    AssessmentConfig,
    ContinuousMapConfig,
    MapStyle,
    Parameters,
    get_default_parameters,
)

__all__ = [
    'setup_logging',
    'AssessmentConfig',
    'ContinuousMapConfig',
    'MapStyle',
    'Parameters',
    'get_default_parameters',
]
