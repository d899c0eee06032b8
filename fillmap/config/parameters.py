"""Default rendering and assessment parameters.

Defaults follow the classic disease-mapping figure conventions (grayscale
choropleth, legend in the bottom right corner, title drawn inside the map).
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml

from .paths import DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)


@dataclass
class MapStyle:
    title_scale: float = 1.5  # multiplier on the base font size
    title_line: float = -2.0  # text lines above the map; negative is inside
    legend_scale: float = 1.5
    legend_loc: Union[str, Tuple[float, float]] = "bottomright"
    legend_horizontal: bool = False
    line_style: str = "-"
    line_width: float = 0.5
    edge_color: str = "black"
    figure_size: Tuple[float, float] = (8.0, 8.0)


@dataclass
class ContinuousMapConfig:
    cmap: str = "viridis_r"
    legend_loc: str = "beside"
    legend_round: int = 0
    legend_scale: float = 1.0
    n_samples: int = 5
    title_line: float = 0.0
    beside_widths: Tuple[float, float] = (0.8, 0.2)
    below_heights: Tuple[float, float] = (0.6, 0.4)


@dataclass
class AssessmentConfig:
    strategy: str = "quartile"
    contiguity: str = "rook"
    intercept_precision: float = 1.0
    fixed_precision: float = 1.0
    iid_prior: Tuple[float, float] = (2.0, 1.0)  # log-gamma shape, rate
    besag_prior: Tuple[float, float] = (2.0, 1.0)
    noise_prior: Tuple[float, float] = (1.0, 5e-5)
    scale_model: bool = True
    credible_level: float = 0.95
    max_iter: int = 500


@dataclass
class Parameters:
    map_style: MapStyle = field(default_factory=MapStyle)
    continuous: ContinuousMapConfig = field(default_factory=ContinuousMapConfig)
    assessment: AssessmentConfig = field(default_factory=AssessmentConfig)


def _pair(value, default: Tuple[float, float]) -> Tuple[float, float]:
    if value is None:
        return default
    first, second = value
    return (float(first), float(second))


def get_default_parameters(config_path: Optional[Path] = None) -> Parameters:
    """Return a Parameters instance, loading from config/fillmap.yaml if available."""
    params = Parameters()

    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_FILE
    if not config_path.exists():
        return params

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not data:
            return params

        if "map_style" in data:
            s = data["map_style"]
            d = params.map_style
            loc = s.get("legend_loc", d.legend_loc)
            params.map_style = MapStyle(
                title_scale=s.get("title_scale", d.title_scale),
                title_line=s.get("title_line", d.title_line),
                legend_scale=s.get("legend_scale", d.legend_scale),
                legend_loc=loc if isinstance(loc, str) else _pair(loc, d.legend_loc),
                legend_horizontal=s.get("legend_horizontal", d.legend_horizontal),
                line_style=s.get("line_style", d.line_style),
                line_width=s.get("line_width", d.line_width),
                edge_color=s.get("edge_color", d.edge_color),
                figure_size=_pair(s.get("figure_size"), d.figure_size),
            )

        if "continuous" in data:
            c = data["continuous"]
            d = params.continuous
            params.continuous = ContinuousMapConfig(
                cmap=c.get("cmap", d.cmap),
                legend_loc=c.get("legend_loc", d.legend_loc),
                legend_round=c.get("legend_round", d.legend_round),
                legend_scale=c.get("legend_scale", d.legend_scale),
                n_samples=c.get("n_samples", d.n_samples),
                title_line=c.get("title_line", d.title_line),
                beside_widths=_pair(c.get("beside_widths"), d.beside_widths),
                below_heights=_pair(c.get("below_heights"), d.below_heights),
            )

        if "assessment" in data:
            a = data["assessment"]
            d = params.assessment
            params.assessment = AssessmentConfig(
                strategy=a.get("strategy", d.strategy),
                contiguity=a.get("contiguity", d.contiguity),
                intercept_precision=a.get("intercept_precision", d.intercept_precision),
                fixed_precision=a.get("fixed_precision", d.fixed_precision),
                iid_prior=_pair(a.get("iid_prior"), d.iid_prior),
                besag_prior=_pair(a.get("besag_prior"), d.besag_prior),
                noise_prior=_pair(a.get("noise_prior"), d.noise_prior),
                scale_model=a.get("scale_model", d.scale_model),
                credible_level=a.get("credible_level", d.credible_level),
                max_iter=a.get("max_iter", d.max_iter),
            )

    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        # Keep defaults, a broken config file should not stop plotting
        logger.warning("Failed to load config from %s: %s", config_path, e)
        return Parameters()

    return params
