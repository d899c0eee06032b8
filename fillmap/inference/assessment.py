"""Secondary assessment of mapped spatial random effects.

The combined effect ``u + v`` is cut into ordered groups (or kept as a
continuous trend) and a covariate is regressed on those groups with iid and
spatially structured random effects. The resulting contrasts say whether the
covariate differs between low-effect and high-effect areas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..config.parameters import get_default_parameters
from .graph import GraphLike, load_graph
from .spatial_regression import BYMRegression, SpatialRegressionEngine

logger = logging.getLogger(__name__)

GROUP_COUNTS = {
    "median": 2,
    "tertile": 3,
    "quartile": 4,
    "quintile": 5,
}
STRATEGY_ALIASES = {
    "med": "median",
    "tert": "tertile",
    "quart": "quartile",
    "quint": "quintile",
}
TREND = "trend"
USER = "user"
FALLBACK = "quartile"
TREND_LABEL = "Testing the linear trend"


@dataclass
class GroupingResult:
    groups: np.ndarray  # integer labels, or the combined effect in trend mode
    combined: np.ndarray
    strategy: str  # strategy actually applied
    trend: bool = False
    warnings: List[str] = field(default_factory=list)


def rank_groups(combined: np.ndarray, n_groups: int) -> np.ndarray:
    """Ordered groups ``1..n_groups`` split at evenly spaced sorted positions.

    Cutoff ``k`` is the value at 1-based sorted position ``round(n * k / q)``;
    a value joins group ``k`` when it lies in ``(cutoff_k-1, cutoff_k]``.
    """
    combined = np.asarray(combined, dtype=float)
    n = combined.size
    ordered = np.sort(combined)
    positions = np.round(n * np.arange(1, n_groups) / n_groups).astype(int)
    positions = np.clip(positions, 1, n)
    cutoffs = ordered[positions - 1]
    return np.searchsorted(cutoffs, combined, side="left") + 1


def _normalize_strategy(strategy: str) -> str:
    key = str(strategy).strip().lower()
    return STRATEGY_ALIASES.get(key, key)


def group_random_effect(
    u,
    v=None,
    strategy: Optional[str] = None,
    user_groups: Optional[Sequence] = None,
) -> GroupingResult:
    """Group the combined random effect ``u + v``.

    Args:
        u: First random effect, one value per unit.
        v: Second random effect; zeros when omitted.
        strategy: ``median``, ``tertile``, ``quartile``, ``quintile``,
            ``trend`` or ``user`` (short forms ``med``/``tert``/``quart``/
            ``quint`` accepted).
        user_groups: Group labels used verbatim for ``user``.

    Unknown strategies and user groups of the wrong length fall back to
    quartiles with a logged warning.
    """
    u = np.asarray(u, dtype=float).ravel()
    if u.size == 0:
        raise ValueError("Random effect u is empty")
    if v is None:
        v = np.zeros_like(u)
    v = np.asarray(v, dtype=float).ravel()
    if v.shape != u.shape:
        raise ValueError(f"u and v must have the same length ({u.size} != {v.size})")

    combined = u + v
    if strategy is None:
        strategy = get_default_parameters().assessment.strategy
    key = _normalize_strategy(strategy)
    warnings: List[str] = []

    if key == TREND:
        return GroupingResult(groups=combined, combined=combined, strategy=TREND, trend=True)

    if key == USER:
        if user_groups is not None and len(user_groups) == u.size:
            return GroupingResult(groups=np.asarray(user_groups), combined=combined, strategy=USER)
        got = "none" if user_groups is None else len(user_groups)
        msg = f"Length of user groups ({got}) must match length of u ({u.size}). Quartiles used instead."
        logger.warning(msg)
        warnings.append(msg)
        key = FALLBACK
    elif key not in GROUP_COUNTS:
        msg = (
            f"Unknown grouping {strategy!r}; use 'median', 'tertile', 'quartile', "
            "'quintile', 'trend' or 'user'. Quartiles used instead."
        )
        logger.warning(msg)
        warnings.append(msg)
        key = FALLBACK

    groups = rank_groups(combined, GROUP_COUNTS[key])
    return GroupingResult(groups=groups, combined=combined, strategy=key, warnings=warnings)


def _group_design(grouping: GroupingResult) -> pd.DataFrame:
    n = grouping.combined.size
    if grouping.trend:
        return pd.DataFrame({"(Intercept)": np.ones(n), "G": grouping.groups})

    levels = pd.Index(pd.unique(grouping.groups)).sort_values()
    if levels.size < 2:
        raise ValueError("Grouping produced a single level; nothing to compare")
    codes = pd.Categorical(grouping.groups, categories=levels)
    dummies = pd.get_dummies(codes, dtype=float)
    dummies.columns = [f"G{lvl}" for lvl in levels]
    design = pd.concat([pd.Series(np.ones(n), name="(Intercept)"), dummies.iloc[:, 1:]], axis=1)
    return design


def assessmap(
    u,
    x,
    v=None,
    strategy: Optional[str] = None,
    user_groups: Optional[Sequence] = None,
    graph: Optional[GraphLike] = None,
    engine: Optional[SpatialRegressionEngine] = None,
) -> pd.DataFrame:
    """Compare a covariate across groups of the combined random effect.

    Fits ``x ~ 1 + group + iid + besag(graph)`` and returns the non-intercept
    fixed effects with their posterior mean and credible bounds. Rows are
    labeled ``"<reference> vs. <level>"``, or ``"Testing the linear trend"``
    for the ``trend`` strategy.

    Args:
        u: Random effect to assess (e.g. the structured effect of a fitted
            disease map).
        x: Risk factor, one value per unit.
        v: Second random effect added to ``u``.
        strategy: Grouping strategy, see :func:`group_random_effect`.
        user_groups: Labels for the ``user`` strategy.
        graph: Graph file path, adjacency matrix or libpysal weights.
        engine: Regression engine; :class:`BYMRegression` by default.
    """
    if graph is None:
        raise ValueError("A neighbor graph is required for the spatial effect")
    grouping = group_random_effect(u, v, strategy, user_groups)

    response = np.asarray(x, dtype=float).ravel()
    if response.size != grouping.combined.size:
        raise ValueError(
            f"x has {response.size} values but u has {grouping.combined.size}"
        )

    adjacency = load_graph(graph)
    design = _group_design(grouping)
    engine = engine or BYMRegression()
    fit = engine.fit(response, design, adjacency)

    result = fit.fixed.drop(index="(Intercept)")
    result = result[["mean"] + [c for c in result.columns if str(c).endswith("quant")]]
    if grouping.trend:
        result.index = [TREND_LABEL]
    else:
        levels = pd.Index(pd.unique(grouping.groups)).sort_values()
        result.index = [f"{levels[0]} vs. {lvl}" for lvl in levels[1:]]
    logger.info("Assessment (%s) over %d units:\n%s", grouping.strategy, response.size, result)
    return result
