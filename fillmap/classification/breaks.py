"""Break computation for choropleth classes.

Turns a value vector (or a table of panels) into ``n_col + 1`` bin edges
using one of three policies:

- equal: evenly spaced between the minimum and the maximum
- quantile: empirical quantiles at ``i / n_col``
- user: caller supplied cut points
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

EQUAL_DECIMALS = 6
QUANTILE_DECIMALS = 2


class LengthMismatchError(ValueError):
    """A caller supplied sequence does not have the length the bins need."""

    def __init__(self, message: str, expected: int, actual: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class BreakStrategy(Enum):
    EQUAL = "equal"
    QUANTILE = "quantile"
    USER = "user"

    @classmethod
    def parse(cls, value: Union[str, "BreakStrategy"]) -> "BreakStrategy":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(
            f"Unknown break strategy {value!r}; expected one of "
            f"{sorted(_ALIASES)}"
        )


_ALIASES = {
    "e": BreakStrategy.EQUAL,
    "equal": BreakStrategy.EQUAL,
    "q": BreakStrategy.QUANTILE,
    "quantile": BreakStrategy.QUANTILE,
    "c": BreakStrategy.USER,
    "user": BreakStrategy.USER,
    "custom": BreakStrategy.USER,
}


def _as_finite_values(values) -> np.ndarray:
    arr = np.asarray(values, dtype=float).ravel()
    if arr.size == 0:
        raise ValueError("Cannot compute breaks for an empty value array")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Values must be finite; drop or impute NaN/inf first")
    return arr


def compute_breaks(
    values,
    n_col: int,
    strategy: Union[str, BreakStrategy] = BreakStrategy.EQUAL,
    user_cuts: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """Compute the ``n_col + 1`` bin edges for ``values``.

    Args:
        values: Vector or 2-D table. Tables are flattened, which is how a
            shared legend takes its edges from every panel at once.
        n_col: Number of classes.
        strategy: ``equal``, ``quantile`` or ``user`` (``e``/``q``/``c`` also
            accepted).
        user_cuts: Edges used verbatim for the ``user`` strategy.

    Returns:
        Monotonically non-decreasing array of ``n_col + 1`` edges.

    Raises:
        LengthMismatchError: ``user_cuts`` does not hold ``n_col + 1`` edges.
        ValueError: Invalid ``n_col``, strategy or values.
    """
    n_col = int(n_col)
    if n_col < 1:
        raise ValueError(f"n_col must be >= 1, got {n_col}")

    strategy = BreakStrategy.parse(strategy)

    if strategy is BreakStrategy.USER:
        if user_cuts is None:
            raise ValueError("user_cuts are required for the 'user' strategy")
        cuts = np.asarray(user_cuts, dtype=float).ravel()
        if cuts.size != n_col + 1:
            raise LengthMismatchError(
                f"Cut off and color categories do not match: got {cuts.size} "
                f"cuts for {n_col} classes (need {n_col + 1})",
                expected=n_col + 1,
                actual=int(cuts.size),
            )
        return cuts

    arr = _as_finite_values(values)

    if strategy is BreakStrategy.EQUAL:
        edges = np.linspace(arr.min(), arr.max(), n_col + 1)
        return np.round(edges, EQUAL_DECIMALS)

    probs = np.linspace(0.0, 1.0, n_col + 1)
    edges = np.round(np.quantile(arr, probs), QUANTILE_DECIMALS)
    if np.unique(edges).size < edges.size:
        logger.debug("Quantile breaks contain ties: %s", edges)
    return edges
