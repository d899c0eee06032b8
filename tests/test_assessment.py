import numpy as np
import pandas as pd
import pytest

from fillmap.inference.assessment import (
    TREND_LABEL,
    assessmap,
    group_random_effect,
    rank_groups,
)
from fillmap.inference.graph import adjacency_from_layer
from fillmap.inference.spatial_regression import RegressionFit


class RecordingEngine:
    """Returns a fixed summary so labels and shapes can be checked."""

    def __init__(self) -> None:
        self.design = None

    def fit(self, response, design, adjacency) -> RegressionFit:
        self.design = design
        k = design.shape[1]
        fixed = pd.DataFrame(
            {
                "mean": np.arange(k, dtype=float),
                "sd": np.ones(k),
                "0.025quant": np.arange(k) - 2.0,
                "0.975quant": np.arange(k) + 2.0,
            },
            index=list(design.columns),
        )
        return RegressionFit(fixed=fixed)


@pytest.fixture
def chain_graph() -> np.ndarray:
    n = 8
    adj = np.zeros((n, n))
    for i in range(n - 1):
        adj[i, i + 1] = adj[i + 1, i] = 1
    return adj


def test_median_split_on_four_values() -> None:
    result = group_random_effect([1, 2, 3, 4], v=[0, 0, 0, 0], strategy="median")
    np.testing.assert_array_equal(result.groups, [1, 1, 2, 2])
    assert result.strategy == "median"


def test_quartiles_of_eight() -> None:
    groups = rank_groups(np.array([8, 7, 6, 5, 4, 3, 2, 1], dtype=float), 4)
    np.testing.assert_array_equal(groups, [4, 4, 3, 3, 2, 2, 1, 1])


@pytest.mark.parametrize(
    "strategy, n_groups",
    [("med", 2), ("tert", 3), ("tertile", 3), ("quart", 4), ("quint", 5), ("quintile", 5)],
)
def test_group_counts(strategy, n_groups) -> None:
    result = group_random_effect(np.arange(30, dtype=float), strategy=strategy)
    assert sorted(set(result.groups)) == list(range(1, n_groups + 1))


def test_u_and_v_are_combined() -> None:
    result = group_random_effect([1, 2, 3, 4], v=[3, 2, 1, 0], strategy="median")
    np.testing.assert_array_equal(result.combined, [4, 4, 4, 4])


def test_trend_keeps_combined_effect() -> None:
    result = group_random_effect([0.5, -1.0], v=[0.5, 0.0], strategy="trend")
    assert result.trend
    np.testing.assert_array_equal(result.groups, [1.0, -1.0])


def test_user_groups_used_verbatim() -> None:
    result = group_random_effect([1, 2, 3], strategy="user", user_groups=[2, 1, 2])
    np.testing.assert_array_equal(result.groups, [2, 1, 2])
    assert not result.warnings


def test_user_groups_wrong_length_fall_back(caplog) -> None:
    result = group_random_effect(np.arange(8.0), strategy="user", user_groups=[1, 2])
    assert result.strategy == "quartile"
    assert result.warnings
    assert "Quartiles used instead" in caplog.text


def test_unknown_strategy_falls_back() -> None:
    result = group_random_effect(np.arange(8.0), strategy="deciles")
    assert result.strategy == "quartile"
    np.testing.assert_array_equal(result.groups, [1, 1, 2, 2, 3, 3, 4, 4])
    assert len(result.warnings) == 1


def test_mismatched_v_rejected() -> None:
    with pytest.raises(ValueError):
        group_random_effect([1, 2, 3], v=[1, 2])


def test_assessmap_labels_group_contrasts(chain_graph) -> None:
    engine = RecordingEngine()
    u = np.arange(8, dtype=float)
    table = assessmap(u, x=np.ones(8), strategy="quart", graph=chain_graph, engine=engine)

    assert list(table.index) == ["1 vs. 2", "1 vs. 3", "1 vs. 4"]
    assert list(table.columns) == ["mean", "0.025quant", "0.975quant"]
    assert list(engine.design.columns) == ["(Intercept)", "G2", "G3", "G4"]
    np.testing.assert_array_equal(engine.design["G2"], [0, 0, 1, 1, 0, 0, 0, 0])


def test_assessmap_trend_row(chain_graph) -> None:
    table = assessmap(np.arange(8.0), x=np.ones(8), strategy="trend",
                      graph=chain_graph, engine=RecordingEngine())
    assert list(table.index) == [TREND_LABEL]


def test_assessmap_requires_graph() -> None:
    with pytest.raises(ValueError):
        assessmap([1, 2], x=[1, 2])


def test_assessmap_x_length_checked(chain_graph) -> None:
    with pytest.raises(ValueError):
        assessmap(np.arange(8.0), x=np.ones(3), graph=chain_graph, engine=RecordingEngine())


def test_assessmap_single_level_rejected(chain_graph) -> None:
    with pytest.raises(ValueError, match="single level"):
        assessmap(np.arange(8.0), x=np.ones(8), strategy="user", user_groups=[1] * 8,
                  graph=chain_graph, engine=RecordingEngine())


def test_assessmap_detects_group_difference(grid_layer, tmp_path) -> None:
    from fillmap.inference.graph import write_graph_file

    rng = np.random.default_rng(3)
    n = len(grid_layer)
    u = rng.normal(size=n)
    high = u > np.sort(u)[n // 2 - 1]
    x = 2.0 * high + rng.normal(scale=0.1, size=n)
    graph_path = write_graph_file(adjacency_from_layer(grid_layer), tmp_path / "grid.graph")

    table = assessmap(u, x=x, strategy="median", graph=graph_path)

    assert list(table.index) == ["1 vs. 2"]
    row = table.loc["1 vs. 2"]
    assert row["0.025quant"] < row["mean"] < row["0.975quant"]
    assert row["mean"] > 0.5
