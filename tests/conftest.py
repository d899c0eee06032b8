import matplotlib

matplotlib.use("Agg")

import geopandas as gpd  # noqa: E402
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402
from shapely.geometry import box  # noqa: E402


def make_grid(nrows: int, ncols: int) -> gpd.GeoDataFrame:
    """Unit squares laid out row by row."""
    cells = [box(c, r, c + 1, r + 1) for r in range(nrows) for c in range(ncols)]
    return gpd.GeoDataFrame({"unit": np.arange(len(cells))}, geometry=cells)


@pytest.fixture
def grid_layer() -> gpd.GeoDataFrame:
    return make_grid(3, 4)


@pytest.fixture
def line_layer() -> gpd.GeoDataFrame:
    return make_grid(1, 4)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
