import numpy as np
import pytest

from fillmap.classification.breaks import LengthMismatchError
from fillmap.classification.legend import (
    AUTO,
    NO_LEGEND,
    format_labels,
    format_number,
    legend_fills,
    resolve_legend_location,
)


def test_auto_labels_highest_bin_first() -> None:
    labels = format_labels([1, 2.75, 4.5, 6.25, 8], 4)
    assert labels == ["[6.25,8]", "[4.5,6.25)", "[2.75,4.5)", "[1,2.75)"]


@pytest.mark.parametrize("n_col", [1, 2, 3, 7])
def test_auto_label_count_matches_classes(n_col) -> None:
    edges = np.linspace(0, 1, n_col + 1)
    assert len(format_labels(edges, n_col, AUTO)) == n_col


def test_empty_string_means_auto() -> None:
    assert format_labels([0, 1, 2], 2, "") == format_labels([0, 1, 2], 2, AUTO)
    assert format_labels([0, 1, 2], 2, [""]) == ["[1,2]", "[0,1)"]


def test_labels_rounded_to_two_decimals() -> None:
    labels = format_labels([0.0, 0.333333, 0.666667, 1.0], 3)
    assert labels[-1] == "[0,0.33)"
    assert labels[0] == "[0.67,1]"


@pytest.mark.parametrize("marker", [NO_LEGEND, None, float("nan"), [np.nan]])
def test_no_legend_markers(marker) -> None:
    assert format_labels([0, 1, 2], 2, marker) is None


def test_explicit_labels_used_verbatim() -> None:
    assert format_labels([0, 1, 2, 3], 3, ["low", "middle", "high"]) == ["low", "middle", "high"]


def test_explicit_label_count_mismatch() -> None:
    with pytest.raises(LengthMismatchError):
        format_labels([0, 1, 2, 3], 3, ["low", "high"])


def test_format_number() -> None:
    assert format_number(1.0) == "1"
    assert format_number(2.75) == "2.75"
    assert format_number(-0.0) == "0"
    assert format_number(1234567.89) == "1234567.89"
    assert format_number(12345678.0) == "12345678"


def test_large_edges_keep_all_digits() -> None:
    labels = format_labels([0, 123456.78, 12345678.0], 2)
    assert labels == ["[123456.78,12345678]", "[0,123456.78)"]


def test_array_with_empty_first_entry_means_auto() -> None:
    labels = np.array(["", "", ""])
    assert format_labels([0, 1, 2, 3], 3, labels) == format_labels([0, 1, 2, 3], 3, AUTO)
    assert legend_fills(["#ffffff", "#000000"], np.array(["", ""])) == ["#000000", "#ffffff"]


def test_legend_fills_follow_label_order() -> None:
    palette = ["#ffffff", "#808080", "#000000"]
    assert legend_fills(palette) == palette[::-1]
    assert legend_fills(palette, ["a", "b", "c"]) == palette


def test_resolve_keyword_locations() -> None:
    assert resolve_legend_location("bottomright").loc == "lower right"
    assert resolve_legend_location("top").loc == "upper center"
    assert resolve_legend_location("upper left").loc == "upper left"


def test_resolve_coordinate_location() -> None:
    placement = resolve_legend_location((1.5, 2))
    assert placement.loc == "upper left"
    assert placement.anchor == (1.5, 2.0)


def test_resolve_unknown_location() -> None:
    with pytest.raises(ValueError):
        resolve_legend_location("somewhere")
