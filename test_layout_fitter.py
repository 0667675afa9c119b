import pytest

from layout_fitter import ColumnFit, fit_columns, indicator_text, natural_width


HEADERS = [f"column_{i}" for i in range(8)]
ROWS = [["x" * (5 + 7 * i) for i in range(8)] for _ in range(3)]


@pytest.mark.parametrize("width", list(range(-5, 260, 3)))
def test_never_zero_columns_and_never_overflows(width):
    fit = fit_columns(HEADERS, ROWS, width)
    available = max(1, width)
    assert fit.display_cols >= 1
    assert len(fit.widths) == fit.display_cols
    assert sum(fit.widths) + fit.indicator_width <= available
    assert all(w >= 1 for w in fit.widths)


def test_zero_columns_gives_empty_fit():
    fit = fit_columns([], [], 100)
    assert fit == ColumnFit()
    assert fit.indicator_width == 0
    assert fit.hidden == 0


def test_natural_width_is_clamped():
    assert natural_width("a", ["b"]) == 6
    assert natural_width("name", ["Anthony"]) == 9
    assert natural_width("x", ["y" * 100]) == 40


def test_all_columns_fit_and_spare_goes_left_first():
    # naturals: 6 and 6, spare 11 -> 6 each plus one extra on the left
    fit = fit_columns(["a", "b"], [["1", "2"]], 23)
    assert fit.display_cols == 2
    assert fit.widths == [12, 11]
    assert fit.indicator_width == 0
    assert sum(fit.widths) == 23


def test_indicator_is_reserved_when_columns_remain():
    headers = ["c" * 30] * 4
    fit = fit_columns(headers, [], 80)
    # each column is 32 wide; two fit with room for "+2 more"
    assert fit.display_cols == 2
    assert fit.hidden == 2
    assert fit.indicator_width == len(indicator_text(2)) + 1
    assert sum(fit.widths) + fit.indicator_width == 80


def test_single_wide_column_is_shrunk_to_fit():
    fit = fit_columns(["h" * 60, "other"], [], 20)
    assert fit.display_cols == 1
    assert fit.indicator_width == len("+1 more") + 1
    assert fit.widths == [20 - fit.indicator_width]


def test_indicator_dropped_when_nothing_else_fits():
    fit = fit_columns(["wide_header", "b"], [], 3)
    assert fit.display_cols == 1
    assert fit.indicator_width == 0
    assert fit.widths == [3]


def test_deterministic():
    assert fit_columns(HEADERS, ROWS, 97) == fit_columns(HEADERS, ROWS, 97)
