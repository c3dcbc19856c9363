"""Unit tests for core/styles.py"""

import pytest

from mdteach.core.styles import (
    CODE_STYLE, FAMILY_COURIER, FAMILY_HELVETICA, FAMILY_TIMES, QUOTE_STYLE_BASE,
    STYLE_BOLD, STYLE_ITALIC, TEXT_STYLE_BASE, TOTAL_STYLES, StyleRun, StyleRuns,
    build_style_table, style_index,
)


def test_table_layout_constants():
    """Headings, code, body and quote groups are laid out in that order."""
    assert (CODE_STYLE, TEXT_STYLE_BASE, QUOTE_STYLE_BASE, TOTAL_STYLES) == (24, 25, 29, 33)


@pytest.mark.parametrize("kwargs,expected", [
    ({}, 25),
    ({"emphasis": True}, 26),
    ({"strong": True}, 27),
    ({"emphasis": True, "strong": True}, 28),
    ({"heading_level": 1}, 0),
    ({"heading_level": 2, "strong": True}, 6),
    ({"heading_level": 6, "emphasis": True, "strong": True}, 23),
    ({"quote": True, "emphasis": True}, 30),
    ({"code": True, "strong": True}, 24),
])
def test_style_index(kwargs, expected):
    """Style index is (group base + format) with em=1 and strong=2."""
    assert style_index(**kwargs) == expected


def test_style_precedence():
    """Code beats heading, heading beats quote."""
    assert style_index(heading_level=3, quote=True, code=True) == CODE_STYLE
    assert style_index(heading_level=3, quote=True) == 8


def test_build_style_table_defaults():
    """The default table has 33 entries with the expected fonts and sizes."""
    table = build_style_table()
    assert len(table) == TOTAL_STYLES
    assert [table[i * 4].size for i in range(6)] == [36, 30, 27, 24, 20, 18]
    assert {s.family for s in table[:24]} == {FAMILY_HELVETICA}
    assert table[CODE_STYLE].family == FAMILY_COURIER
    assert table[TEXT_STYLE_BASE].family == FAMILY_HELVETICA
    assert table[QUOTE_STYLE_BASE].family == FAMILY_TIMES
    assert table[TEXT_STYLE_BASE + 1].style == STYLE_ITALIC
    assert table[TEXT_STYLE_BASE + 2].style == STYLE_BOLD
    assert table[TEXT_STYLE_BASE + 3].style == STYLE_BOLD | STYLE_ITALIC


def test_build_style_table_custom_sizes():
    """Custom sizes flow into heading, body and code entries."""
    table = build_style_table((40, 32, 28, 24, 20, 16), text_size=14, code_size=10)
    assert table[4].size == 32
    assert table[CODE_STYLE].size == 10
    assert table[QUOTE_STYLE_BASE + 3].size == 14


def test_build_style_table_needs_six_sizes():
    """Exactly six heading sizes are required."""
    with pytest.raises(ValueError, match="heading sizes"):
        build_style_table((36, 30))


def test_style_runs_merge_neighbours():
    """Adjacent additions with the same style merge into one run."""
    runs = StyleRuns()
    runs.add(3, 25)
    runs.add(2, 25)
    runs.add(0, 26)
    runs.add(4, 26)
    runs.add(1, 25)
    assert runs.as_list() == [StyleRun(5, 25), StyleRun(4, 26), StyleRun(1, 25)]
    assert runs.total == 10
    assert len(runs) == 3


def test_style_runs_reject_bad_index():
    """Style indices must fall inside the table."""
    with pytest.raises(ValueError):
        StyleRuns().add(1, TOTAL_STYLES)
