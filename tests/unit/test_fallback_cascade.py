# ============================================================================
# FILE: tests/unit/test_fallback_cascade.py
# ============================================================================
"""
Unit tests for the fallback cascade finders
"""

from lab_ingestion.processors.lab import CASCADE, CascadeContext, run_cascade
from lab_ingestion.processors.lab.fallback_cascade import (
    combined_with_next,
    following_lines,
    range_only_next,
)

from conftest import layout_line


def _context(lines, index, key, matcher, validator):
    line = lines[index]
    name_end = matcher.name_end_x(key, line)
    return CascadeContext(
        lines=lines,
        index=index,
        key=key,
        value_words=[w for w in line.words if w.x1 > name_end],
        matcher=matcher,
        validator=validator,
    )


def test_cascade_order():
    """Test finders run in priority order"""
    assert [finder.__name__ for finder in CASCADE] == [
        "matched_line",
        "same_row_band",
        "following_lines",
        "previous_line",
        "combined_with_next",
        "range_only_next",
    ]


def test_value_on_matched_line(matcher, validator):
    """Test value right of the name on the same line"""
    lines = [layout_line("Тестостерон общий 24.67 нмоль/л 8.33-30.19", 100)]
    ctx = _context(lines, 0, "testosterone", matcher, validator)

    assert run_cascade(ctx) == ("matched_line", 24.67)


def test_value_on_split_row(matcher, validator):
    """Test name-only line followed by a value-only line within tolerance"""
    lines = [
        layout_line("Холестерин общий", 100),
        layout_line("5.2", 130, x=400),
    ]
    ctx = _context(lines, 0, "cholesterol", matcher, validator)

    assert run_cascade(ctx) == ("same_row_band", 5.2)


def test_same_row_band_nearest_first(matcher, validator):
    """Test the closest line in the row band wins"""
    lines = [
        layout_line("5.0", 60, x=400),
        layout_line("Глюкоза", 100),
        layout_line("5.5", 120, x=400),
    ]
    ctx = _context(lines, 1, "glucose", matcher, validator)

    assert run_cascade(ctx) == ("same_row_band", 5.5)


def test_out_of_range_value_continues_cascade(matcher, validator):
    """Test a rejected value does not stop the search"""
    lines = [
        layout_line("Тестостерон общий 150", 100),
        layout_line("24.67", 130, x=400),
    ]
    ctx = _context(lines, 0, "testosterone", matcher, validator)

    assert run_cascade(ctx) == ("same_row_band", 24.67)


def test_reference_range_line_never_accepted(matcher, validator):
    """Test an adjacent pure range is skipped and the next source is tried"""
    lines = [
        layout_line("Глюкоза", 100),
        layout_line("3.4-6.3", 125, x=400),
        layout_line("5.5", 300, x=400),
    ]
    ctx = _context(lines, 0, "glucose", matcher, validator)

    assert run_cascade(ctx) == ("following_lines", 5.5)


def test_split_reference_range_line_never_accepted(matcher, validator):
    """Test a range OCR'd as three tokens is skipped as well"""
    lines = [
        layout_line("Глюкоза", 100),
        layout_line("3.4 - 6.3", 125, x=400),
        layout_line("5.5", 300, x=400),
    ]
    ctx = _context(lines, 0, "glucose", matcher, validator)

    assert run_cascade(ctx) == ("following_lines", 5.5)


def test_only_reference_range_gives_nothing(matcher, validator):
    """Test a name whose only neighbour is its reference range stays unresolved"""
    lines = [
        layout_line("Глюкоза", 100),
        layout_line("3.4-6.3", 125, x=400),
    ]
    ctx = _context(lines, 0, "glucose", matcher, validator)

    assert run_cascade(ctx) is None


def test_following_lines_lookahead_limit(matcher, validator):
    """Test only the next few lines are searched"""
    lines = [
        layout_line("Тестостерон общий", 100),
        layout_line("Комментарий лаборатории", 200),
        layout_line("Примечание", 300),
        layout_line("Подпись врача", 400),
        layout_line("24.67", 500, x=400),
    ]
    ctx = _context(lines, 0, "testosterone", matcher, validator)

    assert following_lines(ctx) is None
    assert run_cascade(ctx) is None


def test_value_on_previous_line(matcher, validator):
    """Test short value fragment above the name"""
    lines = [
        layout_line("24.67", 100, x=400),
        layout_line("Тестостерон общий", 200),
    ]
    ctx = _context(lines, 1, "testosterone", matcher, validator)

    assert run_cascade(ctx) == ("previous_line", 24.67)


def test_other_fields_rows_are_not_stolen(matcher, validator):
    """Test a neighbour naming a different field is never a candidate"""
    lines = [
        layout_line("Холестерин общий", 100),
        layout_line("Глюкоза 5.5", 130),
    ]
    ctx = _context(lines, 0, "cholesterol", matcher, validator)

    assert run_cascade(ctx) is None


def test_combined_with_next(matcher, validator):
    """Test matched line joined with a close continuation line"""
    close = [layout_line("Глюкоза", 100), layout_line("5.5", 120, x=400)]
    far = [layout_line("Глюкоза", 100), layout_line("5.5", 200, x=400)]

    assert combined_with_next(_context(close, 0, "glucose", matcher, validator)) == 5.5
    assert combined_with_next(_context(far, 0, "glucose", matcher, validator)) is None


def test_range_only_next(matcher, validator):
    """Test a line holding only the range takes the value from the next line"""
    with_range = [layout_line("Глюкоза 3.9-6.1", 100), layout_line("5.5", 130, x=400)]
    without_range = [layout_line("Глюкоза", 100), layout_line("5.5", 130, x=400)]

    assert range_only_next(_context(with_range, 0, "glucose", matcher, validator)) == 5.5
    assert range_only_next(_context(without_range, 0, "glucose", matcher, validator)) is None


def test_custom_finders(matcher, validator):
    """Test run_cascade with a reduced finder list"""
    lines = [layout_line("Глюкоза", 100), layout_line("5.5", 130, x=400)]
    ctx = _context(lines, 0, "glucose", matcher, validator)

    assert run_cascade(ctx, finders=(range_only_next,)) is None
    assert run_cascade(ctx, finders=(following_lines,)) == ("following_lines", 5.5)
