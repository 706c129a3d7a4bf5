# ============================================================================
# FILE: tests/unit/test_plausibility.py
# ============================================================================
"""
Unit tests for the plausibility range gate
"""

import pytest

from lab_ingestion.constants import PLAUSIBILITY_RANGES, FIELD_PATTERNS
from lab_ingestion.validators import RangeValidator


def test_range_validator_init():
    """Test range validator uses the built-in table by default"""
    validator = RangeValidator()
    assert validator.ranges is PLAUSIBILITY_RANGES
    assert validator.range_for("testosterone") == (5.0, 50.0)


def test_check_valid_testosterone():
    """Test valid total testosterone value"""
    validator = RangeValidator()
    is_plausible, reason = validator.check("testosterone", 24.67)

    assert is_plausible is True
    assert reason is None


def test_check_implausible_high_testosterone():
    """Test a reference-range bound picked up as a value"""
    validator = RangeValidator()
    is_plausible, reason = validator.check("testosterone", 150.0)

    assert is_plausible is False
    assert "above plausible maximum" in reason


def test_check_implausible_low_glucose():
    """Test implausibly low glucose"""
    validator = RangeValidator()
    is_plausible, reason = validator.check("glucose", 0.5)

    assert is_plausible is False
    assert "below plausible minimum" in reason


@pytest.mark.parametrize("value", [1.0, 30.0])
def test_bounds_are_inclusive(value):
    """Test range bounds themselves are plausible"""
    assert RangeValidator().is_valid("glucose", value)


def test_unknown_key_always_valid():
    """Test keys without a registered range pass unconditionally"""
    validator = RangeValidator()
    assert validator.range_for("ferritin") is None
    assert validator.check("ferritin", 99999.0) == (True, None)


def test_custom_ranges():
    """Test validator with an injected table"""
    validator = RangeValidator({"glucose": (4.0, 5.0)})
    assert validator.is_valid("glucose", 4.5)
    assert not validator.is_valid("glucose", 5.5)
    assert validator.is_valid("testosterone", 500.0)


def test_every_range_belongs_to_a_field():
    """Test range table and field vocabulary share their keys"""
    for key, (low, high) in PLAUSIBILITY_RANGES.items():
        assert key in FIELD_PATTERNS
        assert low < high


def test_range_table_is_read_only():
    """Test the shared range table cannot be mutated"""
    with pytest.raises(TypeError):
        PLAUSIBILITY_RANGES["glucose"] = (0.0, 1.0)


@pytest.mark.parametrize("key", ["glucose", "ferritin"])
def test_non_finite_rejected(key):
    """Test NaN and infinity fail the gate, ranged key or not"""
    validator = RangeValidator()
    for value in (float("nan"), float("inf"), float("-inf")):
        valid, reason = validator.check(key, value)
        assert not valid
        assert "finite" in reason


def test_glucose_bounds():
    """Test glucose keeps diabetic-range results and rejects noise"""
    validator = RangeValidator()
    assert validator.range_for("glucose") == (1.0, 30.0)
    assert validator.is_valid("glucose", 22.4)
    assert not validator.is_valid("glucose", 0.5)
    assert not validator.is_valid("glucose", 120.0)
