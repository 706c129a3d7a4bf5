"""
Unit tests for report date detection
"""

from datetime import date

from lab_ingestion.processors.lab import detect_report_date

from conftest import layout_line


def test_labelled_date_preferred():
    """Test a line labelled as a date wins over earlier dates"""
    lines = [
        layout_line("Заказ 15.03.2024", 50),
        layout_line("Дата взятия биоматериала: 12.03.2024", 100),
    ]
    assert detect_report_date(lines) == date(2024, 3, 12)


def test_birth_date_ignored():
    """Test the patient's birth date is never the report date"""
    lines = [
        layout_line("Дата рождения: 01.01.1980", 50),
        layout_line("Заказ 15.03.2024", 100),
    ]
    assert detect_report_date(lines) == date(2024, 3, 15)


def test_no_date():
    """Test pages without a date"""
    assert detect_report_date([layout_line("Глюкоза 5.5", 100)]) is None
    assert detect_report_date([]) is None
