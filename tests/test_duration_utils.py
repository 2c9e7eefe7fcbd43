from decimal import Decimal

from backend.economics.services.duration import format_full, format_hm, format_hours, minutes_to_hours, split_minutes


def test_split_minutes():
    assert split_minutes(90) == (1, 30)
    assert split_minutes(120) == (2, 0)
    assert split_minutes(45) == (0, 45)
    assert split_minutes(None) == (0, 0)
    assert split_minutes(-30) == (0, 0)


def test_minutes_to_hours():
    assert minutes_to_hours(90) == Decimal("1.5")
    assert minutes_to_hours(0) == Decimal("0")


def test_format_hm():
    assert format_hm(90) == "1h 30m"
    assert format_hm(120) == "2h"
    assert format_hm(45) == "45m"
    assert format_hm(0) == "0m"


def test_format_hours():
    assert format_hours(90) == "1.5"
    assert format_hours(120) == "2"
    assert format_hours(600) == "10"
    assert format_hours(0) == "0"


def test_format_full():
    assert format_full(90) == "1 hour 30 minutes"
    assert format_full(120) == "2 hours"
    assert format_full(1) == "1 minute"
    assert format_full(0) == "0 minutes"
