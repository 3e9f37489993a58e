import pytest
from tablebook.utils.time import is_calendar_date, is_slot_time, parse_slot_time


def test_parse_slot_time_returns_minutes_since_midnight() -> None:
    assert parse_slot_time("00:00") == 0
    assert parse_slot_time("09:30") == 570
    assert parse_slot_time("18:00") == 1080
    assert parse_slot_time("23:59") == 1439


def test_parse_slot_time_raises_on_non_numeric() -> None:
    with pytest.raises(ValueError):
        parse_slot_time("aa:bb")


def test_parse_slot_time_raises_without_colon() -> None:
    with pytest.raises(ValueError):
        parse_slot_time("1800")


def test_is_slot_time() -> None:
    assert is_slot_time("07:05")
    assert not is_slot_time("7:05")
    assert not is_slot_time("24:00")
    assert not is_slot_time("12:00:00")


def test_is_calendar_date() -> None:
    assert is_calendar_date("2024-02-29")
    assert not is_calendar_date("2023-02-29")
    assert not is_calendar_date("20240601")
