import datetime

from utils.formatting import (
    format_datetime,
    format_short_datetime,
    format_time,
    format_time_range,
    parse_datetime,
    to_input_value,
)

MORNING = datetime.datetime(2030, 3, 9, 9, 5)
EVENING = datetime.datetime(2030, 3, 9, 18, 30)


def test_parse_datetime_local_input():
    assert parse_datetime("2030-03-09T09:05") == MORNING
    assert parse_datetime(" 2030-03-09 09:05 ") == MORNING


def test_parse_datetime_rejects_garbage():
    assert parse_datetime("") is None
    assert parse_datetime(None) is None
    assert parse_datetime("next tuesday") is None


def test_input_value_round_trip():
    assert to_input_value(MORNING) == "2030-03-09T09:05"
    assert to_input_value(None) == ""


def test_human_formats():
    assert format_time(MORNING) == "9:05 AM"
    assert format_time(EVENING) == "6:30 PM"
    assert format_time(datetime.datetime(2030, 3, 9, 0, 15)) == "12:15 AM"
    assert format_datetime(MORNING) == "Sat, Mar 9, 9:05 AM"
    assert format_short_datetime(EVENING) == "Mar 9, 6:30 PM"
    assert format_datetime(None) == ""


def test_format_time_range():
    assert format_time_range(MORNING, EVENING) == "9:05 AM – 6:30 PM"
    assert format_time_range(MORNING, None) == "9:05 AM"
    assert format_time_range(None, EVENING) == ""
