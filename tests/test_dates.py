from datetime import datetime

import pytest

from app.utils.dates import build_buckets, choose_grouping, find_bucket, get_date_range, parse_date_param


def test_parse_iso_with_offset_converts_to_utc():
    assert parse_date_param("2024-05-01T00:00:00+06:00") == datetime(2024, 4, 30, 18, 0)


def test_parse_zulu_suffix():
    assert parse_date_param("2024-05-01T10:30:00Z") == datetime(2024, 5, 1, 10, 30)


def test_parse_offset_with_plus_decoded_as_space():
    assert parse_date_param("2024-05-01T00:00:00 06:00") == datetime(2024, 4, 30, 18, 0)


def test_naive_values_use_business_offset():
    assert parse_date_param("2024-05-01T06:00:00", utc_offset_hours=6) == datetime(2024, 5, 1, 0, 0)
    assert parse_date_param("2024-05-01", utc_offset_hours=6) == datetime(2024, 4, 30, 18, 0)


def test_date_only_end_of_day():
    assert parse_date_param("2024-05-01", end_of_day=True) == datetime(2024, 5, 1, 23, 59, 59, 999999)


@pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "2024-13-45", "2024-05-01T25:00"])
def test_empty_or_malformed_means_no_filter(value):
    assert parse_date_param(value) is None


def test_get_date_range_accepts_aliases_and_ignores_bad_bound():
    date_from, date_to = get_date_range({"startDate": "2024-05-01", "dateTo": "not-a-date"})

    assert date_from == datetime(2024, 5, 1, 0, 0)
    assert date_to is None


def test_choose_grouping():
    start = datetime(2024, 1, 1)
    assert choose_grouping(start, datetime(2024, 1, 10)) == "day"
    assert choose_grouping(start, datetime(2024, 2, 10)) == "week"
    assert choose_grouping(start, datetime(2024, 6, 1)) == "month"


def test_day_buckets_follow_business_days():
    date_from = parse_date_param("2024-05-01", utc_offset_hours=6)
    date_to = parse_date_param("2024-05-03", end_of_day=True, utc_offset_hours=6)

    buckets = build_buckets(date_from, date_to, utc_offset_hours=6)

    assert [b["label"] for b in buckets] == ["01.05", "02.05", "03.05"]
    assert buckets[0]["start"] == datetime(2024, 4, 30, 18, 0)
    assert buckets[0]["end"] == datetime(2024, 5, 1, 17, 59, 59, 999999)
    assert buckets[-1]["end"] == date_to
    # 20:00 UTC del 1 de mayo ya es 2 de mayo en Bishkek
    assert find_bucket(buckets, datetime(2024, 5, 1, 20, 0)) == 1
    assert find_bucket(buckets, datetime(2024, 6, 1)) is None


def test_week_buckets_are_seven_days_from_range_start():
    buckets = build_buckets(datetime(2024, 5, 1), datetime(2024, 5, 30, 23, 59))

    assert [b["label"] for b in buckets] == [
        "01.05-07.05",
        "08.05-14.05",
        "15.05-21.05",
        "22.05-28.05",
        "29.05-30.05",
    ]


def test_month_buckets():
    buckets = build_buckets(datetime(2024, 1, 15), datetime(2024, 5, 10))

    assert [b["label"] for b in buckets] == ["01.2024", "02.2024", "03.2024", "04.2024", "05.2024"]
    assert buckets[0]["start"] == datetime(2024, 1, 15)
    assert buckets[1]["start"] == datetime(2024, 2, 1)


def test_no_buckets_without_full_range():
    assert build_buckets(None, datetime(2024, 1, 1)) == []
    assert build_buckets(datetime(2024, 2, 1), datetime(2024, 1, 1)) == []


@pytest.mark.parametrize("value,offset", [
    ("0001-01-01", 6),
    ("0001-01-01T03:00:00", 6),
    ("9999-12-31T23:59:59-06:00", 0),
])
def test_dates_outside_utc_range_mean_no_filter(value, offset):
    assert parse_date_param(value, utc_offset_hours=offset) is None


def test_no_buckets_when_range_reaches_year_9999():
    assert build_buckets(datetime(9999, 12, 25), datetime(9999, 12, 31, 23, 0), utc_offset_hours=6) == []
    assert build_buckets(datetime(9999, 10, 1), datetime(9999, 12, 31, 12, 0), grouping="month") == []
