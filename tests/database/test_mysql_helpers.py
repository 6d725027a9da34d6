from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import pytest

from src.attendance_payroll.attendance_payroll.core.exceptions import ValidationError
from src.attendance_payroll.attendance_payroll.database.connection import DBConfig
from src.attendance_payroll.attendance_payroll.database.mysql_base import (
    from_utc_naive,
    normalize_mysql_time,
    to_utc_naive,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, None),
        (time(9, 0), time(9, 0)),
        (timedelta(hours=21), time(21, 0)),
        (timedelta(hours=30, minutes=15), time(6, 15)),
        ("08:30:00", time(8, 30)),
        ("8:30", time(8, 30)),
        (b"06:00:05", time(6, 0, 5)),
    ],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected


@pytest.mark.parametrize("raw", ["", "9", "25:00", 930])
def test_normalize_mysql_time_rejects_garbage(raw):
    with pytest.raises((ValueError, TypeError)):
        normalize_mysql_time(raw)


def test_utc_round_trip_for_datetime_columns():
    local = datetime(2026, 3, 16, 9, 0, tzinfo=timezone(timedelta(hours=5)))
    stored = to_utc_naive(local)
    assert stored == datetime(2026, 3, 16, 4, 0)
    assert from_utc_naive(stored) == local


def test_db_config_from_settings():
    cfg = DBConfig.from_dict({"host": "db", "user": "hr", "database": "payroll", "port": "3307"})
    assert cfg.port == 3307
    assert cfg.password == ""
    assert cfg.describe() == "hr@db:3307/payroll"

    with pytest.raises(ValidationError):
        DBConfig.from_dict({"host": "db", "user": "hr"})
