from datetime import date

import pytest

from src.schoolflow.schoolflow.common.datetime_utils import (
    days_in_period,
    first_day_of_next_period,
    period_bounds,
    period_of,
)
from src.schoolflow.schoolflow.core.exceptions import ValidationError
from src.schoolflow.schoolflow.database.bootstrap import iter_sql_statements


def test_period_helpers():
    assert period_of(date(2024, 2, 29)) == "2024-02"
    assert period_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert days_in_period("2023-02") == 28
    assert first_day_of_next_period("2024-12") == date(2025, 1, 1)


@pytest.mark.parametrize("value", ["2024-00", "2024-13", "24-01", "2024-1"])
def test_bad_periods(value):
    with pytest.raises(ValidationError):
        period_bounds(value)


def test_sql_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]
