"""Unit tests for positional date normalization"""

import re
import pytest
from datetime import datetime
from credit_report_gateway.utils.date_utils import clock_time, epoch_millis, format_positional_date, iso_date


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("20200723", "2020-07-23"),
        ("19820322", "1982-03-22"),
        ("00000000", "0000-00-00"),
    ],
)
def test_format_positional_date_rewrites_eight_digit_dates(raw, expected):
    """Test YYYYMMDD is split at positions 4 and 6"""
    formatted = format_positional_date(raw)

    assert formatted == expected
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", formatted)
    assert formatted == f"{raw[:4]}-{raw[4:6]}-{raw[6:]}"


@pytest.mark.parametrize("raw", ["", "2020723", "2020-07-23", "202007231", "July 2020"])
def test_format_positional_date_passes_other_lengths_through(raw):
    """Test anything not exactly 8 characters comes back unchanged"""
    assert format_positional_date(raw) == raw


def test_synthesized_identity_helpers():
    """Test helpers used for synthesized report date, time and number"""
    moment = datetime(2024, 2, 29, 8, 5, 9)

    assert iso_date(moment) == "2024-02-29"
    assert clock_time(moment) == "08:05:09"
    assert epoch_millis(moment) == int(moment.timestamp() * 1000)
