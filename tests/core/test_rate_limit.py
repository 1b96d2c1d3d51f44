"""Unit tests for rate limit helpers."""

import pytest

from moneybook.core.rate_limit import retry_after_seconds


@pytest.mark.unit
@pytest.mark.parametrize(
    "detail, expected",
    [
        ("5 per 1 minute", 60),
        ("10 per 2 minutes", 120),
        ("100 per 1 hour", 3600),
        ("3 per 30 second", 30),
        ("1 per 1 day", 86400),
        ("something unexpected", 60),
    ],
)
def test_retry_after_seconds(detail, expected):
    """The wait is the limit's window in seconds."""
    assert retry_after_seconds(detail) == expected
