"""Tests for planneros.shared validators and transitions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException

from planneros.shared.transitions import ensure_transition
from planneros.shared.validators import (
    normalize_phone,
    to_naive_utc,
    validate_currency,
    validate_email,
    validate_phone,
    validate_time_of_day,
    validate_url,
    validate_uuid,
)


class TestPhone:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("+91 98765-43210", "9876543210"),
            ("9876543210", "9876543210"),
            ("(022) 2345 6789", "2223456789"),
            ("", None),
            ("call me", None),
            (None, None),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_phone(raw) == expected

    @pytest.mark.parametrize("bad", ["12345", "1" * 16])
    def test_digit_count_enforced(self, bad):
        with pytest.raises(ValueError):
            validate_phone(bad)

    def test_valid_phone_is_stripped(self):
        assert validate_phone(" +91 98765 43210 ") == "+91 98765 43210"


class TestFormats:
    def test_email_lowercased(self):
        assert validate_email(" Priya@Example.COM ") == "priya@example.com"

    @pytest.mark.parametrize("value", ["priya", "priya@", "@example.com", "a@b"])
    def test_bad_emails(self, value):
        with pytest.raises(ValueError):
            validate_email(value)

    @pytest.mark.parametrize(
        "value, ok", [("00:00", True), ("23:59", True), ("24:00", False), ("9:30", False)]
    )
    def test_time_of_day(self, value, ok):
        if ok:
            assert validate_time_of_day(value) == value
        else:
            with pytest.raises(ValueError):
                validate_time_of_day(value)

    def test_currency_uppercased(self):
        assert validate_currency("inr") == "INR"
        with pytest.raises(ValueError):
            validate_currency("RUPEE")

    @pytest.mark.parametrize(
        "value, ok", [("https://x.io/a.jpg", True), ("http://x.io", True), ("x.io", False)]
    )
    def test_url(self, value, ok):
        if ok:
            assert validate_url(value) == value
        else:
            with pytest.raises(ValueError):
                validate_url(value)

    def test_uuid(self):
        assert validate_uuid("8f14e45f-ceea-467f-9a5b-2c6d3e2b1a90")
        assert not validate_uuid("8f14e45f")
        assert not validate_uuid(None)

    def test_to_naive_utc(self):
        aware = datetime(2030, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert to_naive_utc(aware) == datetime(2030, 1, 1, 4, 30)
        naive = datetime(2030, 1, 1, 10, 0)
        assert to_naive_utc(naive) is naive


class TestEnsureTransition:
    TRANSITIONS = {"new": ["open"], "open": ["closed"], "closed": []}

    def test_allowed(self):
        ensure_transition(self.TRANSITIONS, "new", "open")

    def test_not_allowed(self):
        with pytest.raises(HTTPException) as exc:
            ensure_transition(self.TRANSITIONS, "closed", "open")
        assert exc.value.status_code == 400
        assert exc.value.detail == "Cannot transition from 'closed' to 'open'"

    def test_unknown_current_status(self):
        with pytest.raises(HTTPException) as exc:
            ensure_transition(self.TRANSITIONS, "lost", "open")
        assert exc.value.status_code == 400
