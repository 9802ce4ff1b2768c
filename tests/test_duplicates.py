"""Tests for planneros.domain.leads.duplicates."""

from __future__ import annotations

from datetime import date

import pytest

from planneros.domain.leads.duplicates import find_duplicates, names_match
from planneros.models import Lead


def make_lead(name: str, phone: str | None = None, email: str | None = None, event_date=None):
    return Lead(name=name, phone=phone, email=email, event_date=event_date, status="new", score=0)


class TestNamesMatch:
    @pytest.mark.parametrize(
        "first, second, expected",
        [
            ("Priya Sharma", "priya sharma", True),
            ("Priya", "Priya Sharma", True),
            ("Priya Sharma", "Priya Verma", True),
            ("Al Khan", "Al Mehta", False),
            ("Rohan", "Karan", False),
            ("", "Karan", False),
        ],
    )
    def test_similarity_rules(self, first, second, expected):
        assert names_match(first, second) is expected


class TestFindDuplicates:
    def test_phone_matches_ignore_formatting(self):
        lead = make_lead("Anita", phone="+91 98765-43210")
        matches = find_duplicates([lead], phone="9876543210")
        assert len(matches) == 1
        assert matches[0].match_type == "phone"
        assert matches[0].confidence == "high"
        assert "phone" in matches[0].reason

    def test_email_is_case_insensitive(self):
        lead = make_lead("Anita", email="Anita@Example.com")
        matches = find_duplicates([lead], email="anita@example.com ")
        assert [m.match_type for m in matches] == ["email"]

    def test_name_with_same_date_is_medium(self):
        day = date(2026, 12, 1)
        lead = make_lead("Meera Iyer", event_date=day)
        matches = find_duplicates([lead], name="Meera", event_date=day)
        assert matches[0].match_type == "name_and_date"
        assert matches[0].confidence == "medium"

    def test_name_alone_is_low(self):
        lead = make_lead("Meera Iyer", event_date=date(2026, 12, 1))
        matches = find_duplicates([lead], name="Meera", event_date=date(2027, 1, 1))
        assert matches[0].match_type == "name"
        assert matches[0].confidence == "low"

    def test_each_lead_matches_once_on_strongest_signal(self):
        lead = make_lead("Meera Iyer", phone="9876543210", email="meera@example.com")
        matches = find_duplicates(
            [lead], phone="9876543210", email="meera@example.com", name="Meera Iyer"
        )
        assert len(matches) == 1
        assert matches[0].match_type == "phone"

    def test_results_ordered_by_confidence(self):
        weak = make_lead("Kavya Rao")
        strong = make_lead("Someone Else", email="kavya@example.com")
        matches = find_duplicates([weak, strong], email="kavya@example.com", name="Kavya")
        assert [m.confidence for m in matches] == ["high", "low"]

    def test_no_match(self):
        lead = make_lead("Rohan", phone="9999999999")
        assert find_duplicates([lead], phone="8888888888", name="Karan") == []
