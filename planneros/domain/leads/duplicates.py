"""Duplicate lead detection - flags existing leads that look like the same client"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ...models import Lead
from ...shared.validators import normalize_phone

CONFIDENCE_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass
class DuplicateMatch:
    lead: Lead
    match_type: str  # phone, email, name_and_date, name
    confidence: str  # high, medium, low

    @property
    def reason(self) -> str:
        if self.match_type == "phone":
            return f"Same phone number: {self.lead.phone}"
        if self.match_type == "email":
            return f"Same email: {self.lead.email}"
        if self.match_type == "name_and_date":
            return f"Similar name and same event date: {self.lead.name}"
        return f"Similar name: {self.lead.name}"


def names_match(first: str, second: str) -> bool:
    """Equal, one contains the other, or same first name (longer than 2 chars)"""
    n1 = first.lower().strip()
    n2 = second.lower().strip()
    if not n1 or not n2:
        return False

    if n1 == n2 or n1 in n2 or n2 in n1:
        return True

    first_name = n1.split()[0]
    return first_name == n2.split()[0] and len(first_name) > 2


def find_duplicates(
    candidates: Iterable[Lead],
    phone: Optional[str] = None,
    email: Optional[str] = None,
    name: Optional[str] = None,
    event_date: Optional[date] = None,
) -> list[DuplicateMatch]:
    """
    Compare the given contact details with existing leads.

    Each lead matches at most once, on its strongest signal. Results are ordered
    high confidence first.
    """
    wanted_phone = normalize_phone(phone)
    wanted_email = email.lower().strip() if email else None

    matches = []
    for lead in candidates:
        if wanted_phone and normalize_phone(lead.phone) == wanted_phone:
            matches.append(DuplicateMatch(lead, "phone", "high"))
        elif wanted_email and lead.email and lead.email.lower().strip() == wanted_email:
            matches.append(DuplicateMatch(lead, "email", "high"))
        elif name and names_match(name, lead.name):
            if event_date and lead.event_date == event_date:
                matches.append(DuplicateMatch(lead, "name_and_date", "medium"))
            else:
                matches.append(DuplicateMatch(lead, "name", "low"))

    return sorted(matches, key=lambda m: CONFIDENCE_ORDER[m.confidence])
