"""Lead service - Business logic for lead capture, scoring and conversion"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Event, Lead, User
from ...shared.pagination import PageParams
from ...shared.transitions import ensure_transition
from ..events.schemas import EVENT_TYPES
from .duplicates import DuplicateMatch, find_duplicates
from .repository import LeadRepository
from .schemas import LeadCreate, LeadUpdate
from .scoring import HOT_LEAD_THRESHOLD, MAX_SCORE, calculate_lead_score, parse_budget_range

logger = logging.getLogger(__name__)

LEAD_TRANSITIONS = {
    "new": ["contacted", "lost"],
    "contacted": ["qualified", "lost"],
    "qualified": ["proposal_sent", "lost"],
    "proposal_sent": ["converted", "lost"],
    "converted": [],
    "lost": ["new"],
}

# Request field -> column
LEAD_FIELDS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "eventType": "event_type",
    "eventDate": "event_date",
    "budget": "budget",
    "budgetRange": "budget_range",
    "guestCount": "guest_count",
    "source": "source",
    "notes": "notes",
}
SCORING_COLUMNS = {"event_date", "budget", "budget_range", "guest_count", "source"}


def score_lead_fields(
    budget: Optional[float],
    budget_range: Optional[str],
    event_date: Optional[date],
    guest_count: Optional[int],
    source: Optional[str],
    status: str,
) -> int:
    """Score stored lead data; a textual budget range stands in for a missing budget"""
    return calculate_lead_score(
        budget=budget or parse_budget_range(budget_range),
        event_date=event_date,
        guest_count=guest_count,
        source=source,
        has_engaged=status != "new",
    )


def score_lead(lead: Lead) -> int:
    return score_lead_fields(
        lead.budget, lead.budget_range, lead.event_date, lead.guest_count, lead.source, lead.status
    )


class LeadService:
    """Service layer for lead business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = LeadRepository()

    def search_leads(
        self,
        user: User,
        params: PageParams,
        status: Optional[str] = None,
        source: Optional[str] = None,
        min_score: Optional[int] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Lead], int]:
        return self.repo.search_leads(self.db, user.id, params, status, source, min_score, search)

    def get_hot_leads(self, user: User) -> list[Lead]:
        return self.repo.get_hot_leads(self.db, user.id, HOT_LEAD_THRESHOLD)

    def get_lead(self, lead_id: str, user: User) -> Lead:
        lead = self.repo.get_lead_by_id(self.db, lead_id, user.id)
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")
        return lead

    def _lead_data(self, data: LeadCreate) -> dict:
        lead_data = {column: getattr(data, field) for field, column in LEAD_FIELDS.items()}
        lead_data["status"] = "new"
        lead_data["score"] = score_lead_fields(
            lead_data["budget"],
            lead_data["budget_range"],
            lead_data["event_date"],
            lead_data["guest_count"],
            lead_data["source"],
            "new",
        )
        return lead_data

    def create_lead(self, data: LeadCreate, user: User) -> Lead:
        lead = self.repo.create_lead(self.db, user.id, **self._lead_data(data))
        logger.info(f"📥 Lead {lead.id} created for planner {user.id} with score {lead.score}")
        return lead

    def import_leads(self, leads: list[LeadCreate], user: User) -> list[Lead]:
        """Insert a batch in one commit; LeadImport bounds the batch to 1..100 leads"""
        created = self.repo.create_leads(self.db, user.id, [self._lead_data(d) for d in leads])
        logger.info(f"📥 Imported {len(created)} leads for planner {user.id}")
        return created

    def update_lead(self, lead_id: str, data: LeadUpdate, user: User) -> Lead:
        lead = self.get_lead(lead_id, user)

        provided = data.model_dump(exclude_unset=True)
        if "name" in provided and not provided["name"]:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        updates = {LEAD_FIELDS[field]: value for field, value in provided.items()}

        if SCORING_COLUMNS & updates.keys():
            merged = {column: updates.get(column, getattr(lead, column)) for column in SCORING_COLUMNS}
            updates["score"] = score_lead_fields(
                merged["budget"],
                merged["budget_range"],
                merged["event_date"],
                merged["guest_count"],
                merged["source"],
                lead.status,
            )

        lead = self.repo.update_lead(self.db, lead, **updates)
        logger.info(f"✏️ Lead {lead.id} updated")
        return lead

    def update_status(self, lead_id: str, status: str, user: User) -> Lead:
        lead = self.get_lead(lead_id, user)
        if status == "converted":
            raise HTTPException(status_code=400, detail="Use the convert action to convert a lead")
        ensure_transition(LEAD_TRANSITIONS, lead.status, status)

        previous = lead.status
        lead = self.repo.update_lead(self.db, lead, status=status)
        logger.info(f"🔄 Lead {lead.id} status {previous} -> {status}")
        return lead

    def update_score(self, lead_id: str, score: int, user: User) -> Lead:
        if not 0 <= score <= MAX_SCORE:
            raise HTTPException(status_code=400, detail="Score must be between 0 and 100")

        lead = self.get_lead(lead_id, user)
        lead = self.repo.update_lead(self.db, lead, score=score)
        logger.info(f"🎯 Lead {lead.id} score set to {score}")
        return lead

    def rescore_lead(self, lead_id: str, user: User) -> Lead:
        lead = self.get_lead(lead_id, user)
        return self.repo.update_lead(self.db, lead, score=score_lead(lead))

    def convert_lead(self, lead_id: str, user: User) -> tuple[Lead, Event]:
        """Turn a lead with a sent proposal into a draft event"""
        lead = self.get_lead(lead_id, user)
        ensure_transition(LEAD_TRANSITIONS, lead.status, "converted")
        if not lead.event_date:
            raise HTTPException(status_code=400, detail="Lead has no event date to convert")

        event_type = lead.event_type if lead.event_type in EVENT_TYPES else "other"
        budget = lead.budget or parse_budget_range(lead.budget_range)
        event = self.repo.convert_lead(
            self.db,
            lead,
            name=f"{lead.name}'s {lead.event_type or event_type}",
            type=event_type,
            status="draft",
            date=lead.event_date,
            guest_count=lead.guest_count or 0,
            budget_min=budget,
            budget_max=budget,
            notes=lead.notes,
        )
        logger.info(f"🎉 Lead {lead.id} converted to event {event.id}")
        return lead, event

    def delete_lead(self, lead_id: str, user: User) -> dict:
        lead = self.get_lead(lead_id, user)
        self.repo.delete_lead(self.db, lead)
        logger.info(f"🗑️ Lead {lead_id} deleted")
        return {"deleted": True, "id": lead_id}

    def find_duplicates(
        self,
        user: User,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        name: Optional[str] = None,
        event_date: Optional[date] = None,
    ) -> list[DuplicateMatch]:
        if not any([phone, email, name]):
            raise HTTPException(status_code=400, detail="Provide a phone, email or name to check")
        return find_duplicates(self.repo.get_leads(self.db, user.id), phone, email, name, event_date)
