"""Lead repository - Database operations for leads"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Event, Lead
from ...shared.pagination import PageParams, paginate

LEAD_SORT_COLUMNS = {
    "createdAt": Lead.created_at,
    "score": Lead.score,
    "name": Lead.name,
    "status": Lead.status,
}


class LeadRepository:
    """Repository for lead database operations"""

    @staticmethod
    def search_leads(
        db: Session,
        planner_id: str,
        params: PageParams,
        status: Optional[str] = None,
        source: Optional[str] = None,
        min_score: Optional[int] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Lead], int]:
        """Filter, sort and page a planner's leads"""
        query = db.query(Lead).filter(Lead.planner_id == planner_id)

        if status:
            query = query.filter(Lead.status == status)
        if source:
            query = query.filter(Lead.source == source.lower())
        if min_score is not None:
            query = query.filter(Lead.score >= min_score)
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Lead.name.ilike(search_term))
                | (Lead.email.ilike(search_term))
                | (Lead.phone.ilike(search_term))
            )

        return paginate(query, params, LEAD_SORT_COLUMNS, default_sort="createdAt")

    @staticmethod
    def get_leads(db: Session, planner_id: str) -> list[Lead]:
        return db.query(Lead).filter(Lead.planner_id == planner_id).all()

    @staticmethod
    def get_hot_leads(db: Session, planner_id: str, threshold: int) -> list[Lead]:
        return (
            db.query(Lead)
            .filter(
                Lead.planner_id == planner_id,
                Lead.score >= threshold,
                Lead.status.notin_(["converted", "lost"]),
            )
            .order_by(Lead.score.desc())
            .all()
        )

    @staticmethod
    def get_lead_by_id(db: Session, lead_id: str, planner_id: str) -> Optional[Lead]:
        return db.query(Lead).filter(Lead.id == lead_id, Lead.planner_id == planner_id).first()

    @staticmethod
    def create_lead(db: Session, planner_id: str, **lead_data) -> Lead:
        lead = Lead(planner_id=planner_id, **lead_data)
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead

    @staticmethod
    def create_leads(db: Session, planner_id: str, rows: list[dict]) -> list[Lead]:
        """Insert a batch of leads in one transaction"""
        leads = [Lead(planner_id=planner_id, **row) for row in rows]
        db.add_all(leads)
        db.commit()
        for lead in leads:
            db.refresh(lead)
        return leads

    @staticmethod
    def update_lead(db: Session, lead: Lead, **updates) -> Lead:
        """Update a lead; None values clear nullable fields"""
        for key, value in updates.items():
            if hasattr(lead, key):
                setattr(lead, key, value)

        db.commit()
        db.refresh(lead)
        return lead

    @staticmethod
    def delete_lead(db: Session, lead: Lead) -> None:
        db.delete(lead)
        db.commit()

    @staticmethod
    def convert_lead(db: Session, lead: Lead, **event_data) -> Event:
        """Create the event and mark the lead converted in one commit"""
        event = Event(planner_id=lead.planner_id, lead_id=lead.id, **event_data)
        db.add(event)
        db.flush()

        lead.status = "converted"
        lead.converted_event_id = event.id

        db.commit()
        db.refresh(lead)
        db.refresh(event)
        return event
