"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Client
from ...shared.pagination import PageParams, paginate

CLIENT_SORT_COLUMNS = {
    "createdAt": Client.created_at,
    "name": Client.name,
    "totalSpend": Client.total_spend,
    "totalEvents": Client.total_events,
}


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def search_clients(
        db: Session,
        planner_id: str,
        params: PageParams,
        status: Optional[str] = None,
        city: Optional[str] = None,
        search: Optional[str] = None,
        min_spend: Optional[float] = None,
    ) -> tuple[list[Client], int]:
        """Filter, sort and page a planner's clients"""
        query = db.query(Client).filter(Client.planner_id == planner_id)

        if status:
            query = query.filter(Client.status == status)
        if city:
            query = query.filter(Client.city.ilike(f"%{city}%"))
        if min_spend is not None:
            query = query.filter(Client.total_spend >= min_spend)
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Client.name.ilike(search_term))
                | (Client.email.ilike(search_term))
                | (Client.phone.ilike(search_term))
            )

        return paginate(query, params, CLIENT_SORT_COLUMNS, default_sort="createdAt")

    @staticmethod
    def get_high_value(db: Session, planner_id: str, threshold: float) -> list[Client]:
        return (
            db.query(Client)
            .filter(Client.planner_id == planner_id, Client.total_spend >= threshold)
            .order_by(Client.total_spend.desc())
            .all()
        )

    @staticmethod
    def get_client_by_id(db: Session, client_id: str, planner_id: str) -> Optional[Client]:
        return (
            db.query(Client).filter(Client.id == client_id, Client.planner_id == planner_id).first()
        )

    @staticmethod
    def get_client_by_email(db: Session, planner_id: str, email: str) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.planner_id == planner_id, func.lower(Client.email) == email.lower())
            .first()
        )

    @staticmethod
    def stats_by_status(db: Session, planner_id: str) -> dict[str, tuple[int, float]]:
        """{status: (client count, total spend)}"""
        rows = (
            db.query(
                Client.status,
                func.count(Client.id),
                func.coalesce(func.sum(Client.total_spend), 0),
            )
            .filter(Client.planner_id == planner_id)
            .group_by(Client.status)
            .all()
        )
        return {status: (count, float(spend)) for status, count, spend in rows}

    @staticmethod
    def create_client(db: Session, planner_id: str, **client_data) -> Client:
        client = Client(planner_id=planner_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        db.delete(client)
        db.commit()
