"""Client service - Business logic for the planner's client book"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEFAULT_CURRENCY
from ...models import Client, User
from ...shared.pagination import PageParams
from .repository import ClientRepository
from .schemas import CLIENT_STATUSES, ClientCreate, ClientPreferences, ClientUpdate

logger = logging.getLogger(__name__)

HIGH_VALUE_THRESHOLD = 500000

CLIENT_FIELDS = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "alternatePhone": "alternate_phone",
    "status": "status",
    "address": "address",
    "city": "city",
    "state": "state",
    "notes": "notes",
}


def status_label(status: str) -> str:
    return CLIENT_STATUSES.get(status, status)


def average_spend(client: Client) -> float:
    if not client.total_events:
        return 0
    return client.total_spend / client.total_events


def is_high_value(client: Client, threshold: float = HIGH_VALUE_THRESHOLD) -> bool:
    return (client.total_spend or 0) >= threshold


def display_location(client: Client) -> str:
    parts = [part for part in (client.city, client.state) if part]
    return ", ".join(parts) or "Location not set"


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def search_clients(
        self,
        user: User,
        params: PageParams,
        status: Optional[str] = None,
        city: Optional[str] = None,
        search: Optional[str] = None,
        high_value_only: bool = False,
    ) -> tuple[list[Client], int]:
        min_spend = HIGH_VALUE_THRESHOLD if high_value_only else None
        return self.repo.search_clients(self.db, user.id, params, status, city, search, min_spend)

    def get_high_value(self, user: User) -> list[Client]:
        return self.repo.get_high_value(self.db, user.id, HIGH_VALUE_THRESHOLD)

    def get_stats(self, user: User) -> dict:
        by_status = self.repo.stats_by_status(self.db, user.id)
        return {
            "total": sum(count for count, _ in by_status.values()),
            "active": by_status.get("active", (0, 0))[0],
            "prospects": by_status.get("prospect", (0, 0))[0],
            "totalRevenue": sum(spend for _, spend in by_status.values()),
        }

    def get_client(self, client_id: str, user: User) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id, user.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def _ensure_unique_email(
        self, email: Optional[str], user: User, client_id: Optional[str] = None
    ) -> None:
        if not email:
            return
        existing = self.repo.get_client_by_email(self.db, user.id, email)
        if existing and existing.id != client_id:
            raise HTTPException(status_code=409, detail="Client with this email already exists")

    def create_client(self, data: ClientCreate, user: User) -> Client:
        self._ensure_unique_email(data.email, user)

        preferences = data.preferences or ClientPreferences()
        client = self.repo.create_client(
            self.db,
            user.id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            alternate_phone=data.alternatePhone,
            status="prospect",
            address=data.address,
            city=data.city,
            state=data.state,
            preferences=preferences.model_dump(),
            total_events=0,
            total_spend=0,
            currency=DEFAULT_CURRENCY,
            referral_source=data.referralSource,
            notes=data.notes,
        )
        logger.info(f"👤 Client {client.id} created for planner {user.id}")
        return client

    def update_client(self, client_id: str, data: ClientUpdate, user: User) -> Client:
        client = self.get_client(client_id, user)

        provided = data.model_dump(exclude_unset=True)
        if "name" in provided and not provided["name"]:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        if "status" in provided and provided["status"] is None:
            raise HTTPException(status_code=400, detail="status cannot be empty")
        if provided.get("email"):
            self._ensure_unique_email(provided["email"], user, client.id)

        updates = {
            CLIENT_FIELDS[key]: value for key, value in provided.items() if key in CLIENT_FIELDS
        }
        if data.preferences is not None:
            changes = data.preferences.model_dump(exclude_unset=True)
            # Reassign so the JSON column is flagged dirty
            updates["preferences"] = {**(client.preferences or {}), **changes}

        client = self.repo.update_client(self.db, client, **updates)
        logger.info(f"✏️ Client {client.id} updated")
        return client

    def record_event(self, client_id: str, amount: float, user: User) -> Client:
        """Count a booked event against the client; booking an event makes them active"""
        client = self.get_client(client_id, user)
        client = self.repo.update_client(
            self.db,
            client,
            total_events=(client.total_events or 0) + 1,
            total_spend=(client.total_spend or 0) + amount,
            status="active",
        )
        logger.info(f"🎊 Recorded event of {amount} for client {client.id}")
        return client

    def delete_client(self, client_id: str, user: User) -> dict:
        client = self.get_client(client_id, user)
        self.repo.delete_client(self.db, client)
        logger.info(f"🗑️ Client {client_id} deleted")
        return {"deleted": True, "id": client_id}
