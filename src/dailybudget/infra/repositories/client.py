"""SQLModel implementation of Client repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.client import Client


class SQLModelClientRepository:
    """Client repository bound to one unit-of-work session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, client_id: int) -> Optional[Client]:
        return self.session.get(Client, client_id)

    def get_by_email(self, email: str) -> Optional[Client]:
        statement = select(Client).where(Client.email == email.strip().lower())
        return self.session.exec(statement).first()

    def create(self, client: Client) -> Client:
        """Create a new client."""
        client.email = client.email.strip().lower()
        self.session.add(client)
        self.session.flush()
        self.session.refresh(client)
        return client

    def update(self, client: Client) -> Client:
        """Update an existing client."""
        self.session.add(client)
        self.session.flush()
        self.session.refresh(client)
        return client
