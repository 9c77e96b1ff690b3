"""Client repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ...models.client import Client


@runtime_checkable
class ClientRepository(Protocol):
    """Lookup and persistence for client profiles."""

    def get_by_id(self, client_id: int) -> Optional[Client]:
        """Retrieve a client by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[Client]:
        """Retrieve a client by e-mail address."""
        ...

    def create(self, client: Client) -> Client:
        """Create a new client."""
        ...

    def update(self, client: Client) -> Client:
        """Update an existing client."""
        ...
