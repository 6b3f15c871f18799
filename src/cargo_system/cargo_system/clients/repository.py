from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Client


class ClientRepository(Protocol):
    def list_all(self) -> Sequence[Client]:
        raise NotImplementedError

    def get_by_id(self, client_id: int) -> Optional[Client]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        phone: Optional[str],
        address: Optional[str],
        city: Optional[str],
        email: Optional[str],
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        client_id: int,
        name: str,
        phone: Optional[str],
        address: Optional[str],
        city: Optional[str],
        email: Optional[str],
        notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, client_id: int) -> bool:
        raise NotImplementedError
