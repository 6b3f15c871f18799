from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import NotFoundError
from ..core.logger import logger
from .model import Client
from .repository import ClientRepository


class ClientService:
    def __init__(self, clients: ClientRepository):
        self._clients = clients

    def list_clients(self) -> Sequence[Client]:
        return sorted(self._clients.list_all(), key=lambda c: c.name.lower())

    def search(self, term: str) -> Sequence[Client]:
        term = (term or "").strip()
        clients = self.list_clients()
        if not term:
            return clients
        return [c for c in clients if c.matches(term)]

    def get(self, client_id: int) -> Client:
        client = self._clients.get_by_id(int(client_id))
        if not client:
            raise NotFoundError("Pelanggan tidak ditemukan")
        return client

    def create_client(
        self,
        *,
        name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        client_id = self._clients.create(
            name=require_non_empty(name, "Nama pelanggan"),
            phone=optional_str(phone),
            address=optional_str(address),
            city=optional_str(city),
            email=optional_str(email),
            notes=optional_str(notes),
        )
        logger.info(f"Client {client_id} created")
        return client_id

    def update_client(
        self,
        client_id: int,
        *,
        name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        self.get(client_id)
        self._clients.update(
            client_id=int(client_id),
            name=require_non_empty(name, "Nama pelanggan"),
            phone=optional_str(phone),
            address=optional_str(address),
            city=optional_str(city),
            email=optional_str(email),
            notes=optional_str(notes),
        )

    def delete_client(self, client_id: int) -> None:
        if not self._clients.delete(int(client_id)):
            raise NotFoundError("Pelanggan tidak ditemukan")
        logger.info(f"Client {client_id} deleted")
