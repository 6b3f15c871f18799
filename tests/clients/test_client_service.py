from __future__ import annotations

import pytest

from src.cargo_system.cargo_system.clients.model import Client
from src.cargo_system.cargo_system.clients.service import ClientService
from src.cargo_system.cargo_system.core.exceptions import NotFoundError, ValidationError


class InMemoryClients:
    def __init__(self):
        self.rows = {}

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, client_id):
        return self.rows.get(client_id)

    def create(self, **fields):
        client_id = len(self.rows) + 1
        self.rows[client_id] = Client(client_id=client_id, **fields)
        return client_id

    def update(self, *, client_id, **fields):
        self.rows[client_id] = Client(client_id=client_id, **fields)
        return True

    def delete(self, client_id):
        return self.rows.pop(client_id, None) is not None


def test_clients_are_listed_by_name_and_searchable():
    service = ClientService(InMemoryClients())
    service.create_client(name="toko Abadi", city="Makassar")
    service.create_client(name="PT Sinar Jaya", phone="031-777", city="Surabaya")

    assert [c.name for c in service.list_clients()] == ["PT Sinar Jaya", "toko Abadi"]
    assert [c.name for c in service.search("makassar")] == ["toko Abadi"]
    assert [c.name for c in service.search("031")] == ["PT Sinar Jaya"]


def test_name_is_required_and_blank_fields_become_none():
    repo = InMemoryClients()
    service = ClientService(repo)
    with pytest.raises(ValidationError):
        service.create_client(name="  ")

    client_id = service.create_client(name=" CV Maju ", phone=" ")
    assert repo.rows[client_id].name == "CV Maju"
    assert repo.rows[client_id].phone is None


def test_update_and_delete_unknown_client():
    service = ClientService(InMemoryClients())
    with pytest.raises(NotFoundError):
        service.update_client(5, name="X")
    with pytest.raises(NotFoundError):
        service.delete_client(5)
