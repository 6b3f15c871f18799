"""Role hierarchy and capability flags.

Pure lookup tables: every role resolves to a fixed set of boolean flags and an
integer rank used for "at least this role" checks.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Union

from ..core.enums import Role

ROLE_LABELS: dict[Role, str] = {
    Role.OWNER: "Pemilik",
    Role.ADMIN: "Administrator",
    Role.BRANCH_MANAGER: "Kepala Cabang",
    Role.DRIVER: "Supir",
    Role.HELPER: "Helper/Kernet",
    Role.STAFF: "Staff",
}

ROLE_HIERARCHY: dict[Role, int] = {
    Role.OWNER: 100,
    Role.ADMIN: 80,
    Role.BRANCH_MANAGER: 60,
    Role.STAFF: 40,
    Role.DRIVER: 20,
    Role.HELPER: 20,
}


@dataclass(frozen=True)
class RolePermissions:
    can_view_dashboard_owner: bool = False
    can_manage_transactions: bool = False
    can_manage_clients: bool = False
    can_manage_voyages: bool = False
    can_view_finance: bool = False
    can_manage_finance: bool = False
    can_manage_fleet: bool = False
    can_manage_employees: bool = False
    can_view_own_attendance: bool = True
    can_view_all_attendance: bool = False

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


_DEFAULT = RolePermissions()
_FULL = RolePermissions(
    can_view_dashboard_owner=True,
    can_manage_transactions=True,
    can_manage_clients=True,
    can_manage_voyages=True,
    can_view_finance=True,
    can_manage_finance=True,
    can_manage_fleet=True,
    can_manage_employees=True,
    can_view_all_attendance=True,
)

ROLE_PERMISSIONS: dict[Role, RolePermissions] = {
    Role.OWNER: _FULL,
    Role.ADMIN: _FULL,
    Role.BRANCH_MANAGER: replace(
        _DEFAULT,
        can_manage_transactions=True,
        can_manage_clients=True,
        can_manage_voyages=True,
        can_view_finance=True,
        can_manage_fleet=True,
        can_view_all_attendance=True,
    ),
    Role.STAFF: _DEFAULT,
    Role.DRIVER: _DEFAULT,
    Role.HELPER: _DEFAULT,
}

PERMISSION_FLAGS = tuple(RolePermissions.__dataclass_fields__)

RoleLike = Union[Role, str]


def get_role_permissions(role: RoleLike) -> RolePermissions:
    return ROLE_PERMISSIONS[Role(role)]


def has_permission(role: RoleLike, flag: str) -> bool:
    if flag not in PERMISSION_FLAGS:
        raise KeyError(f"Unknown permission flag: {flag}")
    return bool(getattr(get_role_permissions(role), flag))


def has_minimum_role(user_role: RoleLike, required_role: RoleLike) -> bool:
    return ROLE_HIERARCHY[Role(user_role)] >= ROLE_HIERARCHY[Role(required_role)]


def is_management_role(role: RoleLike) -> bool:
    return Role(role) in {Role.OWNER, Role.ADMIN, Role.BRANCH_MANAGER}


def role_label(role: RoleLike) -> str:
    return ROLE_LABELS[Role(role)]
