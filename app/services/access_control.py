# app/services/access_control.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

import structlog

logger = structlog.get_logger()


class Role(str, Enum):
    """
    Roles a dashboard user can hold.
    """

    ADMIN = "admin"
    DISTRICT_ADMIN = "district_admin"
    ZONE_ADMIN = "zone_admin"


# Roles that see every zone without an explicit zone list
ALL_ZONE_ROLES = frozenset({Role.ADMIN, Role.DISTRICT_ADMIN})


@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller with its roles and zone capabilities.

    `unrestricted` principals bypass every role and zone check.
    """

    username: str
    roles: frozenset[Role] = field(default_factory=frozenset)
    zone_access: frozenset[str] = field(default_factory=frozenset)
    unrestricted: bool = False

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        """
        Build a Principal from decoded token claims.

        Expected claims: `sub`, `roles` (list of role names), `zoneAccess`
        (list of zone ids) and optionally `unrestricted`. Unknown role names
        are dropped.
        """
        username = str(claims.get("sub") or claims.get("username") or "")
        return cls(
            username=username,
            roles=_parse_roles(claims.get("roles") or [], username),
            zone_access=frozenset(str(z) for z in (claims.get("zoneAccess") or [])),
            unrestricted=bool(claims.get("unrestricted", False)),
        )


def _parse_roles(raw_roles: Iterable[Any], username: str) -> frozenset[Role]:
    roles: set[Role] = set()
    for raw in raw_roles:
        try:
            roles.add(Role(str(raw)))
        except ValueError:
            logger.warning("ignoring unknown role in token", username=username, role=raw)
    return frozenset(roles)


def has_role(principal: Principal, role: Role) -> bool:
    return principal.unrestricted or role in principal.roles


def has_any_role(principal: Principal, roles: Iterable[Role]) -> bool:
    if principal.unrestricted:
        return True
    return any(role in principal.roles for role in roles)


def can_access_zone(principal: Principal, zone_id: str) -> bool:
    """
    Admins and district admins see every zone; zone admins only the zones
    listed in their `zone_access`.
    """
    if principal.unrestricted:
        return True
    if principal.roles & ALL_ZONE_ROLES:
        return True
    if Role.ZONE_ADMIN in principal.roles:
        return zone_id in principal.zone_access
    return False


def accessible_zone_ids(principal: Principal) -> frozenset[str] | None:
    """
    Zone ids the principal may read, or None when it may read every zone.
    """
    if principal.unrestricted or principal.roles & ALL_ZONE_ROLES:
        return None
    if Role.ZONE_ADMIN in principal.roles:
        return principal.zone_access
    return frozenset()
