# app/api/dependencies/principal.py
from typing import Callable, Optional

import structlog
from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt

from app.core.config import get_settings
from app.services.access_control import (
    Principal,
    Role,
    can_access_zone,
    has_any_role,
)

logger = structlog.get_logger()

# Used in local/test when no token secret is configured
LOCAL_PRINCIPAL = Principal(username="local", unrestricted=True)


async def get_current_principal(
    authorization: Optional[str] = Header(
        default=None,
        alias="Authorization",
        description="Bearer token issued by the auth service.",
    ),
) -> Principal:
    """
    Dependency resolving the caller of dashboard endpoints.

    Rules
    -----
    - JWT_SECRET_KEY not configured:
        - APP_ENV in ("local", "test") -> caller is an unrestricted local principal.
        - otherwise                     -> 500 (misconfiguration).
    - JWT_SECRET_KEY configured:
        - `Authorization: Bearer <token>` must be present and verify against
          the secret, otherwise 401.
        - Roles and zone access are read from the token claims.
    """
    settings = get_settings()
    env = (settings.APP_ENV or "local").lower()
    secret = getattr(settings, "JWT_SECRET_KEY", None)

    if not secret:
        if env in ("local", "test"):
            return LOCAL_PRINCIPAL
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT_SECRET_KEY not configured for this environment.",
        )

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    algorithm = getattr(settings, "JWT_ALGORITHM", "HS256")
    try:
        claims = jwt.decode(token.strip(), secret, algorithms=[algorithm])
    except JWTError as exc:
        logger.warning("rejected bearer token", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Principal.from_claims(claims)


def require_any_role(*roles: Role) -> Callable[..., Principal]:
    """
    Build a dependency that only lets through principals holding one of `roles`.
    """

    async def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_any_role(principal, roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    "This action requires one of these roles: "
                    + ", ".join(role.value for role in roles)
                ),
            )
        return principal

    return _dependency


def ensure_zone_access(principal: Principal, zone_id: str) -> None:
    """
    Raise 403 unless `principal` may read `zone_id`.
    """
    if not can_access_zone(principal, zone_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have access to zone '{zone_id}'.",
        )
