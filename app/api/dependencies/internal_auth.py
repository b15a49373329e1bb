# app/api/dependencies/internal_auth.py
from typing import Optional

import structlog
from fastapi import Header, HTTPException, status

from app.core.config import get_settings

logger = structlog.get_logger()


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing internal API key.",
    )


async def verify_internal_api_key(
    internal_api_key: Optional[str] = Header(
        default=None,
        alias="X-Internal-Api-Key",
        description="Internal API key required for /internal endpoints in non-local environments.",
    ),
) -> None:
    """
    Dependency guarding the scheduler and import endpoints under /internal.

    Rules
    -----
    - APP_ENV in ("local", "test"): the key is only checked when
      INTERNAL_API_KEY is configured.
    - Any other APP_ENV: INTERNAL_API_KEY must be configured (500 otherwise)
      and the header must match it (401 otherwise).
    """
    settings = get_settings()
    env = (settings.APP_ENV or "local").lower()
    expected = getattr(settings, "INTERNAL_API_KEY", None)

    if not expected:
        if env in ("local", "test"):
            return
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="INTERNAL_API_KEY not configured for this environment.",
        )

    if internal_api_key != expected:
        logger.warning("rejected internal request", env=env, key_present=bool(internal_api_key))
        raise _unauthorized()
