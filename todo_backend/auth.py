from __future__ import annotations

import logging

from fastapi import Header

from todo_backend.errors import UnauthorizedError
from todo_backend.settings import get_settings

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = (
    "API key required for write operations. Provide it via Authorization header "
    "(Bearer token) or X-API-Key header."
)
UNAUTHORIZED_HINT = (
    "This endpoint is read-only for public users. Only authorized users can create or modify tasks."
)


def is_valid_api_key(authorization: str | None, x_api_key: str | None) -> bool:
    api_key = get_settings().api_key
    if not api_key:
        logger.warning("API_KEY not set - allowing all write requests. Set API_KEY in production!")
        return True
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):] == api_key
    if x_api_key:
        return x_api_key == api_key
    return False


async def require_api_key(
    authorization: str | None = Header(default=None),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> None:
    if not is_valid_api_key(authorization, x_api_key):
        raise UnauthorizedError(message=UNAUTHORIZED_MESSAGE, hint=UNAUTHORIZED_HINT)
