"""
Request-scoped helpers — resolve the calling user from the bearer token.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Optional

from fastapi import Header, HTTPException

from jobtracker.config import settings
from jobtracker.services.resume_store import ResumeStore, get_store

logger = logging.getLogger(__name__)


class Caller:
    """The authenticated user behind a request."""

    def __init__(self, user_id: str, token: str):
        self.user_id = user_id
        self.token = token

    @property
    def store(self) -> ResumeStore:
        return get_store(self.user_id)


def _user_for_token(token: str) -> str | None:
    if settings.api_tokens:
        return settings.api_tokens.get(token)
    if settings.allow_dev_tokens:
        # Local development without a token table
        return f"dev-{hashlib.sha256(token.encode('utf-8')).hexdigest()[:12]}"
    return None


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> Caller:
    """FastAPI dependency that authenticates `Authorization: Bearer <token>`."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Authentication required")

    token = authorization[len("Bearer "):].strip()
    user_id = _user_for_token(token) if token else None
    if not user_id:
        logger.warning("Rejected request with an unknown bearer token")
        raise HTTPException(status_code=401, detail="Invalid authentication")

    logger.debug(f"Request from user: {user_id[:8]}...")
    return Caller(user_id=user_id, token=token)
