"""
Auth dependencies for analytics endpoints.
Identity is established upstream by the gateway; this layer only requires that a
caller identity is present and rejects the request with 401 otherwise.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger("app_logger")

bearer_scheme = HTTPBearer(auto_error=False)


def get_caller_id(
    x_user_id: Optional[str] = Header(None, description="Caller identity set by the gateway"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Return the caller identity from the ``X-User-Id`` header, or the bearer token
    when no header is present.
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    if credentials and credentials.credentials:
        return credentials.credentials
    logger.warning("[AUTH] Rejected analytics request without caller identity")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )
