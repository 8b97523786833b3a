"""FastAPI dependencies for caller identity and shared resources.

The caller is identified by the X-User-Id header, which an upstream auth
layer is expected to set after validating the session.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from src.data.models import User

logger = logging.getLogger(__name__)


def get_current_user(
    request: Request,
    x_user_id: int | None = Header(default=None, alias="X-User-Id"),
) -> User:
    """Resolve the calling user.

    Raises:
        HTTPException: 401 if no identity was supplied, 404 if it is unknown
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    user = request.app.state.users.get_user(x_user_id)
    if user is None:
        logger.warning("Request for unknown user_id=%s", x_user_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def require_guardian(user: User = Depends(get_current_user)) -> User:
    """Like get_current_user, but only guardians pass (403 otherwise)."""
    if not user.is_guardian:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only guardians can use the AI schedule assistant",
        )
    return user


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")
