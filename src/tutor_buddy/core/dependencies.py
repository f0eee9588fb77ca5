"""Dependency injection module for FastAPI.

This module provides the gateway and the authenticated caller to routes.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from tutor_buddy.config import load_store_config
from tutor_buddy.core.exceptions import NotFoundError
from tutor_buddy.schemas.user import UserRecord
from tutor_buddy.utils.gateway import StoreGateway

# Singleton gateway, built on first use
_gateway_instance: Optional[StoreGateway] = None


def get_gateway() -> StoreGateway:
    """Get the StoreGateway singleton.

    Returns:
        StoreGateway built from the environment configuration.
    """
    global _gateway_instance
    if _gateway_instance is None:
        _gateway_instance = StoreGateway.from_config(load_store_config())
    return _gateway_instance


GatewayDep = Annotated[StoreGateway, Depends(get_gateway)]


def get_current_user(
    gateway: GatewayDep,
    x_session_id: Optional[str] = Header(default=None),
) -> UserRecord:
    """Resolve the caller from the ``X-Session-Id`` header.

    Raises:
        HTTPException: 401 if the header is missing or no user holds it.
    """
    if not x_session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing session",
        )
    try:
        return gateway.user.find_by_session(x_session_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session",
        )


CurrentUserDep = Annotated[UserRecord, Depends(get_current_user)]


def get_current_tutor_id(user: CurrentUserDep) -> int:
    """Return the tutor profile id of the caller.

    Raises:
        HTTPException: 403 if the caller is not a tutor.
    """
    if not user.tutor_profile_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only tutors can access this resource",
        )
    return user.tutor_profile_id


CurrentTutorIdDep = Annotated[int, Depends(get_current_tutor_id)]
