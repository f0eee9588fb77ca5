"""User and session routes.

Sign-in receives the identity already verified by the social login
callback; the provider handshake itself lives outside this service.
"""

import logging
import secrets

from fastapi import APIRouter, status

from tutor_buddy.core.dependencies import CurrentUserDep, GatewayDep
from tutor_buddy.core.exceptions import NotFoundError
from tutor_buddy.schemas.user import SignInRequest, SignInResponse, UserProfileResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["User"])

SESSION_TOKEN_BYTES = 32


@router.post("/session", response_model=SignInResponse, summary="Sign in")
def sign_in(req: SignInRequest, gateway: GatewayDep) -> SignInResponse:
    """Start a session, creating the user on their first sign-in.

    A returning user's stored provider token is replaced by the one from
    this sign-in.

    Args:
        req: Identity from the social login provider.
        gateway: Injected StoreGateway.

    Returns:
        The user id and a fresh session token.
    """
    created = False
    try:
        user = gateway.user.find_by_external_id(req.facebook_id)
    except NotFoundError:
        user_id = gateway.user.create(
            req.first_name,
            req.last_name,
            req.email,
            req.facebook_id,
            req.facebook_token,
        )
        created = True
    else:
        user_id = user.id
        if user.facebook_token != req.facebook_token:
            gateway.user.update_external_token(user_id, req.facebook_token)

    session_id = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
    gateway.user.create_session(user_id, session_id)
    logger.info("Started session for user %s", user_id)
    return SignInResponse(user_id=user_id, session_id=session_id, created=created)


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
def sign_out(current_user: CurrentUserDep, gateway: GatewayDep) -> None:
    gateway.user.terminate_session(current_user.id)
    logger.info("Terminated session for user %s", current_user.id)


@router.get("/user/profile", response_model=UserProfileResponse, summary="Current user")
def get_user_profile(current_user: CurrentUserDep, gateway: GatewayDep) -> UserProfileResponse:
    profile = gateway.user.get_profile(current_user.id)
    return UserProfileResponse(
        user_id=current_user.id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        email=profile.email,
        tutor_profile_id=profile.tutor_profile_id,
        is_tutor=gateway.user.is_tutor(current_user.id),
    )
