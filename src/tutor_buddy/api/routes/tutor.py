"""Tutor profile routes."""

from fastapi import APIRouter, HTTPException, status

from tutor_buddy.core.dependencies import CurrentUserDep, GatewayDep
from tutor_buddy.core.exceptions import TutorProfileExistsError
from tutor_buddy.schemas.tutor import CreateTutorProfileResponse, TutorProfile

router = APIRouter(prefix="/api/v1/tutor", tags=["Tutor"])


@router.get("/profile", response_model=TutorProfile, summary="Get tutor profile")
def get_tutor_profile(current_user: CurrentUserDep, gateway: GatewayDep) -> TutorProfile:
    profile = gateway.tutor.get_profile(current_user.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tutor profile not found",
        )
    return profile


@router.post(
    "/profile",
    response_model=CreateTutorProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Become a tutor",
)
def create_tutor_profile(
    current_user: CurrentUserDep, gateway: GatewayDep
) -> CreateTutorProfileResponse:
    """Provision a tutor profile for the caller.

    A user acquires a tutor profile at most once.
    """
    try:
        tutor_profile_id = gateway.tutor.create_profile(current_user.id)
    except TutorProfileExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Tutor profile already exists",
        )
    return CreateTutorProfileResponse(tutor_profile_id=tutor_profile_id)
