"""Tutor schema definitions."""

from pydantic import BaseModel, ConfigDict


class TutorProfile(BaseModel):
    """A tutor profile. It only carries its generated id for now."""

    model_config = ConfigDict(frozen=True)

    id: int


class CreateTutorProfileResponse(BaseModel):
    tutor_profile_id: int
