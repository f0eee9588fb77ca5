"""User schema definitions."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """A full row of the users table."""

    model_config = ConfigDict(frozen=True)

    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    facebook_id: str = Field(description="External identity id from the social login provider.")
    facebook_token: Optional[str] = None
    session_id: Optional[str] = Field(
        default=None, description="Current session token; None when logged out."
    )
    tutor_profile_id: Optional[int] = Field(
        default=None, description="Linked tutor profile, if the user is a tutor."
    )


class UserProfile(BaseModel):
    """Public profile fields of a user."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    email: Optional[str] = None
    tutor_profile_id: Optional[int] = None


# --- API models ---

class SignInRequest(BaseModel):
    """Identity handed over by the social login callback."""

    facebook_id: str = Field(min_length=1, max_length=64)
    facebook_token: str = Field(min_length=1)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)


class SignInResponse(BaseModel):
    user_id: int
    session_id: str
    created: bool = Field(description="Whether the user was created by this sign-in.")


class UserProfileResponse(BaseModel):
    user_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    tutor_profile_id: Optional[int] = None
    is_tutor: bool
