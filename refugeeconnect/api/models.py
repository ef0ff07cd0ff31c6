"""
Pydantic models used for request validation and API data contracts.

Request bodies accept the camelCase keys the web client sends (``firstName``,
``confirmPassword``...) as well as the snake_case field names.
"""

from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

LanguageCode = Literal["en", "sw", "lg", "ac", "teo", "lgg", "rw", "ar"]
RefugeeStatus = Literal["asylum_seeker", "refugee", "returnee", "local_community"]

MAX_QUERY_LENGTH = 1000
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCredentials(CamelModel):
    """
    Represents login credentials for a user.
    """
    email: str = Field(..., pattern=EMAIL_PATTERN)
    """The account email (matched case-insensitively)."""
    password: str = Field(..., min_length=1)
    """The plaintext password provided for authentication."""


class Coordinates(CamelModel):
    lat: Optional[float] = None
    lng: Optional[float] = None


class UserLocation(CamelModel):
    district: Optional[str] = None
    settlement: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class Demographics(CamelModel):
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Literal["male", "female", "other", "prefer_not_to_say"]] = None
    nationality: Optional[str] = None
    family_size: Optional[int] = Field(None, ge=1)


class Accessibility(CamelModel):
    text_size: Literal["small", "medium", "large"] = "medium"
    high_contrast: bool = False
    screen_reader: bool = False


class Preferences(CamelModel):
    notifications: bool = True
    language: LanguageCode = "en"
    accessibility: Accessibility = Accessibility()


class UserData(CamelModel):
    """
    Registration payload.
    """
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    phone: str = Field(..., min_length=7, max_length=20)
    password: str = Field(..., min_length=6)
    confirm_password: str
    refugee_status: RefugeeStatus
    preferred_language: LanguageCode = "en"
    district: Optional[str] = None
    settlement: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Literal["male", "female", "other", "prefer_not_to_say"]] = None
    nationality: Optional[str] = None
    family_size: Optional[int] = Field(None, ge=1)

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class ProfileUpdate(CamelModel):
    """Partial profile update; unset fields are left untouched."""
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    preferred_language: Optional[LanguageCode] = None
    refugee_status: Optional[RefugeeStatus] = None
    location: Optional[UserLocation] = None
    demographics: Optional[Demographics] = None
    preferences: Optional[Preferences] = None


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=6)
    confirm_password: str


class AIQuery(CamelModel):
    """
    A question for the assistant.
    """
    message: str = ""
    """User question; the route rejects blank or over-long messages."""
    language: Optional[str] = None
    """Response language; defaults to the user's preferred language."""


class InteractionFeedback(CamelModel):
    """
    Feedback on one assistant answer.
    """
    helpful: bool = False
    """Accepts true/false or the strings "true"/"false"; omitted means false."""
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class CommunityMessageIn(CamelModel):
    message: str
    group_id: Optional[int] = None

    @field_validator("message")
    @classmethod
    def check_message(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Message is required")
        return value.strip()


class EmergencyReport(CamelModel):
    type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: Optional[str] = None
    urgency: Optional[str] = None
    contact_phone: Optional[str] = None


