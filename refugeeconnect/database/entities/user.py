"""
User ORM Model
==============

The ``User`` ORM model represents a registered member of the platform
(asylum seeker, refugee, returnee or host-community member). It maps to the
``app_user`` table.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Unique email (stored lower-cased) and unique phone number
- bcrypt-hashed password (hashing happens in ``UserDao.createUser``)
- Preferred language and refugee status enums
- Nested location, demographics and accessibility preferences (JSON)
- ``is_admin`` / ``is_active`` flags and login tracking
"""

from refugeeconnect.database.config.connection_engine import declarativeBase, JSONDocument
from sqlalchemy.dialects.postgresql import UUID as pgUUID
from sqlalchemy import VARCHAR, Boolean, TEXT, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone

SUPPORTED_LANGUAGES = ("en", "sw", "lg", "ac", "teo", "lgg", "rw", "ar")
"""English, Swahili, Luganda, Acholi, Ateso, Lugbara, Kinyarwanda, Arabic."""

REFUGEE_STATUSES = ("asylum_seeker", "refugee", "returnee", "local_community")


def default_preferences() -> dict:
    return {
        "notifications": True,
        "language": "en",
        "accessibility": {"textSize": "medium", "highContrast": False, "screenReader": False},
    }


class User(declarativeBase):
    """
    ORM model for the `app_user` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    first_name, last_name : str
        Display name parts.
    email : str
        Unique, lower-cased login identifier.
    phone : str
        Unique phone number.
    password : str
        bcrypt hash of the user's secret.
    preferred_language : str
        One of ``SUPPORTED_LANGUAGES``.
    refugee_status : str
        One of ``REFUGEE_STATUSES``.
    location : dict
        ``{district, settlement, coordinates: {lat, lng}}``.
    demographics : dict
        ``{age, gender, nationality, familySize}``.
    preferences : dict
        Notification and accessibility preferences.
    is_admin : bool
        Grants analytics access and edit rights on every information record.
    is_active : bool
        Deactivated accounts cannot log in.
    """

    __tablename__ = "app_user"

    id: Mapped[UUID] = mapped_column(pgUUID(as_uuid=True), primary_key=True)

    first_name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    last_name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)

    phone: Mapped[str] = mapped_column(VARCHAR(64), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Hashed password of the user."""

    preferred_language: Mapped[str] = mapped_column(VARCHAR(8), nullable=False, default="en")

    refugee_status: Mapped[str] = mapped_column(VARCHAR(32), nullable=False)

    location: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    demographics: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    preferences: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=default_preferences)

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __init__(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
        refugee_status: str,
        preferred_language: str = "en",
        location: dict | None = None,
        demographics: dict | None = None,
        preferences: dict | None = None,
        is_admin: bool = False,
    ):
        """
        Initialize a new User object.

        The password is stored as given; ``UserDao.createUser`` replaces it
        with its bcrypt hash before the row is added to the session.
        """
        self.id = uuid.uuid4()
        self.first_name = first_name
        self.last_name = last_name
        self.email = email.strip().lower()
        self.phone = phone
        self.password = password
        self.refugee_status = refugee_status
        self.preferred_language = preferred_language or "en"
        self.location = location or {}
        self.demographics = demographics or {}
        self.preferences = preferences or default_preferences()
        self.is_admin = is_admin
        self.is_active = True
        self.created_at = datetime.now(timezone.utc)
        self.last_login = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_session_dict(self) -> dict:
        """Public view of the user carried through requests (never includes the password)."""
        return {
            "id": str(self.id),
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "refugeeStatus": self.refugee_status,
            "preferredLanguage": self.preferred_language,
            "location": self.location,
            "demographics": self.demographics,
            "preferences": self.preferences,
            "isAdmin": self.is_admin,
            "isActive": self.is_active,
            "lastLogin": self.last_login,
        }

    def __str__(self) -> str:
        return f"User: id:{self.id}, email: {self.email}, status: {self.refugee_status}"
