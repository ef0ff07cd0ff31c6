"""
Information ORM Model
=====================

The ``Information`` model stores one multilingual informational article
(registration steps, healthcare access, legal rights, ...) in the
``information`` table.

Key features
~~~~~~~~~~~~
- ``title`` / ``content`` are maps from language code to localized text;
  English (``en``) is always present.
- Category, target audience and priority enums.
- Location scope (districts, settlements, national flag), media attachments,
  contact entries and free-text tags.
- Soft delete: records are retired with ``is_active = False`` and never removed.
- PostgreSQL GIN full-text index over English title, English content and tags,
  used by the AI assistant's relevance search.
"""

from refugeeconnect.database.config.connection_engine import declarativeBase, JSONDocument
from sqlalchemy.dialects.postgresql import UUID as pgUUID
from sqlalchemy import ForeignKey, DateTime, Boolean, Integer, VARCHAR, TEXT, Index, case, cast, func
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone

CATEGORIES = {
    "registration": "Refugee Registration",
    "legal_rights": "Legal Rights",
    "healthcare": "Healthcare",
    "education": "Education",
    "employment": "Employment",
    "housing": "Housing",
    "emergency": "Emergency",
    "community": "Community",
    "services": "Services",
}
"""Category value -> display label."""

TARGET_AUDIENCES = ("asylum_seeker", "refugee", "returnee", "local_community", "all")

PRIORITIES = ("low", "medium", "high", "urgent")
"""Ordered from least to most pressing."""

MEDIA_TYPES = ("image", "video", "audio", "document")


class Information(declarativeBase):
    """
    ORM model for the `information` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    title, content : dict[str, str]
        Localized text keyed by language code (``en`` required).
    category : str
        One of ``CATEGORIES``.
    target_audience : list[str]
        Subset of ``TARGET_AUDIENCES``.
    priority : str
        One of ``PRIORITIES``.
    location : dict
        ``{districts: [...], settlements: [...], isNational: bool}``.
    media : list[dict]
        ``{type, url, caption, language}`` entries.
    contacts : list[dict]
        ``{organization, phone, email, address, hours}`` entries.
    tags : list[str]
        Free-text tags, part of the full-text index.
    likes : list[str]
        Ids of users who liked the record.
    is_active : bool
        False once the record has been retired.
    """

    __tablename__ = "information"

    id: Mapped[UUID] = mapped_column(pgUUID(as_uuid=True), primary_key=True)

    title: Mapped[dict] = mapped_column(JSONDocument, nullable=False)

    content: Mapped[dict] = mapped_column(JSONDocument, nullable=False)

    category: Mapped[str] = mapped_column(VARCHAR(32), nullable=False)

    target_audience: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)

    priority: Mapped[str] = mapped_column(VARCHAR(16), nullable=False, default="medium")

    location: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)

    media: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)

    contacts: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)

    tags: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)

    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    verified_by: Mapped[UUID | None] = mapped_column(
        pgUUID(as_uuid=True), ForeignKey("app_user.id"), nullable=True
    )

    created_by: Mapped[UUID] = mapped_column(
        pgUUID(as_uuid=True), ForeignKey("app_user.id"), nullable=False
    )

    updated_by: Mapped[UUID | None] = mapped_column(
        pgUUID(as_uuid=True), ForeignKey("app_user.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    likes: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __init__(
        self,
        title: dict,
        content: dict,
        category: str,
        created_by: UUID,
        target_audience: list | None = None,
        priority: str = "medium",
        location: dict | None = None,
        media: list | None = None,
        contacts: list | None = None,
        tags: list | None = None,
        expires_at: datetime | None = None,
        is_verified: bool = False,
    ):
        timestamp = datetime.now(timezone.utc)
        self.id = uuid.uuid4()
        self.title = title
        self.content = content
        self.category = category
        self.created_by = created_by
        self.target_audience = target_audience or ["all"]
        self.priority = priority or "medium"
        self.location = location or {"districts": [], "settlements": [], "isNational": False}
        self.media = media or []
        self.contacts = contacts or []
        self.tags = tags or []
        self.expires_at = expires_at
        self.is_verified = is_verified
        self.verified_by = None
        self.updated_by = None
        self.created_at = timestamp
        self.updated_at = timestamp
        self.views = 0
        self.likes = []
        self.is_active = True

    def to_dict(self) -> dict:
        """JSON-ready representation used by the API and the AI pipeline."""
        return {
            "id": str(self.id),
            "title": dict(self.title or {}),
            "content": dict(self.content or {}),
            "category": self.category,
            "targetAudience": list(self.target_audience or []),
            "priority": self.priority,
            "location": dict(self.location or {}),
            "media": list(self.media or []),
            "contacts": list(self.contacts or []),
            "tags": list(self.tags or []),
            "isVerified": self.is_verified,
            "verifiedBy": str(self.verified_by) if self.verified_by else None,
            "createdBy": str(self.created_by) if self.created_by else None,
            "updatedBy": str(self.updated_by) if self.updated_by else None,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "expiresAt": self.expires_at,
            "views": self.views,
            "likes": list(self.likes or []),
            "likesCount": len(self.likes or []),
            "isActive": self.is_active,
        }

    def __str__(self) -> str:
        return f"Information: id:{self.id}, category: {self.category}, title: {(self.title or {}).get('en')}"


def priority_rank():
    """SQL expression ranking priorities so that ``urgent`` sorts highest."""
    return case(
        {name: rank for rank, name in enumerate(PRIORITIES)},
        value=Information.priority,
        else_=-1,
    )


def search_document():
    """PostgreSQL tsvector over English title, English content and tags."""
    return func.to_tsvector(
        "english",
        func.coalesce(Information.title["en"].as_string(), "")
        + " "
        + func.coalesce(Information.content["en"].as_string(), "")
        + " "
        + func.coalesce(cast(Information.tags, TEXT), ""),
    )


Index("ix_information_fulltext", search_document(), postgresql_using="gin").ddl_if(dialect="postgresql")
Index("ix_information_category_priority", Information.category, Information.priority, Information.created_at.desc())
