"""
Community ORM Models
====================

Persistent community groups and the messages posted to them. Both live in
the database so every worker process sees the same groups and history and
nothing is lost on restart.
"""

from refugeeconnect.database.config.connection_engine import declarativeBase
from sqlalchemy.dialects.postgresql import UUID as pgUUID
from sqlalchemy import ForeignKey, DateTime, Integer, VARCHAR, TEXT
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone

DEFAULT_GROUPS = (
    {
        "name": "Kampala Refugee Community",
        "description": "Community for refugees in Kampala",
        "members": 150,
        "location": "Kampala",
    },
    {
        "name": "Education Support Group",
        "description": "Sharing educational resources and opportunities",
        "members": 75,
        "location": "Nationwide",
    },
)
"""Groups created on first startup when the table is empty."""


class CommunityGroup(declarativeBase):
    """ORM model for the `community_group` table."""

    __tablename__ = "community_group"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    description: Mapped[str] = mapped_column(TEXT, nullable=False, default="")

    members: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    location: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, default="")

    def __init__(self, name: str, description: str = "", members: int = 0, location: str = ""):
        self.name = name
        self.description = description
        self.members = members
        self.location = location

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "members": self.members,
            "location": self.location,
        }


class CommunityMessage(declarativeBase):
    """
    ORM model for the `community_message` table.

    ``group_id`` is nullable: messages posted without a group belong to the
    general board.
    """

    __tablename__ = "community_message"

    id: Mapped[UUID] = mapped_column(pgUUID(as_uuid=True), primary_key=True)

    group_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("community_group.id"), nullable=True
    )

    user_id: Mapped[UUID] = mapped_column(
        pgUUID(as_uuid=True), ForeignKey("app_user.id"), nullable=False
    )

    user_name: Mapped[str] = mapped_column(VARCHAR(512), nullable=False)

    message: Mapped[str] = mapped_column(TEXT, nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __init__(self, user_id: UUID, user_name: str, message: str, group_id: int | None = None):
        self.id = uuid.uuid4()
        self.group_id = group_id
        self.user_id = user_id
        self.user_name = user_name
        self.message = message
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "groupId": self.group_id,
            "userId": str(self.user_id),
            "userName": self.user_name,
            "message": self.message,
            "timestamp": self.timestamp,
        }
