"""
AIInteraction ORM Model
=======================

One row per completed AI assistant request: the question, the generated
answer, the language, how long the request took and which information
records were cited. Rows are written once by the assistant pipeline; the only
later mutation is attaching user feedback. A user may bulk-clear their own
history.

``confidence`` is kept for schema compatibility; the pipeline does not
populate it.
"""

from refugeeconnect.database.config.connection_engine import declarativeBase, JSONDocument
from sqlalchemy.dialects.postgresql import UUID as pgUUID
from sqlalchemy import ForeignKey, DateTime, Float, Integer, VARCHAR, TEXT, Index
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone


class AIInteraction(declarativeBase):
    """
    ORM model for the `ai_interaction` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    user_id : UUID | None
        Owner of the interaction (FK → app_user.id).
    session_id : str | None
        Optional client session identifier.
    query : str
        The user's question (never empty).
    response : str
        The assistant's answer (never empty).
    language : str
        Language code the answer was requested in.
    context : str | None
        Free-text context supplied by the client.
    confidence : float | None
        Unused; always None.
    sources : list[dict]
        ``{title, url, type}`` citations, one per retrieved information record.
    feedback : dict | None
        ``{helpful, rating, comment}`` once the user rated the answer.
    processing_time : int
        Wall-clock milliseconds spent in the pipeline.
    timestamp : datetime
        Creation time (UTC).
    """

    __tablename__ = "ai_interaction"

    id: Mapped[UUID] = mapped_column(pgUUID(as_uuid=True), primary_key=True)

    user_id: Mapped[UUID | None] = mapped_column(
        pgUUID(as_uuid=True), ForeignKey("app_user.id"), nullable=True
    )

    session_id: Mapped[str | None] = mapped_column(VARCHAR(255), nullable=True)

    query: Mapped[str] = mapped_column(TEXT, nullable=False)

    response: Mapped[str] = mapped_column(TEXT, nullable=False)

    language: Mapped[str] = mapped_column(VARCHAR(8), nullable=False, default="en")

    context: Mapped[str | None] = mapped_column(TEXT, nullable=True)

    confidence: Mapped[float | None] = mapped_column(Float, nullable=True)

    sources: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)

    feedback: Mapped[dict | None] = mapped_column(JSONDocument, nullable=True)

    processing_time: Mapped[int | None] = mapped_column(Integer, nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (Index("ix_ai_interaction_user_timestamp", "user_id", "timestamp"),)

    def __init__(
        self,
        query: str,
        response: str,
        user_id: UUID | None = None,
        language: str = "en",
        processing_time: int | None = None,
        sources: list | None = None,
        session_id: str | None = None,
        context: str | None = None,
    ):
        if not query or not query.strip():
            raise ValueError("AIInteraction.query must not be empty")
        if not response or not response.strip():
            raise ValueError("AIInteraction.response must not be empty")
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.session_id = session_id
        self.query = query
        self.response = response
        self.language = language or "en"
        self.context = context
        self.confidence = None
        self.sources = sources or []
        self.feedback = None
        self.processing_time = processing_time
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "query": self.query,
            "response": self.response,
            "language": self.language,
            "confidence": self.confidence,
            "timestamp": self.timestamp,
            "sources": list(self.sources or []),
            "feedback": self.feedback,
            "processingTime": self.processing_time,
        }

    def __str__(self) -> str:
        return f"AIInteraction: id:{self.id}, user: {self.user_id}, language: {self.language}, query: {self.query}"
