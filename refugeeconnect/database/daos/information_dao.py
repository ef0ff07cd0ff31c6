"""
Information DAO

Purpose
-------
Data-access layer for the `Information` ORM entity. Provides:
- Creation, lookup by id, partial updates and soft deletion
- Filtered, paginated listing of active records (priority first, newest next)
- Full-text relevance search used by the AI assistant
- Home/dashboard feeds (latest, urgent, personalized)
- View counting and like toggling

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Audience/district filters and full-text search use PostgreSQL JSONB and
  text-search operators.
- Full-text matching follows "any term" semantics: a record matches when it
  contains at least one of the query's terms, and records containing more
  of them rank higher (`ts_rank`).

Error Handling
--------------
- Methods log and re-raise; the service layer decides whether a failure is
  fatal (CRUD) or degrades gracefully (AI search).
"""

import logging
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy import TEXT, cast, desc, func, or_, type_coerce
from sqlalchemy.dialects.postgresql import JSONB, TSQUERY
from sqlalchemy.orm import Session
from refugeeconnect.database.entities.information import Information, priority_rank, search_document

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "title",
    "content",
    "category",
    "target_audience",
    "priority",
    "location",
    "media",
    "contacts",
    "tags",
    "expires_at",
}


def any_term_query(text: str):
    """
    Build a tsquery matching documents that contain any of the terms in `text`.

    `plainto_tsquery` joins terms with AND; swapping the operators yields OR.
    """
    conjunctive = cast(func.plainto_tsquery("english", text), TEXT)
    return cast(func.replace(conjunctive, "&", "|"), TSQUERY)


def json_array_contains(column, value):
    return type_coerce(column, JSONB).contains([value])


class InformationDao:
    """
    Data Access Object (DAO) for `Information` records.
    """

    def createInformation(self, session: Session, information: Information) -> Information:
        try:
            session.add(information)
            return information
        except Exception as e:
            logger.error(f"Error in InformationDao.createInformation. Error Message: {e}")
            raise

    def fetchInformationById(self, session: Session, information_id: UUID) -> Information | None:
        try:
            return session.get(Information, information_id)
        except Exception as e:
            logger.error(f"Error in InformationDao.fetchInformationById. Error Message: {e}")
            raise

    def _filteredQuery(self, session: Session, filters: dict):
        query = session.query(Information).filter(Information.is_active.is_(True))
        if filters.get("category"):
            query = query.filter(Information.category == filters["category"])
        if filters.get("priority"):
            query = query.filter(Information.priority == filters["priority"])
        if filters.get("target_audience"):
            query = query.filter(
                or_(
                    json_array_contains(Information.target_audience, filters["target_audience"]),
                    json_array_contains(Information.target_audience, "all"),
                )
            )
        if filters.get("district"):
            query = query.filter(
                type_coerce(Information.location, JSONB)["districts"].contains([filters["district"]])
            )
        if filters.get("search"):
            query = query.filter(search_document().op("@@")(any_term_query(filters["search"])))
        return query

    def fetchInformation(self, session: Session, filters: dict, skip: int, limit: int) -> list[Information]:
        """
        List active records matching `filters`, most pressing and newest first.

        Parameters
        ----------
        filters : dict
            Optional keys: category, priority, target_audience, district, search.
        skip, limit : int
            Pagination window.
        """
        try:
            return (
                self._filteredQuery(session, filters)
                .order_by(desc(priority_rank()), desc(Information.created_at))
                .offset(skip)
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in InformationDao.fetchInformation. Error Message: {e}")
            raise

    def countInformation(self, session: Session, filters: dict) -> int:
        try:
            return self._filteredQuery(session, filters).count()
        except Exception as e:
            logger.error(f"Error in InformationDao.countInformation. Error Message: {e}")
            raise

    def searchQuery(self, session: Session, text: str, limit: int, include_inactive: bool = False):
        """
        Query ranking records against `text` by full-text score, best match first.

        Parameters
        ----------
        text : str
            Free-text user query.
        limit : int
            Maximum number of records returned.
        include_inactive : bool
            When False, retired records are excluded before ranking.
        """
        document = search_document()
        ts_query = any_term_query(text)
        query = session.query(Information).filter(document.op("@@")(ts_query))
        if not include_inactive:
            query = query.filter(Information.is_active.is_(True))
        return query.order_by(desc(func.ts_rank(document, ts_query))).limit(limit)

    def searchByText(self, session: Session, text: str, limit: int, include_inactive: bool = False) -> list[Information]:
        try:
            return self.searchQuery(session, text, limit, include_inactive).all()
        except Exception as e:
            logger.error(f"Error in InformationDao.searchByText. Error Message: {e}")
            raise

    def fetchLatestForAudience(self, session: Session, audience: str, limit: int) -> list[Information]:
        try:
            return (
                session.query(Information)
                .filter(Information.is_active.is_(True))
                .filter(json_array_contains(Information.target_audience, audience))
                .order_by(desc(Information.created_at))
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in InformationDao.fetchLatestForAudience. Error Message: {e}")
            raise

    def fetchLatestByPriority(self, session: Session, priority: str, limit: int) -> list[Information]:
        try:
            return (
                session.query(Information)
                .filter(Information.is_active.is_(True))
                .filter(Information.priority == priority)
                .order_by(desc(Information.created_at))
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in InformationDao.fetchLatestByPriority. Error Message: {e}")
            raise

    def fetchPersonalized(self, session: Session, refugee_status: str, district: str | None, limit: int) -> list[Information]:
        """Active records aimed at the user's status (or everyone), or scoped to the user's district."""
        try:
            conditions = [
                json_array_contains(Information.target_audience, refugee_status),
                json_array_contains(Information.target_audience, "all"),
            ]
            if district:
                conditions.append(type_coerce(Information.location, JSONB)["districts"].contains([district]))
            return (
                session.query(Information)
                .filter(Information.is_active.is_(True))
                .filter(or_(*conditions))
                .order_by(desc(priority_rank()), desc(Information.created_at))
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in InformationDao.fetchPersonalized. Error Message: {e}")
            raise

    def updateInformation(self, session: Session, information: Information, changes: dict, user_id: UUID) -> Information:
        """Apply `changes` restricted to `UPDATABLE_FIELDS` and stamp the editor."""
        try:
            for key, value in changes.items():
                if key in UPDATABLE_FIELDS:
                    setattr(information, key, value)
            information.updated_by = user_id
            information.updated_at = datetime.now(timezone.utc)
            return information
        except Exception as e:
            logger.error(f"Error in InformationDao.updateInformation. Error Message: {e}")
            raise

    def softDelete(self, session: Session, information: Information, user_id: UUID) -> None:
        try:
            information.is_active = False
            information.updated_by = user_id
            information.updated_at = datetime.now(timezone.utc)
        except Exception as e:
            logger.error(f"Error in InformationDao.softDelete. Error Message: {e}")
            raise

    def incrementViews(self, session: Session, information: Information) -> None:
        try:
            information.views = (information.views or 0) + 1
        except Exception as e:
            logger.error(f"Error in InformationDao.incrementViews. Error Message: {e}")
            raise

    def toggleLike(self, session: Session, information: Information, user_id: str) -> bool:
        """
        Add or remove `user_id` from the record's likes.

        Returns
        -------
        bool
            True when the user now likes the record.
        """
        try:
            likes = list(information.likes or [])
            if user_id in likes:
                likes.remove(user_id)
                liked = False
            else:
                likes.append(user_id)
                liked = True
            # reassign so the JSON column is flagged dirty
            information.likes = likes
            return liked
        except Exception as e:
            logger.error(f"Error in InformationDao.toggleLike. Error Message: {e}")
            raise
