"""
AIInteraction DAO

Purpose
-------
Data-access layer for the `AIInteraction` log. Provides:
- Interaction creation (one row per answered assistant request)
- Per-user history, newest first, with offset pagination
- Ownership-checked lookup and feedback updates
- Bulk deletion of a user's history
- Aggregates for the admin analytics view

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Rows are immutable apart from `feedback`.
"""

import logging
from uuid import UUID
from sqlalchemy import desc, func
from sqlalchemy.orm import Session
from refugeeconnect.database.entities.ai_interaction import AIInteraction

logger = logging.getLogger(__name__)


class AIInteractionDao:
    """
    Data Access Object (DAO) for `AIInteraction` rows.
    """

    def createInteraction(self, session: Session, interaction: AIInteraction) -> AIInteraction:
        try:
            session.add(interaction)
            return interaction
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.createInteraction. Error Message: {e}")
            raise

    def fetchInteractionsByUser(self, session: Session, user_id: UUID, skip: int, limit: int) -> list[AIInteraction]:
        """
        Return one page of a user's interactions, newest first.

        Parameters
        ----------
        user_id : UUID
            Owner of the interactions.
        skip, limit : int
            Pagination window.
        """
        try:
            return (
                session.query(AIInteraction)
                .filter(AIInteraction.user_id == user_id)
                .order_by(desc(AIInteraction.timestamp))
                .offset(skip)
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.fetchInteractionsByUser. Error Message: {e}")
            raise

    def countInteractionsByUser(self, session: Session, user_id: UUID) -> int:
        try:
            return session.query(AIInteraction).filter(AIInteraction.user_id == user_id).count()
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.countInteractionsByUser. Error Message: {e}")
            raise

    def fetchOwnedInteraction(self, session: Session, interaction_id: UUID, user_id: UUID) -> AIInteraction | None:
        """Return the interaction only if it belongs to `user_id`."""
        try:
            return (
                session.query(AIInteraction)
                .filter(AIInteraction.id == interaction_id)
                .filter(AIInteraction.user_id == user_id)
                .one_or_none()
            )
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.fetchOwnedInteraction. Error Message: {e}")
            raise

    def updateFeedback(self, session: Session, interaction: AIInteraction, feedback: dict) -> None:
        try:
            interaction.feedback = feedback
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.updateFeedback. Error Message: {e}")
            raise

    def deleteInteractionsByUser(self, session: Session, user_id: UUID) -> int:
        """Delete every interaction owned by `user_id`; returns the number removed."""
        try:
            return (
                session.query(AIInteraction)
                .filter(AIInteraction.user_id == user_id)
                .delete(synchronize_session=False)
            )
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.deleteInteractionsByUser. Error Message: {e}")
            raise

    def fetchAggregates(self, session: Session) -> dict:
        """
        Totals across all interactions.

        Returns
        -------
        dict
            totalInteractions, averageConfidence, averageProcessingTime and
            languageDistribution ({language: count}).
        """
        try:
            total, avg_confidence, avg_processing = session.query(
                func.count(AIInteraction.id),
                func.avg(AIInteraction.confidence),
                func.avg(AIInteraction.processing_time),
            ).one()
            languages = (
                session.query(AIInteraction.language, func.count(AIInteraction.id))
                .group_by(AIInteraction.language)
                .all()
            )
            return {
                "totalInteractions": total,
                "averageConfidence": float(avg_confidence) if avg_confidence is not None else None,
                "averageProcessingTime": float(avg_processing) if avg_processing is not None else None,
                "languageDistribution": {language: count for language, count in languages},
            }
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.fetchAggregates. Error Message: {e}")
            raise

    def fetchRecentInteractions(self, session: Session, limit: int) -> list[AIInteraction]:
        try:
            return (
                session.query(AIInteraction)
                .order_by(desc(AIInteraction.timestamp))
                .limit(limit)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in AIInteractionDao.fetchRecentInteractions. Error Message: {e}")
            raise
