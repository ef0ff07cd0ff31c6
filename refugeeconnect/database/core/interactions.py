"""
Service-layer operations for the assistant interaction log.
"""

import logging
from fastapi import HTTPException
from sqlalchemy.orm import Session
from refugeeconnect.database.helpers.transactionManagement import transactional
from refugeeconnect.database.daos.ai_interaction_dao import AIInteractionDao
from refugeeconnect.database.daos.user_dao import UserDao
from refugeeconnect.database.entities.ai_interaction import AIInteraction
from refugeeconnect.database.core.funcs import build_pagination, parse_uuid

logger = logging.getLogger(__name__)


@transactional
def record_interaction(
    session: Session,
    user_id: str,
    query: str,
    response: str,
    language: str,
    processing_time: int,
    sources: list[dict],
) -> str:
    """
    Persist one answered assistant request.

    Returns
    -------
    str
        The new interaction id.
    """
    interaction = AIInteraction(
        query=query,
        response=response,
        user_id=parse_uuid(user_id),
        language=language,
        processing_time=processing_time,
        sources=sources,
    )
    AIInteractionDao().createInteraction(session, interaction)
    session.flush()
    return str(interaction.id)


@transactional
def get_history(session: Session, user_id: str, page: int, limit: int) -> dict:
    """One page of the user's interactions, newest first."""
    interaction_dao = AIInteractionDao()
    user_uuid = parse_uuid(user_id)
    interactions = interaction_dao.fetchInteractionsByUser(session, user_uuid, (page - 1) * limit, limit)
    total = interaction_dao.countInteractionsByUser(session, user_uuid)
    return {
        "interactions": [interaction.to_dict() for interaction in interactions],
        "pagination": build_pagination(page, limit, len(interactions), total),
    }


@transactional
def submit_feedback(session: Session, interaction_id: str, user_id: str, feedback: dict) -> dict:
    """Replace the feedback of an interaction the user owns."""
    interaction_uuid = parse_uuid(interaction_id)
    interaction_dao = AIInteractionDao()
    interaction = (
        interaction_dao.fetchOwnedInteraction(session, interaction_uuid, parse_uuid(user_id))
        if interaction_uuid
        else None
    )
    if interaction is None:
        raise HTTPException(status_code=404, detail="Interaction not found")
    interaction_dao.updateFeedback(session, interaction, feedback)
    return interaction.to_dict()


@transactional
def clear_history(session: Session, user_id: str) -> int:
    deleted = AIInteractionDao().deleteInteractionsByUser(session, parse_uuid(user_id))
    logger.info("Cleared %s interactions for user %s", deleted, user_id)
    return deleted


@transactional
def get_analytics(session: Session) -> dict:
    """
    Aggregates over all interactions (`analytics`) plus the ten most recent
    ones (`recentInteractions`).

    Recent interactions carry a `user` summary (name and email) when the
    interaction was made by a signed-in user.
    """
    interaction_dao = AIInteractionDao()
    analytics = interaction_dao.fetchAggregates(session)
    recent = interaction_dao.fetchRecentInteractions(session, 10)
    users = UserDao().fetchUsersByIds(session, [i.user_id for i in recent if i.user_id])

    recent_serialized = []
    for interaction in recent:
        item = interaction.to_dict()
        user = users.get(interaction.user_id)
        item["user"] = (
            {"firstName": user.first_name, "lastName": user.last_name, "email": user.email} if user else None
        )
        recent_serialized.append(item)

    return {"analytics": analytics, "recentInteractions": recent_serialized}
