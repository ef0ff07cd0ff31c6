"""
Community DAO

Data-access layer for community groups and their message boards.
"""

import logging
from sqlalchemy import asc, desc
from sqlalchemy.orm import Session
from refugeeconnect.database.entities.community import CommunityGroup, CommunityMessage

logger = logging.getLogger(__name__)


class CommunityDao:
    """
    Data Access Object (DAO) for `CommunityGroup` and `CommunityMessage`.
    """

    def fetchGroups(self, session: Session) -> list[CommunityGroup]:
        try:
            return session.query(CommunityGroup).order_by(asc(CommunityGroup.id)).all()
        except Exception as e:
            logger.error(f"Error in CommunityDao.fetchGroups. Error Message: {e}")
            raise

    def fetchGroupById(self, session: Session, group_id: int) -> CommunityGroup | None:
        try:
            return session.get(CommunityGroup, group_id)
        except Exception as e:
            logger.error(f"Error in CommunityDao.fetchGroupById. Error Message: {e}")
            raise

    def createGroup(self, session: Session, group: CommunityGroup) -> CommunityGroup:
        try:
            session.add(group)
            return group
        except Exception as e:
            logger.error(f"Error in CommunityDao.createGroup. Error Message: {e}")
            raise

    def incrementMembers(self, session: Session, group: CommunityGroup) -> None:
        try:
            group.members = (group.members or 0) + 1
        except Exception as e:
            logger.error(f"Error in CommunityDao.incrementMembers. Error Message: {e}")
            raise

    def createMessage(self, session: Session, message: CommunityMessage) -> CommunityMessage:
        try:
            session.add(message)
            return message
        except Exception as e:
            logger.error(f"Error in CommunityDao.createMessage. Error Message: {e}")
            raise

    def fetchRecentMessages(self, session: Session, group_id: int | None, limit: int) -> list[CommunityMessage]:
        """
        Return the last `limit` messages (optionally of one group) in chronological order.

        The newest `limit` rows are selected first, then re-ordered oldest → newest.
        """
        try:
            query = session.query(CommunityMessage)
            if group_id is not None:
                query = query.filter(CommunityMessage.group_id == group_id)
            latest = query.order_by(desc(CommunityMessage.timestamp)).limit(limit).all()
            return list(reversed(latest))
        except Exception as e:
            logger.error(f"Error in CommunityDao.fetchRecentMessages. Error Message: {e}")
            raise
