"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides:
- Creation with password hashing
- Lookup by id, by email, or by email-or-phone (uniqueness checks)
- Login timestamp, profile and password updates

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller
  (normally through `@transactional`).
- Business rules (password confirmation, session handling) live in the
  service layer (`database.core.funcs`).
- Passwords are hashed with `EncryptionDec.hash_password(...)` before insert
  and on every password change.

Error Handling
--------------
- Each method logs the failure and re-raises so the caller decides the policy.
"""

import logging
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy import or_
from sqlalchemy.orm import Session
from refugeeconnect.database.entities.user import User
from refugeeconnect.crypt.encrypt_decrypt import EncryptionDec

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {
    "first_name",
    "last_name",
    "phone",
    "preferred_language",
    "refugee_status",
    "location",
    "demographics",
    "preferences",
}
"""Columns a user may change through a profile update."""


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    """

    def createUser(self, session: Session, user_data: User) -> bool:
        """
        Create a new user with a hashed password.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_data : User
            User entity whose `password` still holds the plaintext secret.

        Returns
        -------
        bool
            True once the user has been staged in the session.
        """
        try:
            enc = EncryptionDec()
            user_data.password = enc.hash_password(text=user_data.password)
            session.add(user_data)
            return True
        except Exception as e:
            logger.error(f"Error in UserDao.createUser. Error Message: {e}")
            raise

    def fetchUserById(self, session: Session, user_id: UUID) -> User | None:
        try:
            return session.get(User, user_id)
        except Exception as e:
            logger.error(f"Error in UserDao.fetchUserById. Error Message: {e}")
            raise

    def fetchUserByEmail(self, session: Session, email: str) -> list[User]:
        """
        Fetch a user by email (case-insensitive).

        Returns
        -------
        list[User]
            At most one user.
        """
        try:
            return (
                session.query(User)
                .filter(User.email == email.strip().lower())
                .limit(1)
                .all()
            )
        except Exception as e:
            logger.error(f"Error in UserDao.fetchUserByEmail. Error Message: {e}")
            raise

    def fetchUserByEmailOrPhone(self, session: Session, email: str, phone: str) -> list[User]:
        """Return users already holding `email` or `phone` (used to reject duplicates)."""
        try:
            return (
                session.query(User)
                .filter(or_(User.email == email.strip().lower(), User.phone == phone))
                .all()
            )
        except Exception as e:
            logger.error(f"Error in UserDao.fetchUserByEmailOrPhone. Error Message: {e}")
            raise

    def fetchUsersByIds(self, session: Session, user_ids: list[UUID]) -> dict[UUID, User]:
        """Map each found id to its user (missing ids are simply absent)."""
        try:
            if not user_ids:
                return {}
            users = session.query(User).filter(User.id.in_(set(user_ids))).all()
            return {user.id: user for user in users}
        except Exception as e:
            logger.error(f"Error in UserDao.fetchUsersByIds. Error Message: {e}")
            raise

    def updateLastLogin(self, session: Session, user: User) -> None:
        try:
            user.last_login = datetime.now(timezone.utc)
        except Exception as e:
            logger.error(f"Error in UserDao.updateLastLogin. Error Message: {e}")
            raise

    def updateProfile(self, session: Session, user: User, changes: dict) -> User:
        """
        Apply allowed profile changes to `user`.

        Keys outside `PROFILE_FIELDS` (password, id, admin flags, ...) are ignored.
        """
        try:
            for key, value in changes.items():
                if key in PROFILE_FIELDS:
                    setattr(user, key, value)
            return user
        except Exception as e:
            logger.error(f"Error in UserDao.updateProfile. Error Message: {e}")
            raise

    def updatePassword(self, session: Session, user: User, new_password: str) -> None:
        try:
            user.password = EncryptionDec().hash_password(text=new_password)
        except Exception as e:
            logger.error(f"Error in UserDao.updatePassword. Error Message: {e}")
            raise
