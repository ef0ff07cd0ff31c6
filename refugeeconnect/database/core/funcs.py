"""
Service-layer operations for accounts, information records and community boards.

All functions are wrapped with the `@transactional` decorator, which manages
SQLAlchemy sessions and transactions automatically. Each function receives an
injected `session: Session` provided by the decorator.

Functions return plain dicts shaped for the API (ORM objects never leave a
transaction). Missing records raise `HTTPException(404)` and ownership
violations raise `HTTPException(403)`; the decorator rolls back in both cases.
"""

import math
import uuid
import logging
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy.orm import Session
from refugeeconnect.database.helpers.transactionManagement import transactional
from refugeeconnect.database.daos.user_dao import UserDao
from refugeeconnect.database.daos.information_dao import InformationDao
from refugeeconnect.database.daos.ai_interaction_dao import AIInteractionDao
from refugeeconnect.database.daos.community_dao import CommunityDao
from refugeeconnect.database.entities.user import User
from refugeeconnect.database.entities.information import Information
from refugeeconnect.database.entities.community import CommunityGroup, CommunityMessage, DEFAULT_GROUPS
from refugeeconnect.crypt.encrypt_decrypt import EncryptionDec

logger = logging.getLogger(__name__)


def parse_uuid(value) -> UUID | None:
    """Return `value` as a UUID, or None when it is not one."""
    if isinstance(value, UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def build_pagination(page: int, limit: int, returned: int, total: int) -> dict:
    skip = (page - 1) * limit
    return {
        "current": page,
        "total": math.ceil(total / limit) if limit else 0,
        "hasNext": skip + returned < total,
        "hasPrev": page > 1,
    }


def _author_summary(user: User | None) -> dict | None:
    if user is None:
        return None
    return {"id": str(user.id), "firstName": user.first_name, "lastName": user.last_name}


def _with_authors(session: Session, records: list[Information]) -> list[dict]:
    """Serialize records, replacing creator/editor ids with name summaries."""
    user_ids = [r.created_by for r in records] + [r.updated_by for r in records if r.updated_by]
    users = UserDao().fetchUsersByIds(session, user_ids)
    serialized = []
    for record in records:
        item = record.to_dict()
        item["createdBy"] = _author_summary(users.get(record.created_by)) or item["createdBy"]
        if record.updated_by:
            item["updatedBy"] = _author_summary(users.get(record.updated_by)) or item["updatedBy"]
        serialized.append(item)
    return serialized


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

@transactional
def register_user(session: Session, data: dict) -> dict:
    """
    Create a new account.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    data : dict
        Registration fields (snake_case): first_name, last_name, email, phone,
        password, confirm_password, refugee_status, preferred_language,
        district, settlement, age, gender, nationality, family_size.

    Returns
    -------
    dict
        - On success: {'res': True, 'detail': '', 'user': <session user>}
        - On failure: {'res': False, 'detail': <reason>}
    """
    if data["password"] != data["confirm_password"]:
        return {"res": False, "detail": "Passwords do not match"}

    user_dao = UserDao()
    if user_dao.fetchUserByEmailOrPhone(session, data["email"], data["phone"]):
        return {"res": False, "detail": "User with this email or phone already exists"}

    user = User(
        first_name=data["first_name"],
        last_name=data["last_name"],
        email=data["email"],
        phone=data["phone"],
        password=data["password"],
        refugee_status=data["refugee_status"],
        preferred_language=data.get("preferred_language") or "en",
        location={"district": data.get("district"), "settlement": data.get("settlement")},
        demographics={
            "age": data.get("age"),
            "gender": data.get("gender"),
            "nationality": data.get("nationality"),
            "familySize": data.get("family_size"),
        },
    )
    user_dao.createUser(session=session, user_data=user)
    logger.info("Registered user %s", user.id)
    return {"res": True, "detail": "", "user": user.to_session_dict()}


@transactional
def login_user(session: Session, email: str, password: str) -> dict:
    """
    Authenticate by email (case-insensitive) and password.

    Returns
    -------
    dict
        - authenticated (bool)
        - detail (str): reason on failure
        - status (int): HTTP status to use on failure (401 bad credentials, 403 deactivated)
        - user_details (dict | None): session user on success
    """
    user_dao = UserDao()
    enc = EncryptionDec()
    users = user_dao.fetchUserByEmail(session, email)
    if not users or not enc.check_passwords(password, users[0].password):
        return {"authenticated": False, "detail": "Invalid email or password", "status": 401, "user_details": None}

    user = users[0]
    if not user.is_active:
        return {
            "authenticated": False,
            "detail": "Account is deactivated. Please contact support.",
            "status": 403,
            "user_details": None,
        }

    user_dao.updateLastLogin(session, user)
    return {"authenticated": True, "detail": "", "status": 200, "user_details": user.to_session_dict()}


@transactional
def get_session_user(session: Session, user_id: str) -> dict | None:
    """Resolve a session subject to the active user it names, or None."""
    user_uuid = parse_uuid(user_id)
    if user_uuid is None:
        return None
    user = UserDao().fetchUserById(session, user_uuid)
    if user is None or not user.is_active:
        return None
    return user.to_session_dict()


@transactional
def update_profile(session: Session, user_id: str, changes: dict) -> dict:
    """Apply profile changes (password and identity fields are never touched)."""
    user_dao = UserDao()
    user = user_dao.fetchUserById(session, parse_uuid(user_id))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    user_dao.updateProfile(session, user, changes)
    return user.to_session_dict()


@transactional
def change_password(session: Session, user_id: str, current_password: str, new_password: str, confirm_password: str) -> dict:
    """
    Replace the user's password after verifying the current one.

    Returns
    -------
    dict
        {'res': bool, 'detail': str}
    """
    if new_password != confirm_password:
        return {"res": False, "detail": "New passwords do not match"}
    user_dao = UserDao()
    user = user_dao.fetchUserById(session, parse_uuid(user_id))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not EncryptionDec().check_passwords(current_password, user.password):
        return {"res": False, "detail": "Current password is incorrect"}
    user_dao.updatePassword(session, user, new_password)
    return {"res": True, "detail": "Password changed successfully"}


# ---------------------------------------------------------------------------
# Information records
# ---------------------------------------------------------------------------

@transactional
def list_information(session: Session, filters: dict, page: int, limit: int) -> dict:
    """
    One page of active information records.

    Returns
    -------
    dict
        {'information': [...], 'pagination': {...}}
    """
    information_dao = InformationDao()
    skip = (page - 1) * limit
    records = information_dao.fetchInformation(session, filters, skip, limit)
    total = information_dao.countInformation(session, filters)
    return {
        "information": _with_authors(session, records),
        "pagination": build_pagination(page, limit, len(records), total),
    }


def _fetch_active(session: Session, information_id: str) -> Information:
    record = InformationDao().fetchInformationById(session, parse_uuid(information_id)) if parse_uuid(information_id) else None
    if record is None or not record.is_active:
        raise HTTPException(status_code=404, detail="Information not found")
    return record


def _fetch_editable(session: Session, information_id: str, user: dict) -> Information:
    record = InformationDao().fetchInformationById(session, parse_uuid(information_id)) if parse_uuid(information_id) else None
    if record is None:
        raise HTTPException(status_code=404, detail="Information not found")
    if str(record.created_by) != user["id"] and not user.get("isAdmin"):
        raise HTTPException(status_code=403, detail="Access denied")
    return record


@transactional
def get_information(session: Session, information_id: str) -> dict:
    """Return one active record and count the view."""
    record = _fetch_active(session, information_id)
    InformationDao().incrementViews(session, record)
    return _with_authors(session, [record])[0]


@transactional
def create_information(session: Session, user_id: str, data: dict) -> dict:
    """
    Create an information record authored by `user_id`.

    Parameters
    ----------
    data : dict
        title, content, category, target_audience, priority, location, media,
        contacts, tags, expires_at.
    """
    record = Information(
        title=data["title"],
        content=data["content"],
        category=data["category"],
        created_by=parse_uuid(user_id),
        target_audience=data.get("target_audience"),
        priority=data.get("priority") or "medium",
        location=data.get("location"),
        media=data.get("media"),
        contacts=data.get("contacts"),
        tags=data.get("tags"),
        expires_at=data.get("expires_at"),
    )
    InformationDao().createInformation(session, record)
    session.flush()
    logger.info("Information %s created by %s", record.id, user_id)
    return _with_authors(session, [record])[0]


@transactional
def update_information(session: Session, information_id: str, user: dict, changes: dict, new_media: list | None = None) -> dict:
    """
    Partially update a record; only its creator or an administrator may do so.

    `new_media` entries are appended to the existing attachments. A
    `districts` change replaces only the district list of the location.
    """
    record = _fetch_editable(session, information_id, user)
    changes = dict(changes)
    if "districts" in changes:
        location = dict(record.location or {})
        location["districts"] = changes.pop("districts")
        changes["location"] = location
    if new_media:
        changes["media"] = list(record.media or []) + list(new_media)
    InformationDao().updateInformation(session, record, changes, parse_uuid(user["id"]))
    return _with_authors(session, [record])[0]


@transactional
def delete_information(session: Session, information_id: str, user: dict) -> None:
    """Retire a record (soft delete); creator or administrator only."""
    record = _fetch_editable(session, information_id, user)
    InformationDao().softDelete(session, record, parse_uuid(user["id"]))
    logger.info("Information %s retired by %s", record.id, user["id"])


@transactional
def toggle_like(session: Session, information_id: str, user_id: str) -> dict:
    record = _fetch_active(session, information_id)
    liked = InformationDao().toggleLike(session, record, user_id)
    return {"liked": liked, "likesCount": len(record.likes)}


@transactional
def search_information(session: Session, query: str, limit: int, include_inactive: bool = False) -> list[dict]:
    """Full-text relevance search, best match first, serialized for prompting."""
    records = InformationDao().searchByText(session, query, limit, include_inactive)
    return [record.to_dict() for record in records]


@transactional
def home_feed(session: Session) -> dict:
    """Newest records for everyone plus the newest urgent ones."""
    information_dao = InformationDao()
    latest = information_dao.fetchLatestForAudience(session, "all", 6)
    urgent = information_dao.fetchLatestByPriority(session, "urgent", 3)
    return {"latestInfo": _with_authors(session, latest), "urgentInfo": _with_authors(session, urgent)}


@transactional
def dashboard_feed(session: Session, user: dict) -> dict:
    """Records relevant to the user plus their five latest assistant interactions."""
    district = (user.get("location") or {}).get("district")
    personalized = InformationDao().fetchPersonalized(session, user["refugeeStatus"], district, 5)
    recent = AIInteractionDao().fetchInteractionsByUser(session, parse_uuid(user["id"]), 0, 5)
    return {
        "personalizedInfo": _with_authors(session, personalized),
        "recentInteractions": [interaction.to_dict() for interaction in recent],
    }


# ---------------------------------------------------------------------------
# Community
# ---------------------------------------------------------------------------

@transactional
def seed_community_groups(session: Session) -> int:
    """Create the default groups when none exist; returns how many were added."""
    community_dao = CommunityDao()
    if community_dao.fetchGroups(session):
        return 0
    for group in DEFAULT_GROUPS:
        community_dao.createGroup(session, CommunityGroup(**group))
    return len(DEFAULT_GROUPS)


@transactional
def list_groups(session: Session) -> list[dict]:
    return [group.to_dict() for group in CommunityDao().fetchGroups(session)]


@transactional
def join_group(session: Session, group_id: int) -> dict:
    community_dao = CommunityDao()
    group = community_dao.fetchGroupById(session, group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Community group not found")
    community_dao.incrementMembers(session, group)
    return group.to_dict()


@transactional
def list_messages(session: Session, group_id: int | None, limit: int) -> list[dict]:
    return [message.to_dict() for message in CommunityDao().fetchRecentMessages(session, group_id, limit)]


@transactional
def post_message(session: Session, user: dict, message: str, group_id: int | None = None) -> dict:
    community_message = CommunityMessage(
        user_id=parse_uuid(user["id"]),
        user_name=f"{user['firstName']} {user['lastName']}",
        message=message.strip(),
        group_id=group_id,
    )
    CommunityDao().createMessage(session, community_message)
    return community_message.to_dict()
