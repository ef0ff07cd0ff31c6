"""
FastAPI Routers: Auth • AI Assistant • Information • Community • Emergency • Services
=====================================================================================

Purpose
-------
Defines the HTTP API for:
- Authentication: register, login, logout, current user, profile, password change
- AI assistant: query, history, feedback, admin analytics, history deletion
- Information records: filtered listing, detail, create/update with media
  uploads, soft delete, likes, categories; home and dashboard feeds
- Community groups and message boards
- Static emergency contacts / reports and partner services

Key Notes
---------
- Input validation via Pydantic models in `refugeeconnect.api.models`.
- Auth cookie: `token` (JWT carrying the user id); protected routes depend on
  `get_current_user`.
- Every `/api` router is behind the API-wide rate limiter; `/api/ai` also has
  its own stricter limiter.
- Route handlers are plain `def` so blocking database and model calls run in
  the threadpool.
- Errors leave as `HTTPException`; the app-level handler renders them as
  ``{"error": ...}``.
"""

import json
import uuid
import logging
from datetime import datetime, timezone
from typing import Optional, List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile
from pydantic.alias_generators import to_snake

from refugeeconnect.api.models import (
    AIQuery,
    CommunityMessageIn,
    EmergencyReport,
    InteractionFeedback,
    MAX_QUERY_LENGTH,
    PasswordChange,
    ProfileUpdate,
    UserCredentials,
    UserData,
)
from refugeeconnect.api.utils import (
    clear_session_cookie,
    get_admin_user,
    get_current_user,
    set_session_cookie,
)
from refugeeconnect.api.rate_limit import ai_limiter, api_limiter
from refugeeconnect.api.uploads import discard_uploads, persist_uploads
from refugeeconnect.api.catalogs import EMERGENCY_CONTACTS, filter_services, find_service
from refugeeconnect.database.core.funcs import (
    change_password,
    create_information,
    dashboard_feed,
    delete_information,
    get_information,
    home_feed,
    join_group,
    list_groups,
    list_information,
    list_messages,
    login_user,
    post_message,
    register_user,
    toggle_like,
    update_information,
    update_profile,
)
from refugeeconnect.database.core.interactions import clear_history, get_analytics, get_history, submit_feedback
from refugeeconnect.database.entities.information import CATEGORIES, PRIORITIES, TARGET_AUDIENCES

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
ai_router = APIRouter(prefix="/api/ai", tags=["ai"], dependencies=[Depends(api_limiter), Depends(ai_limiter)])
information_router = APIRouter(prefix="/api/information", tags=["information"], dependencies=[Depends(api_limiter)])
home_router = APIRouter(prefix="/api", tags=["home"], dependencies=[Depends(api_limiter)])
community_router = APIRouter(prefix="/api/community", tags=["community"], dependencies=[Depends(api_limiter)])
emergency_router = APIRouter(prefix="/api/emergency", tags=["emergency"], dependencies=[Depends(api_limiter)])
services_router = APIRouter(prefix="/api/services", tags=["services"], dependencies=[Depends(api_limiter)])

routers = [
    auth_router,
    ai_router,
    information_router,
    home_router,
    community_router,
    emergency_router,
    services_router,
]
"""All routers, in the order the application includes them."""


def _unexpected(message: str, e: Exception) -> HTTPException:
    logger.error(f"{message}. Error Message: {e}")
    return HTTPException(status_code=500, detail=message)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@auth_router.post('/register')
def register(data: UserData, response: Response):
    """Register a new account and open a session for it.

    Request body:
        UserData (camelCase keys accepted)

    Response:
        200: {'success': True, 'user': {...}} and the `token` cookie
        400: passwords differ or email/phone already registered
    """
    res = register_user(data=data.model_dump())
    if not res['res']:
        raise HTTPException(status_code=400, detail=res['detail'])
    set_session_cookie(response, res['user']['id'])
    return {'success': True, 'user': res['user']}


@auth_router.post('/login')
def login(data: UserCredentials, response: Response):
    """Authenticate a user and set a signed JWT cookie.

    Behavior:
        - Verifies credentials via `login_user`.
        - On success, creates a JWT carrying the user id and sets it as an
          HttpOnly cookie `token`.
        - Wrong credentials → 401; deactivated account → 403.
    """
    auth = login_user(email=data.email, password=data.password)
    if not auth['authenticated']:
        raise HTTPException(status_code=auth['status'], detail=auth['detail'])
    set_session_cookie(response, auth['user_details']['id'])
    return {'success': True, 'user': auth['user_details']}


@auth_router.post('/logout')
def logout(response: Response, user: dict = Depends(get_current_user)):
    clear_session_cookie(response)
    return {'success': True, 'message': 'Logged out successfully'}


@auth_router.get('/me')
def me(user: dict = Depends(get_current_user)):
    return {'success': True, 'user': user}


@auth_router.put('/profile')
def profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update the caller's profile; only the fields present in the body change."""
    try:
        changes = {to_snake(key): value for key, value in data.model_dump(exclude_unset=True, by_alias=True).items()}
        updated = update_profile(user_id=user['id'], changes=changes)
        return {'success': True, 'user': updated}
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Profile update failed", e)


@auth_router.post('/change-password')
def password_change(data: PasswordChange, user: dict = Depends(get_current_user)):
    res = change_password(
        user_id=user['id'],
        current_password=data.current_password,
        new_password=data.new_password,
        confirm_password=data.confirm_password,
    )
    if not res['res']:
        raise HTTPException(status_code=400, detail=res['detail'])
    return {'success': True, 'message': res['detail']}


# ---------------------------------------------------------------------------
# AI assistant
# ---------------------------------------------------------------------------

def check_query_message(message) -> str:
    """Trimmed assistant question; 400 when blank or longer than MAX_QUERY_LENGTH."""
    text = message.strip() if isinstance(message, str) else ""
    if not text:
        raise HTTPException(status_code=400, detail="Message is required")
    if len(message) > MAX_QUERY_LENGTH:
        raise HTTPException(status_code=400, detail="Message is too long. Please limit to 1000 characters.")
    return text


@ai_router.post('/query')
def ai_query(data: AIQuery, request: Request, user: dict = Depends(get_current_user)):
    """Answer a question with the assistant pipeline.

    The message must be non-empty after trimming and at most 1000 characters.
    The language defaults to the user's preferred language, then English.
    A pipeline failure is not an HTTP error: the body carries the fallback
    answer and ``error: true``.
    """
    message = check_query_message(data.message)

    language = data.language or user.get('preferredLanguage') or 'en'
    try:
        result = request.app.state.ai_service.process_query(message, language, user['id'])
    except Exception as e:
        logger.error(f"AI query error. Error Message: {e}")
        raise HTTPException(
            status_code=500,
            detail={
                'error': 'Failed to process your request. Please try again.',
                'timestamp': datetime.now(timezone.utc).isoformat(),
            },
        )
    return {'success': True, **result}


@ai_router.get('/history')
def ai_history(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: dict = Depends(get_current_user),
):
    try:
        history = get_history(user_id=user['id'], page=page, limit=limit)
        return {'success': True, **history}
    except Exception as e:
        raise _unexpected("Failed to load AI history", e)


@ai_router.post('/feedback/{interaction_id}')
def ai_feedback(interaction_id: str, data: InteractionFeedback, user: dict = Depends(get_current_user)):
    try:
        submit_feedback(interaction_id=interaction_id, user_id=user['id'], feedback=data.model_dump())
        return {'success': True, 'message': 'Feedback submitted successfully'}
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Failed to submit feedback", e)


@ai_router.get('/analytics')
def ai_analytics(user: dict = Depends(get_admin_user)):
    try:
        return {'success': True, **get_analytics()}
    except Exception as e:
        raise _unexpected("Failed to load analytics", e)


@ai_router.delete('/history')
def ai_clear_history(user: dict = Depends(get_current_user)):
    try:
        deleted = clear_history(user_id=user['id'])
        return {'success': True, 'message': 'AI history cleared successfully', 'deletedCount': deleted}
    except Exception as e:
        raise _unexpected("Failed to clear AI history", e)


# ---------------------------------------------------------------------------
# Information records
# ---------------------------------------------------------------------------

def _json_field(name: str, raw: Optional[str], default):
    """Decode a JSON-encoded multipart field; blank means `default`."""
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid JSON in field '{name}'")


def _check_choices(category, priority, target_audience) -> None:
    if category is not None and category not in CATEGORIES:
        raise HTTPException(status_code=400, detail="Invalid category")
    if priority is not None and priority not in PRIORITIES:
        raise HTTPException(status_code=400, detail="Invalid priority")
    if target_audience is not None and (
        not isinstance(target_audience, list) or any(a not in TARGET_AUDIENCES for a in target_audience)
    ):
        raise HTTPException(status_code=400, detail="Invalid target audience")


def _parse_expiry(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid expiry date")


def parse_information_form(
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    target_audience: Optional[str] = Form(None, alias="targetAudience"),
    priority: Optional[str] = Form(None),
    districts: Optional[str] = Form(None),
    settlements: Optional[str] = Form(None),
    is_national: Optional[str] = Form(None, alias="isNational"),
    tags: Optional[str] = Form(None),
    contacts: Optional[str] = Form(None),
    expires_at: Optional[str] = Form(None, alias="expiresAt"),
) -> dict:
    """
    Collect the multipart fields of an information form.

    Only fields the client actually sent appear in the result; JSON-encoded
    fields are decoded and blank values decode to None.
    """
    fields = {}
    for name, raw in (
        ("title", title),
        ("content", content),
        ("target_audience", target_audience),
        ("districts", districts),
        ("settlements", settlements),
        ("tags", tags),
        ("contacts", contacts),
    ):
        if raw is not None:
            fields[name] = _json_field(name, raw, None)
    if category:
        fields["category"] = category
    if priority:
        fields["priority"] = priority
    if is_national is not None:
        fields["is_national"] = is_national == "true"
    if expires_at is not None:
        fields["expires_at"] = _parse_expiry(expires_at)
    return fields


@information_router.get('')
def information_list(
    category: Optional[str] = None,
    search: Optional[str] = None,
    language: Optional[str] = None,
    priority: Optional[str] = None,
    target_audience: Optional[str] = Query(None, alias="targetAudience"),
    district: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
):
    """Active records matching the filters, most pressing first, then newest."""
    filters = {
        "category": category,
        "search": search,
        "priority": priority,
        "target_audience": target_audience,
        "district": district,
    }
    try:
        result = list_information(filters=filters, page=page, limit=limit)
    except Exception as e:
        raise _unexpected("Failed to load information", e)
    return {
        'success': True,
        **result,
        'filters': {
            'category': category,
            'search': search,
            'language': language,
            'priority': priority,
            'targetAudience': target_audience,
            'district': district,
        },
    }


@information_router.get('/meta/categories')
def information_categories():
    return {
        'success': True,
        'categories': [{'value': value, 'label': label} for value, label in CATEGORIES.items()],
    }


@information_router.get('/{information_id}')
def information_detail(information_id: str):
    try:
        return {'success': True, 'information': get_information(information_id=information_id)}
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Failed to load information", e)


@information_router.post('')
def information_create(
    fields: dict = Depends(parse_information_form),
    media: Optional[List[UploadFile]] = File(None),
    user: dict = Depends(get_current_user),
):
    """Create a record (multipart form, up to five media files)."""
    title = fields.get("title") or {}
    content = fields.get("content") or {}
    if not isinstance(title, dict) or not title.get("en"):
        raise HTTPException(status_code=400, detail="An English title is required")
    if not isinstance(content, dict) or not content.get("en"):
        raise HTTPException(status_code=400, detail="English content is required")
    if not fields.get("category"):
        raise HTTPException(status_code=400, detail="Category is required")
    _check_choices(fields.get("category"), fields.get("priority"), fields.get("target_audience"))

    media_items = persist_uploads(media or [])
    data = {
        "title": title,
        "content": content,
        "category": fields["category"],
        "target_audience": fields.get("target_audience") or ["all"],
        "priority": fields.get("priority") or "medium",
        "location": {
            "districts": fields.get("districts") or [],
            "settlements": fields.get("settlements") or [],
            "isNational": fields.get("is_national", False),
        },
        "media": media_items,
        "contacts": fields.get("contacts") or [],
        "tags": fields.get("tags") or [],
        "expires_at": fields.get("expires_at"),
    }
    try:
        information = create_information(user_id=user['id'], data=data)
    except Exception as e:
        discard_uploads(media_items)
        raise _unexpected("Failed to create information", e)
    return {'success': True, 'information': information, 'message': 'Information created successfully'}


@information_router.put('/{information_id}')
def information_update(
    information_id: str,
    fields: dict = Depends(parse_information_form),
    media: Optional[List[UploadFile]] = File(None),
    user: dict = Depends(get_current_user),
):
    """Partially update a record; creator or administrator only. New media are appended."""
    _check_choices(fields.get("category"), fields.get("priority"), fields.get("target_audience"))
    changes = {
        key: value
        for key, value in fields.items()
        if value is not None and key not in ("settlements", "is_national")
    }
    new_media = persist_uploads(media or [])
    try:
        information = update_information(
            information_id=information_id, user=user, changes=changes, new_media=new_media
        )
    except HTTPException:
        discard_uploads(new_media)
        raise
    except Exception as e:
        discard_uploads(new_media)
        raise _unexpected("Failed to update information", e)
    return {'success': True, 'information': information, 'message': 'Information updated successfully'}


@information_router.delete('/{information_id}')
def information_delete(information_id: str, user: dict = Depends(get_current_user)):
    try:
        delete_information(information_id=information_id, user=user)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Failed to delete information", e)
    return {'success': True, 'message': 'Information deleted successfully'}


@information_router.post('/{information_id}/like')
def information_like(information_id: str, user: dict = Depends(get_current_user)):
    try:
        return {'success': True, **toggle_like(information_id=information_id, user_id=user['id'])}
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Failed to update like status", e)


@home_router.get('/home')
def home():
    """Newest public records and newest urgent ones; degrades to empty lists."""
    try:
        return {'success': True, **home_feed()}
    except Exception as e:
        logger.error(f"Homepage error. Error Message: {e}")
        return {
            'success': False,
            'latestInfo': [],
            'urgentInfo': [],
            'error': 'Unable to load latest information',
        }


@home_router.get('/dashboard')
def dashboard(user: dict = Depends(get_current_user)):
    try:
        return {'success': True, 'user': user, **dashboard_feed(user=user)}
    except Exception as e:
        raise _unexpected("Failed to load dashboard", e)


# ---------------------------------------------------------------------------
# Community
# ---------------------------------------------------------------------------

@community_router.get('/groups')
def community_groups(user: dict = Depends(get_current_user)):
    try:
        return {'success': True, 'groups': list_groups()}
    except Exception as e:
        raise _unexpected("Failed to load community groups", e)


@community_router.post('/groups/{group_id}/join')
def community_join(group_id: int, user: dict = Depends(get_current_user)):
    try:
        group = join_group(group_id=group_id)
    except HTTPException:
        raise
    except Exception as e:
        raise _unexpected("Failed to join community group", e)
    return {'success': True, 'message': 'Successfully joined community group', 'group': group}


@community_router.get('/messages')
def community_messages(
    group_id: Optional[int] = Query(None, alias="groupId"),
    limit: int = Query(50, ge=1, le=500),
    user: dict = Depends(get_current_user),
):
    try:
        return {'success': True, 'messages': list_messages(group_id=group_id, limit=limit)}
    except Exception as e:
        raise _unexpected("Failed to load community messages", e)


@community_router.post('/messages')
def community_post(data: CommunityMessageIn, user: dict = Depends(get_current_user)):
    try:
        return {'success': True, 'message': post_message(user=user, message=data.message, group_id=data.group_id)}
    except Exception as e:
        raise _unexpected("Failed to post message", e)


# ---------------------------------------------------------------------------
# Emergency & services catalogs
# ---------------------------------------------------------------------------

@emergency_router.get('/contacts')
def emergency_contacts(user: dict = Depends(get_current_user)):
    return {'success': True, 'contacts': EMERGENCY_CONTACTS}


@emergency_router.post('/report')
def emergency_report(data: EmergencyReport, user: dict = Depends(get_current_user)):
    report_id = uuid.uuid4().hex
    logger.warning(
        "Emergency reported: id=%s type=%s urgency=%s location=%s by=%s: %s",
        report_id, data.type, data.urgency, data.location, user['id'], data.description,
    )
    return {'success': True, 'message': 'Emergency report submitted successfully', 'reportId': report_id}


@services_router.get('')
def services_list(
    category: Optional[str] = None,
    search: Optional[str] = None,
    user: dict = Depends(get_current_user),
):
    return {'success': True, 'services': filter_services(category, search)}


@services_router.get('/{service_id}')
def services_detail(service_id: int, user: dict = Depends(get_current_user)):
    service = find_service(service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return {'success': True, 'service': service}
