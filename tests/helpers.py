import uuid

from fastapi.testclient import TestClient

from refugeeconnect.api.utils import create_access_token
from refugeeconnect.database.core.funcs import create_information
from refugeeconnect.database.entities.user import User
from refugeeconnect.database.helpers.transactionManagement import SessionFactory


def user_payload(**overrides) -> dict:
    data = {
        "first_name": "Amina",
        "last_name": "Okello",
        "email": "amina@example.org",
        "phone": "+256700000001",
        "password": "secret123",
        "confirm_password": "secret123",
        "refugee_status": "refugee",
        "preferred_language": "en",
        "district": "Kampala",
        "settlement": None,
        "age": 30,
        "gender": "female",
        "nationality": "South Sudanese",
        "family_size": 4,
    }
    data.update(overrides)
    return data


def make_admin(user_id: str) -> None:
    with SessionFactory() as session:
        session.get(User, uuid.UUID(user_id)).is_admin = True
        session.commit()


def deactivate(user_id: str) -> None:
    with SessionFactory() as session:
        session.get(User, uuid.UUID(user_id)).is_active = False
        session.commit()


def login_as(client: TestClient, user: dict) -> TestClient:
    client.cookies.set("token", create_access_token({"sub": user["id"]}))
    return client


def new_information(user: dict, **overrides) -> dict:
    data = {
        "title": {"en": "Registration Steps", "sw": "Hatua za Usajili"},
        "content": {"en": "Visit the nearest OPM office with your documents."},
        "category": "registration",
        "priority": "medium",
        "tags": ["registration", "opm"],
    }
    data.update(overrides)
    return create_information(user_id=user["id"], data=data)
