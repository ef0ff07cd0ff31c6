from fastapi.testclient import TestClient

from tests.helpers import deactivate

REGISTRATION = {
    "firstName": "Amina",
    "lastName": "Okello",
    "email": "Amina@Example.org",
    "phone": "+256700000001",
    "password": "secret123",
    "confirmPassword": "secret123",
    "refugeeStatus": "refugee",
    "preferredLanguage": "sw",
    "district": "Kampala",
    "familySize": 3,
}


class TestRegister:
    def test_register_opens_session(self, client: TestClient):
        response = client.post("/auth/register", json=REGISTRATION)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "amina@example.org"
        assert data["user"]["preferredLanguage"] == "sw"
        assert data["user"]["demographics"]["familySize"] == 3
        assert "password" not in data["user"]
        assert "token" in response.cookies

        me = client.get("/auth/me")
        assert me.status_code == 200
        assert me.json()["user"]["id"] == data["user"]["id"]

    def test_passwords_must_match(self, client: TestClient):
        response = client.post("/auth/register", json={**REGISTRATION, "confirmPassword": "different"})
        assert response.status_code == 400
        assert response.json() == {"error": "Passwords do not match"}

    def test_duplicate_email_rejected(self, client: TestClient, user):
        response = client.post("/auth/register", json={**REGISTRATION, "phone": "+256799999999"})
        assert response.status_code == 400
        assert response.json()["error"] == "User with this email or phone already exists"

    def test_invalid_status_is_validation_error(self, client: TestClient):
        response = client.post("/auth/register", json={**REGISTRATION, "refugeeStatus": "tourist"})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation Error"
        assert data["messages"]


class TestLogin:
    def test_login_is_case_insensitive(self, client: TestClient, user):
        response = client.post("/auth/login", json={"email": "AMINA@example.org", "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user["id"]
        assert response.json()["user"]["lastLogin"] is not None
        assert client.get("/auth/me").status_code == 200

    def test_wrong_password(self, client: TestClient, user):
        response = client.post("/auth/login", json={"email": "amina@example.org", "password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_deactivated_account(self, client: TestClient, user):
        deactivate(user["id"])
        response = client.post("/auth/login", json={"email": "amina@example.org", "password": "secret123"})
        assert response.status_code == 403
        assert response.json()["error"] == "Account is deactivated. Please contact support."

    def test_logout_clears_session(self, client: TestClient, user):
        client.post("/auth/login", json={"email": "amina@example.org", "password": "secret123"})
        assert client.post("/auth/logout").status_code == 200
        assert client.get("/auth/me").status_code == 401


class TestSession:
    def test_me_requires_login(self, client: TestClient):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json() == {
            "error": "Authentication required",
            "message": "Please log in to access this resource",
        }

    def test_garbage_token_rejected(self, client: TestClient):
        client.cookies.set("token", "not-a-jwt")
        assert client.get("/auth/me").status_code == 401


class TestProfile:
    def test_update_profile(self, auth_client: TestClient):
        response = auth_client.put(
            "/auth/profile",
            json={"firstName": "Aminah", "location": {"district": "Isingiro", "settlement": "Nakivale"}},
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["firstName"] == "Aminah"
        assert user["lastName"] == "Okello"
        assert user["location"]["settlement"] == "Nakivale"

    def test_change_password(self, auth_client: TestClient):
        response = auth_client.post(
            "/auth/change-password",
            json={"currentPassword": "secret123", "newPassword": "newsecret", "confirmPassword": "newsecret"},
        )
        assert response.status_code == 200
        login = auth_client.post("/auth/login", json={"email": "amina@example.org", "password": "newsecret"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, auth_client: TestClient):
        response = auth_client.post(
            "/auth/change-password",
            json={"currentPassword": "wrong", "newPassword": "newsecret", "confirmPassword": "newsecret"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Current password is incorrect"}
