"""
Unit tests for authentication endpoints.

Tests:
- Login (token issue)
- Self-registration
- Password validation
"""

from app.core.security import decode_token

REGISTER_DATA = {
    "username": "new",
    "firstName": "first",
    "lastName": "last",
    "password": "password",
    "email": "new@email.com",
}


class TestUserLogin:
    """Test the token endpoint"""

    def test_login_success(self, client):
        """Test successful login returns a token for that user"""
        response = client.post("/api/v1/auth/token", json={"username": "u1", "password": "password1"})

        assert response.status_code == 200
        payload = decode_token(response.json()["token"])
        assert payload["sub"] == "u1"
        assert payload["is_admin"] is False

    def test_admin_token_carries_flag(self, client):
        response = client.post("/api/v1/auth/token", json={"username": "u3", "password": "password3"})
        assert decode_token(response.json()["token"])["is_admin"] is True

    def test_login_wrong_password(self, client):
        response = client.post("/api/v1/auth/token", json={"username": "u1", "password": "nope"})
        assert response.status_code == 401

    def test_login_nonexistent_user(self, client):
        response = client.post("/api/v1/auth/token", json={"username": "no-such-user", "password": "password1"})
        assert response.status_code == 401

    def test_login_missing_data(self, client):
        response = client.post("/api/v1/auth/token", json={"username": "u1"})
        assert response.status_code == 422

    def test_login_after_password_change(self, client, user_headers):
        client.patch("/api/v1/users/u1", json={"password": "changed-password"}, headers=user_headers)

        old = client.post("/api/v1/auth/token", json={"username": "u1", "password": "password1"})
        new = client.post("/api/v1/auth/token", json={"username": "u1", "password": "changed-password"})

        assert old.status_code == 401
        assert new.status_code == 200


class TestUserRegistration:
    """Test user registration endpoint"""

    def test_register_success(self, client):
        """Test successful registration returns a non-admin token"""
        response = client.post("/api/v1/auth/register", json=REGISTER_DATA)

        assert response.status_code == 201
        payload = decode_token(response.json()["token"])
        assert payload["sub"] == "new"
        assert payload["is_admin"] is False

    def test_registered_user_can_login(self, client):
        client.post("/api/v1/auth/register", json=REGISTER_DATA)

        response = client.post("/api/v1/auth/token", json={"username": "new", "password": "password"})
        assert response.status_code == 200

    def test_register_duplicate_username(self, client):
        response = client.post("/api/v1/auth/register", json={**REGISTER_DATA, "username": "u1"})

        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()

    def test_register_cannot_claim_admin(self, client):
        response = client.post("/api/v1/auth/register", json={**REGISTER_DATA, "isAdmin": True})
        assert response.status_code == 422

    def test_register_weak_password(self, client):
        response = client.post("/api/v1/auth/register", json={**REGISTER_DATA, "password": "pw"})
        assert response.status_code == 422

    def test_register_invalid_email(self, client):
        response = client.post("/api/v1/auth/register", json={**REGISTER_DATA, "email": "not-an-email"})
        assert response.status_code == 422

    def test_register_missing_fields(self, client):
        response = client.post("/api/v1/auth/register", json={"username": "new"})
        assert response.status_code == 422
