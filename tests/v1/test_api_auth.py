# tests/v1/test_api_auth.py
"""Tests for account authentication endpoints."""

from fastapi import status


class TestRegisterAndLogin:
    """Register, log in and refresh through the HTTP surface."""

    def test_register_returns_tokens(self, client, invite_code, test_password):
        """A valid registration answers 201 with a token pair and the user."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "fresh@example.com",
                "password": test_password,
                "name": "Fresh",
                "beta_code": invite_code,
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == "fresh@example.com"
        assert body["access_token"] and body["refresh_token"]

    def test_register_with_spent_code_conflicts(self, client, invite_code, test_password):
        """The second use of an invite code is a 409."""
        payload = {"password": test_password, "name": "Someone", "beta_code": invite_code}
        first = client.post("/api/v1/auth/register", json={**payload, "email": "a@example.com"})
        second = client.post("/api/v1/auth/register", json={**payload, "email": "b@example.com"})

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_409_CONFLICT

    def test_register_validation_error(self, client, invite_code):
        """Short passwords are a 400 from the service, not a 422."""
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "weak@example.com",
                "password": "short",
                "name": "Weak",
                "beta_code": invite_code,
            },
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "validation"

    def test_register_with_unknown_code(self, client, test_password):
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": "nocode@example.com",
                "password": test_password,
                "name": "No Code",
                "beta_code": "UNKNOWNCODE1",
            },
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_and_me(self, client, test_user, test_password):
        """Logging in yields an access token accepted by /auth/me."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": test_password},
        )
        assert response.status_code == status.HTTP_200_OK
        token = response.json()["access_token"]

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == status.HTTP_200_OK
        assert me.json()["email"] == test_user.email

    def test_login_wrong_password(self, client, test_user):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": "not-the-password"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_refresh_is_single_use(self, client, test_user, tokens):
        """A refresh token works once; replaying it is rejected."""
        pair = tokens.issue_pair(test_user.id)

        first = client.post("/api/v1/auth/refresh", json={"refresh_token": pair.refresh_token})
        replay = client.post("/api/v1/auth/refresh", json={"refresh_token": pair.refresh_token})

        assert first.status_code == status.HTTP_200_OK
        assert first.json()["refresh_token"] != pair.refresh_token
        assert replay.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_with_access_token(self, client, test_user, tokens):
        pair = tokens.issue_pair(test_user.id)

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": pair.access_token})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestBearerValidation:
    """Malformed credentials never reach the endpoints."""

    def test_missing_header(self, client):
        assert client.get("/api/v1/auth/me").status_code == status.HTTP_401_UNAUTHORIZED

    def test_without_bearer_prefix(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "InvalidToken123"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_malformed_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token_as_bearer(self, client, test_user, tokens):
        """Refresh tokens cannot authenticate requests."""
        pair = tokens.issue_pair(test_user.id)
        response = client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {pair.refresh_token}"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestChangePassword:
    def test_change_password_then_login(self, client, test_user, auth_headers, test_password):
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": test_password, "new_password": "brand-new-secret"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_204_NO_CONTENT

        old = client.post(
            "/api/v1/auth/login", json={"email": test_user.email, "password": test_password}
        )
        new = client.post(
            "/api/v1/auth/login",
            json={"email": test_user.email, "password": "brand-new-secret"},
        )
        assert old.status_code == status.HTTP_401_UNAUTHORIZED
        assert new.status_code == status.HTTP_200_OK

    def test_wrong_current_password(self, client, auth_headers):
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "nope-nope-nope", "new_password": "brand-new-secret"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_requires_bearer(self, client):
        response = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "a", "new_password": "b"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
