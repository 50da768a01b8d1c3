"""
Tests for authentication endpoints and role checks.
"""
from mandi.models.user import UserRole
from mandi.core.security import role_allows


def test_signup(client):
    """Test user signup."""
    response = client.post(
        "/api/auth/signup",
        json={
            "username": "testuser",
            "email": "test@example.com",
            "password": "testpassword123"
        }
    )
    assert response.status_code == 201
    assert response.json()["username"] == "testuser"
    assert response.json()["role"] == "viewer"


def test_signup_duplicate_username(client):
    """Test signup with a taken username."""
    payload = {"username": "dupe", "email": "dupe@example.com", "password": "testpassword123"}
    client.post("/api/auth/signup", json=payload)
    response = client.post("/api/auth/signup", json={**payload, "email": "other@example.com"})
    assert response.status_code == 400


def test_login(client):
    """Test user login."""
    # First signup
    client.post(
        "/api/auth/signup",
        json={
            "username": "testuser2",
            "email": "test2@example.com",
            "password": "testpassword123"
        }
    )

    # Then login
    response = client.post(
        "/api/auth/login",
        json={
            "username": "testuser2",
            "password": "testpassword123"
        }
    )
    assert response.status_code == 200
    assert "access_token" in response.json()
    assert response.json()["role"] == "viewer"

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {response.json()['access_token']}"})
    assert me.status_code == 200
    assert me.json()["last_login_at"] is not None


def test_login_invalid_credentials(client):
    """Test login with invalid credentials."""
    response = client.post(
        "/api/auth/login",
        json={
            "username": "nonexistent",
            "password": "wrongpassword"
        }
    )
    assert response.status_code == 401


def test_login_inactive_user(client, make_user):
    user = make_user(UserRole.OPERATOR, is_active=False)
    response = client.post("/api/auth/login", json={"username": user.username, "password": "testpassword123"})
    assert response.status_code == 403


def test_requests_without_token_are_rejected(client):
    assert client.get("/api/kisans").status_code in (401, 403)
    assert client.get("/api/kisans", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_viewer_cannot_write(client, viewer_headers):
    response = client.post("/api/kisans", json={"name": "Ramesh"}, headers=viewer_headers)
    assert response.status_code == 403


def test_role_ranks():
    assert role_allows(UserRole.SUPERADMIN, UserRole.ADMIN)
    assert role_allows(UserRole.OPERATOR, UserRole.OPERATOR)
    assert not role_allows(UserRole.OPERATOR, UserRole.ADMIN)
    assert not role_allows("unknown", UserRole.VIEWER)


def test_admin_changes_role(client, make_user, admin_headers):
    user = make_user(UserRole.VIEWER)
    response = client.patch(f"/api/users/{user.id}/role", json={"role": "operator"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "operator"


def test_admin_cannot_grant_superadmin(client, make_user, admin_headers):
    user = make_user(UserRole.VIEWER)
    response = client.patch(f"/api/users/{user.id}/role", json={"role": "superadmin"}, headers=admin_headers)
    assert response.status_code == 403


def test_operator_cannot_change_roles(client, make_user, headers_for):
    operator = make_user(UserRole.OPERATOR)
    viewer = make_user(UserRole.VIEWER)
    response = client.patch(f"/api/users/{viewer.id}/role", json={"role": "operator"}, headers=headers_for(operator))
    assert response.status_code == 403
