import pytest
from fastapi import status

def test_register_candidate(client):
    response = client.post("/api/auth/register", json={
        "email": "new@example.com",
        "username": "Newbie",
        "password": "Password123!",
    })
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "CANDIDATE"
    assert data["access_token"]
    assert data["refresh_token"]

def test_register_duplicate_email(client, candidate):
    response = client.post("/api/auth/register", json={
        "email": candidate.email,
        "username": "Again",
        "password": "Password123!",
    })
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["success"] is False

def test_register_short_password(client):
    response = client.post("/api/auth/register", json={
        "email": "short@example.com",
        "username": "Shorty",
        "password": "abc",
    })
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "password"

def test_login_success(client, recruiter):
    """Test successful login with valid credentials."""
    response = client.post("/api/auth/login", json={
        "email": recruiter.email,
        "password": "RecruiterPass1!",
    })
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "RECRUITER"

def test_login_invalid_credentials(client):
    """Test login failure with wrong password."""
    response = client.post("/api/auth/login", json={"email": "nonexistent@example.com", "password": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["errors"][0]["msg"] == "Invalid credentials"

def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

def test_me_returns_current_user(client, candidate, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers(candidate))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == candidate.email

def test_refresh_issues_new_tokens(client, candidate):
    login = client.post("/api/auth/login", json={"email": candidate.email, "password": "CandidatePass1!"})
    response = client.post("/api/auth/refresh", json={"refresh_token": login.json()["refresh_token"]})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["id"] == candidate.id

def test_refresh_rejects_access_token(client, candidate, get_token):
    response = client.post("/api/auth/refresh", json={"refresh_token": get_token(candidate)})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

def test_refresh_token_cannot_authenticate(client, candidate):
    from hireline.services.auth import create_refresh_token

    token = create_refresh_token({"sub": candidate.email})
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
