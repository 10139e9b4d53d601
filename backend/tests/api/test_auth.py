# backend/tests/api/test_auth.py
from datetime import timedelta

from fastapi import status
from jose import jwt

from bidding.config import settings
from bidding.models import User
from bidding.services.auth import create_access_token


def signup(client, email="buyer@x.com", password="pw", name="Bo", role="BUYER"):
    return client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "name": name, "role": role}
    )


def test_signup_returns_token_with_identity(client, db_session):
    """Signup persists a hashed password and issues a token"""
    response = signup(client)

    assert response.status_code == status.HTTP_200_OK
    token = response.json()["token"]
    claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    user = db_session.query(User).filter(User.email == "buyer@x.com").one()
    assert claims["userId"] == user.id
    assert claims["role"] == "BUYER"
    assert user.password != "pw"
    assert user.password.startswith("$2")


def test_signup_missing_field(client):
    response = client.post("/api/auth/signup", json={"email": "a@x.com", "password": "pw", "role": "BUYER"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "All fields are required"}


def test_signup_rejects_unknown_role(client):
    response = signup(client, role="ADMIN")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_signup_duplicate_email(client):
    assert signup(client).status_code == status.HTTP_200_OK

    response = signup(client, name="Other")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Email already exists or server error"}


def test_login(client, buyer):
    response = client.post("/api/auth/login", json={"email": "buyer@x.com", "password": "pw"})

    assert response.status_code == status.HTTP_200_OK
    claims = jwt.decode(response.json()["token"], settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert claims["userId"] == buyer.id
    assert claims["email"] == "buyer@x.com"
    assert claims["role"] == "BUYER"


def test_login_wrong_password(client, buyer):
    response = client.post("/api/auth/login", json={"email": "buyer@x.com", "password": "nope"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid password"}


def test_login_unknown_user(client):
    response = client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "pw"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_login_missing_fields(client):
    response = client.post("/api/auth/login", json={"email": "buyer@x.com"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_me(client, seller, seller_headers):
    response = client.get("/api/auth/me", headers=seller_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "user": {"id": seller.id, "name": "Sam", "email": "seller@x.com", "role": "SELLER"}
    }


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "No token provided"}


def test_me_rejects_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid token"}


def test_expired_token_is_rejected(client, buyer):
    token = create_access_token(buyer, expires_delta=timedelta(seconds=-5))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_deleted_user_is_rejected(client, db_session, buyer, buyer_headers):
    db_session.delete(buyer)
    db_session.commit()

    response = client.get("/api/project/", headers=buyer_headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_payload_trusted_when_store_check_disabled(client, db_session, buyer, buyer_headers, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_VERIFY_USER_EXISTS", False)
    db_session.delete(buyer)
    db_session.commit()

    response = client.get("/api/project/", headers=buyer_headers)
    assert response.status_code == status.HTTP_200_OK
