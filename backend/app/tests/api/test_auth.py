from fastapi.testclient import TestClient

from app.core.config import settings


def test_signup_login_and_read_me(anonymous_client: TestClient):
    r = anonymous_client.post(
        f"{settings.API_V1_STR}/users/signup",
        json={"email": "Owner@Example.com", "password": "correct-horse", "full_name": "Owner"},
    )
    assert r.status_code == 200
    assert r.json()["email"] == "owner@example.com"

    r = anonymous_client.post(
        f"{settings.API_V1_STR}/login/access-token",
        data={"username": "owner@example.com", "password": "correct-horse"},
    )
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = anonymous_client.get(
        f"{settings.API_V1_STR}/users/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert r.status_code == 200
    assert r.json()["full_name"] == "Owner"


def test_duplicate_signup_is_rejected(anonymous_client: TestClient):
    body = {"email": "owner@example.com", "password": "correct-horse"}
    assert anonymous_client.post(f"{settings.API_V1_STR}/users/signup", json=body).status_code == 200
    assert anonymous_client.post(f"{settings.API_V1_STR}/users/signup", json=body).status_code == 400


def test_wrong_password_is_rejected(anonymous_client: TestClient):
    anonymous_client.post(
        f"{settings.API_V1_STR}/users/signup",
        json={"email": "owner@example.com", "password": "correct-horse"},
    )
    r = anonymous_client.post(
        f"{settings.API_V1_STR}/login/access-token",
        data={"username": "owner@example.com", "password": "wrong-password"},
    )
    assert r.status_code == 400


def test_protected_routes_need_a_token(anonymous_client: TestClient):
    assert anonymous_client.get(f"{settings.API_V1_STR}/projects/").status_code == 401
    r = anonymous_client.get(
        f"{settings.API_V1_STR}/projects/", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert r.status_code == 403


def test_health_check(anonymous_client: TestClient):
    r = anonymous_client.get(f"{settings.API_V1_STR}/utils/health-check/")
    assert r.status_code == 200
    assert r.json() is True
