"""
Test login, logout and bearer token handling.
"""
from datetime import timedelta

import jwt
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from events_api.core.security import create_access_token, decode_access_token, hash_password, verify_password
from events_api.services.users import authenticate


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_verify_against_garbage_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_authenticate(self, db_session: Session, user):
        assert authenticate(db_session, "ada@example.com", "secret-password").id == user.id
        assert authenticate(db_session, "ada@example.com", "nope") is None
        assert authenticate(db_session, "nobody@example.com", "secret-password") is None


class TestTokens:
    def test_token_round_trip(self, user):
        claims = decode_access_token(create_access_token(user))
        assert claims["sub"] == str(user.id)
        assert claims["jti"] == user.token_jti

    def test_expired_token(self, user):
        token = create_access_token(user, expires_delta=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_token_signed_with_another_key(self, user):
        token = jwt.encode({"sub": str(user.id), "jti": user.token_jti}, "another-secret", algorithm="HS256")
        assert decode_access_token(token) is None


class TestAuthEndpoints:
    def test_login(self, client: TestClient, user):
        response = client.post("/login", json={"email": "ada@example.com", "password": "secret-password"})

        assert response.status_code == 200
        token = response.json()["token"]
        assert response.json()["token_type"] == "bearer"

        me = client.get("/user", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "ada@example.com"
        assert "password" not in me.json()

    def test_login_with_wrong_password(self, client: TestClient, user):
        response = client.post("/login", json={"email": "ada@example.com", "password": "nope"})

        assert response.status_code == 400
        assert "email" in response.json()["detail"]["errors"]

    def test_user_requires_authentication(self, client: TestClient):
        assert client.get("/user").status_code == 401

    def test_logout_revokes_token(self, client: TestClient, auth_headers):
        assert client.get("/user", headers=auth_headers).status_code == 200

        response = client.post("/logout", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}
        assert client.get("/user", headers=auth_headers).status_code == 401

    def test_token_of_deleted_user(self, client: TestClient, db_session: Session, other_user, other_auth_headers):
        db_session.delete(other_user)
        db_session.commit()

        assert client.get("/user", headers=other_auth_headers).status_code == 401
