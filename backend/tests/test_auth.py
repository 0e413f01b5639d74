"""Tests for authentication: sign-up rules, login, tokens and RBAC."""

from datetime import timedelta

from tableside.core.rbac import UserRole
from tableside.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from tableside.models.user import User


# ============== Password hashing ==============

class TestPasswordHashing:
    def test_hash_and_verify(self):
        h = get_password_hash("Secret#123")
        assert verify_password("Secret#123", h)

    def test_wrong_password_rejected(self):
        h = get_password_hash("Secret#123")
        assert not verify_password("wrong", h)

    def test_hash_is_unique(self):
        assert get_password_hash("same") != get_password_hash("same")  # different salts

    def test_invalid_hash_returns_false(self):
        assert not verify_password("test", "not-a-hash")


# ============== JWT tokens ==============

class TestJWTTokens:
    def test_create_and_decode(self):
        token = create_access_token(data={"sub": "42", "email": "a@gmail.com", "role": "owner"})
        payload = decode_access_token(token)
        assert payload["sub"] == "42"
        assert payload["role"] == "owner"
        assert "exp" in payload and "jti" in payload

    def test_expired_token_rejected(self):
        token = create_access_token(data={"sub": "1"}, expires_delta=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_garbage_token_rejected(self):
        assert decode_access_token("not.a.token") is None


# ============== Sign-up ==============

class TestSignup:
    def test_first_account_becomes_owner(self, client):
        res = client.post("/api/v1/auth/signup", json={
            "email": "first@gmail.com", "password": "Secret#123", "name": "First",
        })
        assert res.status_code == 201
        assert res.json()["role"] == "owner"

        res = client.post("/api/v1/auth/signup", json={
            "email": "second@gmail.com", "password": "Secret#123",
        })
        assert res.status_code == 201
        assert res.json()["role"] == "staff"

    def test_other_domains_rejected(self, client):
        res = client.post("/api/v1/auth/signup", json={
            "email": "someone@yahoo.com", "password": "Secret#123",
        })
        assert res.status_code == 400
        assert res.json()["error"] == "validation"

    def test_weak_password_rejected(self, client):
        res = client.post("/api/v1/auth/signup", json={
            "email": "someone@gmail.com", "password": "password",
        })
        assert res.status_code == 400
        assert "uppercase" in res.json()["detail"]

    def test_duplicate_email_conflicts(self, client, test_user):
        res = client.post("/api/v1/auth/signup", json={
            "email": test_user.email, "password": "Secret#123",
        })
        assert res.status_code == 409


# ============== Login ==============

class TestLogin:
    def test_login_success(self, client, test_user):
        res = client.post("/api/v1/auth/login", json={"email": test_user.email, "password": "Secret#123"})
        assert res.status_code == 200
        token = res.json()["access_token"]
        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == test_user.email

    def test_wrong_password(self, client, test_user):
        res = client.post("/api/v1/auth/login", json={"email": test_user.email, "password": "Nope#1234"})
        assert res.status_code == 401

    def test_inactive_user(self, client, db_session, test_user):
        test_user.is_active = False
        db_session.commit()
        res = client.post("/api/v1/auth/login", json={"email": test_user.email, "password": "Secret#123"})
        assert res.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401


# ============== RBAC ==============

class TestRoleEnforcement:
    def test_staff_cannot_edit_menu(self, client, staff_headers):
        res = client.post("/api/v1/menu/items", json={
            "name": "Idli", "price": "3.00", "category": "Breakfast",
        }, headers=staff_headers)
        assert res.status_code == 403

    def test_staff_can_read_orders(self, client, staff_headers):
        assert client.get("/api/v1/orders/active", headers=staff_headers).status_code == 200

    def test_owner_promotes_staff(self, client, db_session, auth_headers):
        waiter = User(
            email="runner@gmail.com",
            password_hash=get_password_hash("Secret#123"),
            role=UserRole.STAFF,
        )
        db_session.add(waiter)
        db_session.commit()
        res = client.put(f"/api/v1/auth/users/{waiter.id}/role", json={"role": "manager"}, headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["role"] == "manager"

    def test_only_owner_lists_users(self, client, staff_headers):
        assert client.get("/api/v1/auth/users", headers=staff_headers).status_code == 403
