"""tests/test_auth.py - staff login, profile and health check."""
import pytest

pytestmark = pytest.mark.django_db


class TestLogin:
    def test_returns_token_pair_and_profile(self, api_client, staff_user):
        r = api_client.post(
            "/api/auth/login/", {"email": "staff@clickeats.ph", "password": "S3cure-pass!"}, format="json",
        )
        assert r.status_code == 200
        body = r.json()
        assert {"access", "refresh", "user"} <= set(body)
        assert body["user"]["is_staff"] is True

        staff_user.refresh_from_db()
        assert staff_user.last_login_at is not None

    def test_wrong_password(self, api_client, staff_user):
        r = api_client.post(
            "/api/auth/login/", {"email": "staff@clickeats.ph", "password": "nope"}, format="json",
        )
        assert r.status_code == 401
        assert r.json()["error"] is True

    def test_bearer_token_grants_staff_access(self, api_client, staff_user):
        access = api_client.post(
            "/api/auth/login/", {"email": "staff@clickeats.ph", "password": "S3cure-pass!"}, format="json",
        ).json()["access"]
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        assert api_client.get("/api/payment-methods/").status_code == 200


class TestProfile:
    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/profile/").status_code == 401

    def test_update_own_profile(self, staff_client):
        r = staff_client.patch("/api/profile/", {"first_name": "Ana Maria"}, format="json")
        assert r.status_code == 200
        assert r.json()["full_name"] == "Ana Maria Cruz"

    def test_customer_is_not_staff(self, api_client, customer_user):
        api_client.force_authenticate(user=customer_user)
        assert api_client.get("/api/dashboard/summary/").status_code == 403


class TestHealth:
    def test_health_ok(self, api_client):
        r = api_client.get("/api/health/")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"
