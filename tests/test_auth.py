"""
Tests for sign-up, login, email confirmation and session refresh.
"""

import pytest
from httpx import AsyncClient

from room_rental.repositories.identity import IdentityRepository
from room_rental.services.auth import AuthService
from room_rental.services.identity import LocalIdentityProvider
from room_rental.utils.exceptions import UpstreamFailureError, ValidationError
from tests.conftest import DEFAULT_PASSWORD, UserFactory
from tests.fakes import InMemoryRoomStore


def sign_up_payload(**overrides) -> dict:
    payload = {
        "email": "new.user@example.com",
        "password": DEFAULT_PASSWORD,
        "firstName": "Nina",
        "lastName": "New",
        "userType": "finder",
    }
    payload.update(overrides)
    return payload


class TestSignUp:
    
    @pytest.mark.asyncio
    async def test_short_password_rejected(self, async_client: AsyncClient, db_session):
        response = await async_client.post("/api/auth/sign-up", json=sign_up_payload(password="x" * 7))
        
        assert response.status_code == 400
        assert response.json()["error"] == "Password must be at least 8 characters"
        assert await IdentityRepository(db_session).get_by_email("new.user@example.com") is None
    
    @pytest.mark.asyncio
    async def test_eight_character_password_creates_identity_and_profile(
        self, async_client: AsyncClient, db_session, store
    ):
        response = await async_client.post("/api/auth/sign-up", json=sign_up_payload(password="x" * 8))
        
        assert response.status_code == 201
        assert response.json() == {"success": True, "message": "Sign up successful. Please check your email."}
        
        identity = await IdentityRepository(db_session).get_by_email("new.user@example.com")
        assert identity is not None
        assert identity.user_metadata["user_type"] == "finder"
        
        profile = await store.get_profile(identity.id)
        assert profile["first_name"] == "Nina"
        assert profile["user_type"] == "finder"
        assert profile["email"] == "new.user@example.com"
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["email", "password", "firstName", "lastName", "userType"])
    async def test_missing_field_rejected(self, async_client: AsyncClient, missing):
        payload = sign_up_payload()
        del payload[missing]
        
        response = await async_client.post("/api/auth/sign-up", json=payload)
        
        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"
    
    @pytest.mark.asyncio
    async def test_invalid_user_type_rejected(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/sign-up", json=sign_up_payload(userType="landlord"))
        
        assert response.status_code == 400
        assert "Invalid user type" in response.json()["error"]
    
    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, async_client: AsyncClient):
        first = await async_client.post("/api/auth/sign-up", json=sign_up_payload())
        second = await async_client.post("/api/auth/sign-up", json=sign_up_payload(email="New.User@Example.com"))
        
        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json()["error"] == "User already registered"
    
    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/sign-up", json=sign_up_payload(email="not-an-email"))
        
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
    
    @pytest.mark.asyncio
    async def test_profile_failure_rolls_back_identity(self, db_session, settings):
        fake_store = InMemoryRoomStore()
        fake_store.fail_profile_create = True
        auth_service = AuthService(LocalIdentityProvider(db_session, settings), fake_store)
        
        with pytest.raises(UpstreamFailureError, match="Failed to create profile"):
            await auth_service.sign_up("rollback@example.com", DEFAULT_PASSWORD, "Rae", "Back", "owner")
        
        assert await IdentityRepository(db_session).get_by_email("rollback@example.com") is None
        assert fake_store.profiles == {}
    
    @pytest.mark.asyncio
    async def test_user_type_is_case_sensitive(self, db_session, settings, fake_store):
        auth_service = AuthService(LocalIdentityProvider(db_session, settings), fake_store)
        
        with pytest.raises(ValidationError):
            await auth_service.sign_up("case@example.com", DEFAULT_PASSWORD, "Cas", "E", "Owner")


class TestLogin:
    
    @pytest.mark.asyncio
    async def test_login_returns_session_and_sets_cookie(self, async_client: AsyncClient, owner, settings):
        response = await async_client.post(
            "/api/auth/login", json={"email": owner.email, "password": DEFAULT_PASSWORD}
        )
        
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.access_token_expire_minutes * 60
        assert data["user"]["id"] == str(owner.id)
        assert settings.session_cookie_name in response.headers["set-cookie"]
    
    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, async_client: AsyncClient, owner):
        response = await async_client.post(
            "/api/auth/login", json={"email": owner.email, "password": "wrongpassword"}
        )
        
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"
    
    @pytest.mark.asyncio
    async def test_unknown_email_is_401(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD}
        )
        
        assert response.status_code == 401
    
    @pytest.mark.asyncio
    async def test_missing_credentials_is_400(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/login", json={"email": "someone@example.com"})
        
        assert response.status_code == 400
    
    @pytest.mark.asyncio
    async def test_session_cookie_authenticates(self, async_client: AsyncClient, owner, settings):
        login = await async_client.post(
            "/api/auth/login", json={"email": owner.email, "password": DEFAULT_PASSWORD}
        )
        async_client.cookies.set(settings.session_cookie_name, login.json()["access_token"])
        
        response = await async_client.get("/api/profile")
        
        assert response.status_code == 200
        assert response.json()["profile"]["id"] == str(owner.id)
    
    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, async_client: AsyncClient, settings):
        response = await async_client.post("/api/auth/logout")
        
        assert response.status_code == 200
        assert f'{settings.session_cookie_name}=""' in response.headers["set-cookie"]


class TestEmailConfirmation:
    
    @pytest.mark.asyncio
    async def test_unconfirmed_email_cannot_log_in(self, async_client: AsyncClient, db_session, settings):
        settings.require_email_confirmation = True
        user = await UserFactory.create_user(db_session, settings, email="pending@example.com")
        
        response = await async_client.post(
            "/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD}
        )
        
        assert response.status_code == 401
        assert response.json()["error"] == "Email not confirmed"
    
    @pytest.mark.asyncio
    async def test_callback_confirms_and_redirects_home(self, async_client: AsyncClient, db_session, settings):
        settings.require_email_confirmation = True
        user = await UserFactory.create_user(db_session, settings, email="confirm@example.com")
        identity = await IdentityRepository(db_session).get_by_email(user.email)
        
        response = await async_client.get("/auth/callback", params={"code": identity.confirmation_code})
        
        assert response.status_code == 303
        assert response.headers["location"] == "http://test/"
        assert settings.session_cookie_name in response.headers["set-cookie"]
        
        login = await async_client.post(
            "/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD}
        )
        assert login.status_code == 200
    
    @pytest.mark.asyncio
    async def test_callback_code_is_single_use(self, async_client: AsyncClient, db_session, settings):
        settings.require_email_confirmation = True
        user = await UserFactory.create_user(db_session, settings, email="once@example.com")
        identity = await IdentityRepository(db_session).get_by_email(user.email)
        code = identity.confirmation_code
        
        await async_client.get("/auth/callback", params={"code": code})
        response = await async_client.get("/auth/callback", params={"code": code})
        
        assert response.status_code == 303
        assert response.headers["location"] == "http://test/auth/error"
    
    @pytest.mark.asyncio
    async def test_callback_without_code_redirects_to_login(self, async_client: AsyncClient):
        response = await async_client.get("/auth/callback")
        
        assert response.status_code == 303
        assert response.headers["location"] == "http://test/auth/login"
    
    @pytest.mark.asyncio
    async def test_callback_with_bad_code_redirects_to_error(self, async_client: AsyncClient):
        response = await async_client.get("/auth/callback", params={"code": "bogus"})
        
        assert response.status_code == 303
        assert response.headers["location"] == "http://test/auth/error"


class TestRefresh:
    
    @pytest.mark.asyncio
    async def test_refresh_issues_new_session(self, async_client: AsyncClient, owner):
        login = await async_client.post(
            "/api/auth/login", json={"email": owner.email, "password": DEFAULT_PASSWORD}
        )
        
        response = await async_client.post(
            "/api/auth/refresh", json={"refreshToken": login.json()["refresh_token"]}
        )
        
        assert response.status_code == 200
        assert response.json()["user"]["email"] == owner.email
    
    @pytest.mark.asyncio
    async def test_access_token_cannot_refresh(self, async_client: AsyncClient, owner):
        login = await async_client.post(
            "/api/auth/login", json={"email": owner.email, "password": DEFAULT_PASSWORD}
        )
        
        response = await async_client.post(
            "/api/auth/refresh", json={"refreshToken": login.json()["access_token"]}
        )
        
        assert response.status_code == 401
    
    @pytest.mark.asyncio
    async def test_missing_refresh_token_is_400(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/refresh", json={})
        
        assert response.status_code == 400
