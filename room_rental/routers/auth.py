"""
Authentication endpoints: sign-up, login, refresh, logout and the email confirmation callback.
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from room_rental.config import Settings
from room_rental.services.auth import AuthService
from room_rental.services.identity import AuthSession, IdentityProviderError
from room_rental.schemas.auth import (
    SignUpRequest,
    SignUpResponse,
    LoginRequest,
    RefreshRequest,
    SessionResponse,
)
from room_rental.schemas.base import SuccessResponse
from room_rental.services.error_handler import ERROR_RESPONSES
from room_rental.utils.dependencies import get_auth_service, get_settings_dependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# The confirmation link lands outside the API prefix
callback_router = APIRouter(tags=["Authentication"])


def _set_session_cookie(response: Response, session: AuthSession, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post(
    "/sign-up",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new owner or finder",
    responses={code: ERROR_RESPONSES[code] for code in (400, 500)}
)
async def sign_up(
    payload: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency)
) -> SignUpResponse:
    """
    Create the identity and its profile.
    A confirmation link pointing at /auth/callback is issued for the email.
    """
    await auth_service.sign_up(
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
        user_type=payload.user_type,
        redirect_to=f"{settings.app_url}/auth/callback",
    )
    return SignUpResponse(success=True, message="Sign up successful. Please check your email.")


@router.post(
    "/login",
    response_model=SessionResponse,
    summary="Log in with email and password",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401)}
)
async def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency)
) -> SessionResponse:
    """
    Authenticate and start a session.
    The access token is returned in the body and also set as the session cookie.
    """
    session = await auth_service.login(payload.email, payload.password)
    _set_session_cookie(response, session, settings)
    return SessionResponse.model_validate(session.to_dict())


@router.post(
    "/refresh",
    response_model=SessionResponse,
    summary="Exchange a refresh token for a new session",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401)}
)
async def refresh(
    payload: RefreshRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency)
) -> SessionResponse:
    session = await auth_service.refresh(payload.refresh_token)
    _set_session_cookie(response, session, settings)
    return SessionResponse.model_validate(session.to_dict())


@router.post("/logout", response_model=SuccessResponse, summary="Clear the session cookie")
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings_dependency)
) -> SuccessResponse:
    response.delete_cookie(settings.session_cookie_name)
    return SuccessResponse(success=True)


@callback_router.get("/auth/callback", include_in_schema=False)
async def auth_callback(
    request: Request,
    code: Optional[str] = Query(None),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings_dependency)
) -> RedirectResponse:
    """
    Confirmation link target.
    Always answers with a redirect: / on success, /auth/login without a code,
    /auth/error when the code cannot be exchanged.
    """
    origin = str(request.base_url).rstrip("/")
    
    if not code:
        return RedirectResponse(f"{origin}/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    
    try:
        session = await auth_service.exchange_code(code)
    except (IdentityProviderError, SQLAlchemyError) as e:
        logger.error(f"Auth callback error: {e}")
        return RedirectResponse(f"{origin}/auth/error", status_code=status.HTTP_303_SEE_OTHER)
    
    redirect = RedirectResponse(f"{origin}/", status_code=status.HTTP_303_SEE_OTHER)
    _set_session_cookie(redirect, session, settings)
    return redirect
