"""
sso_gateway.api.routers.auth

Session endpoints under `{api_prefix}auth`.

Responsibilities:
- Login (sets the session cookie) and logout (clears it).
- Current-user and session-validity checks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from sso_gateway.api.deps import authenticator_dep, settings_dep
from sso_gateway.auth.authenticator import Authenticator
from sso_gateway.auth.deps import current_session, current_session_for_logout
from sso_gateway.auth.models import Session
from sso_gateway.errors import Unauthenticated
from sso_gateway.settings import Settings

router = APIRouter(tags=["auth"])


class _CamelModel(BaseModel):
    # Wire format uses camelCase keys (sessionId) for the SPA client.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(BaseModel):
    # No length rules: blank or oversized input is just another failed login.
    username: str
    password: str


class LoginResponse(_CamelModel):
    session_id: str
    username: str
    email: str
    role: str
    success: bool = True


class ApiResponse(_CamelModel):
    success: bool
    message: str
    session_id: str | None = None


class UserInfoResponse(_CamelModel):
    id: int
    username: str
    email: str
    role: str
    enabled: bool


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    authenticator: Authenticator = Depends(authenticator_dep),
    settings: Settings = Depends(settings_dep),
) -> LoginResponse:
    # Failures raise InvalidCredentials/AccountDisabled -> identical 401 bodies.
    summary = await authenticator.login(body.username, body.password)
    response.set_cookie(
        settings.session_cookie_name,
        summary.session_id,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    return LoginResponse(
        session_id=summary.session_id,
        username=summary.username,
        email=summary.email,
        role=summary.role,
    )


@router.post("/logout", response_model=ApiResponse, response_model_exclude_none=True)
async def logout(
    response: Response,
    session: Session | None = Depends(current_session_for_logout),
    authenticator: Authenticator = Depends(authenticator_dep),
    settings: Settings = Depends(settings_dep),
) -> ApiResponse:
    await authenticator.logout(session)
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    return ApiResponse(success=True, message="Logged out successfully")


@router.get("/user", response_model=UserInfoResponse)
async def current_user(
    session: Session | None = Depends(current_session),
    authenticator: Authenticator = Depends(authenticator_dep),
) -> UserInfoResponse:
    view = await authenticator.current_user(session)
    return UserInfoResponse(
        id=view.id,
        username=view.username,
        email=view.email,
        role=view.role,
        enabled=view.enabled,
    )


@router.get("/session", response_model=ApiResponse, response_model_exclude_none=True)
async def check_session(
    session: Session | None = Depends(current_session),
    authenticator: Authenticator = Depends(authenticator_dep),
) -> ApiResponse:
    if session is None or not await authenticator.check_session(session):
        raise Unauthenticated("No valid session")
    return ApiResponse(success=True, message="Session is valid", session_id=session.session_id)


# --- Module Notes -----------------------------------------------------------
# The router carries no prefix; `api.app.create_app` mounts it under the configured
# API prefix so the classifier and the router agree on what "API" means.
