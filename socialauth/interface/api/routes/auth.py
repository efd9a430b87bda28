"""Session routes: who am I, and log out."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from socialauth.application.usecase.auth import GetCurrentUserUseCase
from socialauth.application.usecase.auth.get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
)
from socialauth.config import Settings
from socialauth.domain.error import NotFoundError
from socialauth.interface.api.session import (
    AUTH_COOKIE,
    cookie_options,
    extract_session_token,
)
from socialauth.util.jwt import JWTError

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class LogoutResponse(BaseModel):
    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Session status; ``user`` is set only when ``authenticated``."""

    authenticated: bool
    user: GetCurrentUserResponse | None = None


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response, settings: FromDishka[Settings]) -> LogoutResponse:
    """Clear the session cookie.

    Browsers only drop a cookie whose attributes match the ones it was set
    with, so the login cookie options are reused. Bearer-token clients just
    discard their token.
    """
    response.delete_cookie(key=AUTH_COOKIE, **cookie_options(settings))
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_user(
    request: Request,
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
) -> AuthStatusResponse:
    """Current user and linked providers, or ``authenticated: false``.

    Never responds 401: an expired token or a token for a deleted user both
    read as signed out.
    """
    token = extract_session_token(request)
    if not token:
        return AuthStatusResponse(authenticated=False)

    try:
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(token=token)
        )
    except (JWTError, NotFoundError):
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True, user=user)
