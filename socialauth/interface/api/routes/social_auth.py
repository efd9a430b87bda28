"""Social authentication routes.

Clients first fetch an authorization URL (which issues a CSRF state), send
the user through the provider's consent screen, then post the returned
code (or an id/access token from a native SDK) back together with the
state to log in or to link the provider to their account.
"""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request, Response, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from socialauth.application.usecase.auth import GetAuthUrlUseCase, SocialLoginUseCase
from socialauth.application.usecase.auth.get_auth_url import (
    GetAuthUrlRequest,
    GetAuthUrlResponse,
)
from socialauth.application.usecase.auth.social_login import (
    SocialLoginRequest,
    SocialLoginResponse,
)
from socialauth.application.usecase.social import (
    LinkProviderRequest,
    LinkProviderResponse,
    LinkProviderUseCase,
    ListLinkedAccountsRequest,
    ListLinkedAccountsResponse,
    ListLinkedAccountsUseCase,
    ListProvidersResponse,
    ListProvidersUseCase,
    UnlinkProviderRequest,
    UnlinkProviderResponse,
    UnlinkProviderUseCase,
)
from socialauth.config import Settings
from socialauth.domain.service import JWTService
from socialauth.interface.api.session import (
    AUTH_COOKIE,
    client_ip,
    cookie_options,
    require_user_id,
    user_agent,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/social", tags=["social-auth"], route_class=DishkaRoute)


class CredentialsBody(BaseModel):
    """Credentials from the provider consent flow.

    Accepts camelCase (``idToken``) and snake_case (``id_token``) keys.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id_token: str | None = None
    code: str | None = None
    access_token: str | None = None
    state: str | None = None


class LoginBody(CredentialsBody):
    """Login request body."""

    invite_code: str | None = None


@router.get("/providers", response_model=ListProvidersResponse)
async def list_providers(
    list_providers_use_case: FromDishka[ListProvidersUseCase],
) -> ListProvidersResponse:
    """List registered provider names."""
    return await list_providers_use_case.execute()


@router.get("/linked", response_model=ListLinkedAccountsResponse)
async def list_linked_accounts(
    request: Request,
    list_linked_use_case: FromDishka[ListLinkedAccountsUseCase],
    jwt_service: FromDishka[JWTService],
) -> ListLinkedAccountsResponse:
    """List the caller's linked social accounts.

    Requires authentication. Tokens and raw provider payloads are never
    returned.
    """
    user_id = require_user_id(request, jwt_service)
    return await list_linked_use_case.execute(
        ListLinkedAccountsRequest(user_id=user_id)
    )


@router.get("/{provider}/url", response_model=GetAuthUrlResponse)
async def get_auth_url(
    provider: str,
    request: Request,
    get_auth_url_use_case: FromDishka[GetAuthUrlUseCase],
    scopes: str | None = Query(default=None, description="Comma-separated scopes"),
) -> GetAuthUrlResponse:
    """Build the provider authorization URL and issue its state token.

    Args:
        provider: Provider name (e.g. ``google``)
        request: Incoming request (origin is bound to the state)
        get_auth_url_use_case: Get auth URL use case from DI
        scopes: Optional comma-separated scopes overriding the defaults

    Returns:
        ``{url, state}``

    Example:
        GET /auth/social/github/url?scopes=read:user,user:email
    """
    scope_list = [s.strip() for s in scopes.split(",") if s.strip()] if scopes else None
    logger.info(f"Authorization URL requested: provider={provider}")
    return await get_auth_url_use_case.execute(
        GetAuthUrlRequest(
            provider=provider,
            scopes=scope_list,
            origin_ip=client_ip(request),
            user_agent=user_agent(request),
        )
    )


@router.post("/{provider}/login", response_model=SocialLoginResponse)
async def login(
    provider: str,
    body: LoginBody,
    request: Request,
    response: Response,
    social_login_use_case: FromDishka[SocialLoginUseCase],
    settings: FromDishka[Settings],
) -> SocialLoginResponse:
    """Log in, or sign up, with a provider identity.

    Responds 201 when a new account was created and 200 otherwise. The
    session is returned in the body and also set as the ``auth_token``
    cookie.

    Example:
        POST /auth/social/google/login
        {"idToken": "eyJ...", "state": "...", "inviteCode": "ABCD2345"}
    """
    result = await social_login_use_case.execute(
        SocialLoginRequest(
            provider=provider,
            id_token=body.id_token,
            code=body.code,
            access_token=body.access_token,
            state=body.state,
            invite_code=body.invite_code,
            origin_ip=client_ip(request),
            user_agent=user_agent(request),
        )
    )
    logger.info(
        f"Social login succeeded: provider={provider}, user={result.user.username}, "
        f"new={result.is_new_user}"
    )

    response.status_code = (
        status.HTTP_201_CREATED if result.is_new_user else status.HTTP_200_OK
    )
    response.set_cookie(
        key=AUTH_COOKIE,
        value=result.session.session_token,
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
        **cookie_options(settings),
    )
    return result


@router.post("/{provider}/link", response_model=LinkProviderResponse)
async def link_provider(
    provider: str,
    body: CredentialsBody,
    request: Request,
    link_use_case: FromDishka[LinkProviderUseCase],
    jwt_service: FromDishka[JWTService],
) -> LinkProviderResponse:
    """Link a provider identity to the authenticated caller.

    Requires authentication.
    """
    user_id = require_user_id(request, jwt_service)
    return await link_use_case.execute(
        LinkProviderRequest(
            user_id=user_id,
            provider=provider,
            id_token=body.id_token,
            code=body.code,
            access_token=body.access_token,
            state=body.state,
            origin_ip=client_ip(request),
            user_agent=user_agent(request),
        )
    )


@router.post("/{provider}/unlink", response_model=UnlinkProviderResponse)
async def unlink_provider(
    provider: str,
    request: Request,
    unlink_use_case: FromDishka[UnlinkProviderUseCase],
    jwt_service: FromDishka[JWTService],
) -> UnlinkProviderResponse:
    """Remove a provider from the authenticated caller.

    Requires authentication. Refused with ``LAST_AUTH_METHOD`` when it would
    leave a passwordless account without a way to sign in.
    """
    user_id = require_user_id(request, jwt_service)
    return await unlink_use_case.execute(
        UnlinkProviderRequest(user_id=user_id, provider=provider)
    )
