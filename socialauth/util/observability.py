"""Logfire setup for the social auth service.

Provider credentials pass through request bodies and outbound token
exchanges. The instrumentation here keeps them out of spans:

    import logfire

    logfire.info("Social account linked", user_id=str(user_id), provider=provider)

    with logfire.span("account_resolver.resolve", provider=provider):
        ...
"""

from typing import Any

import logfire
from fastapi import FastAPI
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncEngine

from socialauth.config import Settings

# Attribute names logfire should scrub in addition to its defaults
CREDENTIAL_PATTERNS = ["access_token", "id_token", "refresh_token"]

# Body fields whose values never leave the request handler
CREDENTIAL_FIELDS = frozenset({"token", "code", "state", "invite_code"})


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for this process.

    Cloud sending follows ``OBSERVABILITY__SEND_TO_LOGFIRE`` when set, and
    otherwise turns on when ``OBSERVABILITY__LOGFIRE_TOKEN`` is present.

    Args:
        settings: Application settings
    """
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs: dict[str, Any] = {
        "service_name": "socialauth-api",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
        "scrubbing": logfire.ScrubbingOptions(extra_patterns=CREDENTIAL_PATTERNS),
    }
    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def redact_credentials(values: dict[str, Any]) -> dict[str, Any]:
    """Replace credential-bearing endpoint arguments with the names they carry.

    A login body becomes ``["code", "state"]`` so traces still show which
    flow the client used without holding the values themselves.
    """
    redacted: dict[str, Any] = {}
    for name, value in values.items():
        if isinstance(value, BaseModel):
            present = value.model_dump(exclude_none=True)
            redacted[name] = sorted(CREDENTIAL_FIELDS.intersection(present))
        elif name in CREDENTIAL_FIELDS:
            redacted[name] = "[redacted]"
        else:
            redacted[name] = value
    return redacted


def _map_request_attributes(request, attributes: dict[str, Any]) -> dict[str, Any]:
    result = {**attributes}
    if isinstance(result.get("values"), dict):
        result["values"] = redact_credentials(result["values"])

    result["method"] = request.method
    result["path"] = request.url.path
    if request.client:
        result["client_host"] = request.client.host
    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace inbound requests.

    Headers are not captured: they carry the bearer token and session cookie.
    """
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL issued by the repositories."""
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,
    )
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Trace outbound calls to Google and GitHub.

    Headers and bodies are not captured: they hold authorization codes and
    access tokens.
    """
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
