from __future__ import annotations

import structlog
from fastapi import HTTPException, Request

from fitstreak.core.config import get_settings
from fitstreak.economy.errors import (
    FailedPreconditionError,
    GamificationError,
    InvalidArgumentError,
    NotFoundError,
)
from fitstreak.services.internal_auth import (
    extract_client_ip,
    is_client_ip_allowed,
    is_internal_request_authenticated,
)

logger = structlog.get_logger(__name__)


def assert_internal_access(request: Request) -> None:
    settings = get_settings()
    client_ip = extract_client_ip(
        request,
        trusted_proxies=getattr(settings, "internal_api_trusted_proxies", ""),
    )

    if not is_client_ip_allowed(client_ip=client_ip, allowlist=settings.internal_api_allowlist):
        logger.warning("internal_api_auth_failed", reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    if not is_internal_request_authenticated(request, expected_token=settings.internal_api_token):
        logger.warning("internal_api_auth_failed", reason="invalid_credentials", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


def as_http_exception(exc: GamificationError) -> HTTPException:
    if isinstance(exc, InvalidArgumentError):
        status_code = 422
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, FailedPreconditionError):
        status_code = 409
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail={"code": exc.code})
