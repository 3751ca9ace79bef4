"""Domain exception to HTTP response mapping."""

import logging

import falcon
import falcon.asgi

from opsauth.domain.exceptions import (
    AlreadyProcessed,
    Conflict,
    DeliveryFailed,
    Expired,
    Forbidden,
    InUse,
    InvalidPermission,
    InvalidState,
    InvalidToken,
    NotFound,
    OpsAuthError,
    PermissionKeyUnknown,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[OpsAuthError], str]] = [
    (NotFound, falcon.HTTP_404),
    (InvalidToken, falcon.HTTP_404),
    (InvalidPermission, falcon.HTTP_400),
    (ValidationError, falcon.HTTP_400),
    (Forbidden, falcon.HTTP_403),
    (InUse, falcon.HTTP_409),
    (Conflict, falcon.HTTP_409),
    (AlreadyProcessed, falcon.HTTP_409),
    (InvalidState, falcon.HTTP_409),
    (Expired, falcon.HTTP_410),
    (DeliveryFailed, falcon.HTTP_502),
    (PermissionKeyUnknown, falcon.HTTP_500),
]


def status_for(ex: OpsAuthError) -> str:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(ex, error_type):
            return status
    return falcon.HTTP_500


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: OpsAuthError, params: dict
) -> None:
    status = status_for(ex)
    if status == falcon.HTTP_500:
        # A declared requirement missing from the catalog is a deployment bug.
        logger.error("%s %s failed: %s", req.method, req.path, ex)
    resp.status = status
    resp.media = {"error": str(ex), "type": type(ex).__name__}


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    logger.error("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """HTTPError keeps Falcon's own handler; it is more specific than Exception."""
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(OpsAuthError, handle_domain_error)
