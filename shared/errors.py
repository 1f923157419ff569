"""
Error taxonomy shared by every service.

Services raise these instead of HTTPException so the same operation can be
called from a router, a websocket handler or a test without an HTTP context.
register_exception_handlers() turns them into JSON responses of the form
{"error": "<message>"} with the status code carried by the class.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger(__name__)


class StudioError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(StudioError):
    status_code = 400


class PaymentVerificationFailed(StudioError):
    status_code = 400


class NotFound(StudioError):
    status_code = 404


class CapacityExceeded(StudioError):
    status_code = 409


class InvalidTransition(StudioError):
    status_code = 409


class Conflict(StudioError):
    status_code = 409


class ConfigurationError(StudioError):
    status_code = 500


class GatewayError(StudioError):
    status_code = 502


async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudioError, studio_error_handler)
