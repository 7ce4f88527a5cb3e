"""
Exception handlers for the prompt A/B test service.
"""
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from prompt_ab.logging_config import setup_logging

logger = setup_logging()


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Custom exception handler to ensure consistent error responses.
    Registered for the Starlette base class so routing 404s and 405s are covered too.
    """
    request_id = getattr(request.state, 'request_id', 'unknown')

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.detail if isinstance(exc.detail, dict) else {
            "error": "http_error",
            "message": str(exc.detail),
            "request_id": request_id
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed hook payloads are caller bugs; report them without a stack trace"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        "Rejected malformed request",
        extra={"request_id": request_id, "error": str(exc.errors())}
    )

    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": "Request payload does not match the hook contract",
            "request_id": request_id,
            "details": jsonable_encoder(exc.errors())
        }
    )
