"""Error payloads and exception handlers shared by every endpoint"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(Exception):
    """Raised by routes; rendered as {success: false, error, message, ...extra}"""

    def __init__(self, status_code: int, error: str, message: str, **extra: Any):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.message = message
        self.extra = extra


def error_payload(error: str, message: str, **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "error": error, "message": message}
    payload.update(extra)
    return jsonable_encoder(payload)


def _validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for err in exc.errors():
        # Drop the "query"/"path"/"body" prefix
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append(
            {
                "field": ".".join(loc) or "unknown",
                "message": err.get("msg", "Invalid value"),
                "value": err.get("input"),
            }
        )
    return errors


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.error, exc.message, **exc.extra))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        content = error_payload("Not Found", f"Route {request.url.path} not found")
    else:
        content = error_payload(str(exc.detail), str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=error_payload(
            "Validation failed",
            "Please check the provided data",
            validationErrors=_validation_errors(exc),
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    logging.exception(f"Unhandled error: {exc}", extra={"request_id": request_id})
    return JSONResponse(status_code=500, content=error_payload("Internal Server Error", "Something went wrong"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
