from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jukebox.core import JukeboxError, log_error, log_warning


async def _jukebox_error_handler(request: Request, exc: JukeboxError) -> JSONResponse:
    message = f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
    if exc.status_code >= 500:
        log_error(message)
    else:
        log_warning(message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = first.get("msg", "Invalid request")
    message = f"Invalid request: {location} {detail}".strip() if location else detail
    return JSONResponse({"error": message}, status_code=400)


def register_error_handlers(app: FastAPI) -> None:
    """Render every error as {"error": message} with the matching status."""
    app.add_exception_handler(JukeboxError, _jukebox_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
