# errors.py
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StudentServiceError(Exception):
    """Base class for errors that map onto an HTTP status and an {"error": ...} body."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudentServiceError):
    status_code = 400

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class MalformedIdentifierError(StudentServiceError):
    status_code = 400


class NotFoundError(StudentServiceError):
    status_code = 404


class UnexpectedError(StudentServiceError):
    status_code = 500


class PersistenceUnavailableError(UnexpectedError):
    """The database could not be reached. Reads degrade, writes surface it as a 500."""


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StudentServiceError)
    async def student_error_handler(request: Request, exc: StudentServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": _describe_request_errors(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


def _describe_request_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"{location}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "Invalid request body")
