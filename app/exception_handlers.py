"""Map access-layer exceptions to HTTP responses.

Denials are one generic 403 whatever the cause. Storage failures are a 500,
never a 403, so an outage does not read as "access denied".
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.errors import AccessDenied, InvalidArgumentError, StorageUnavailableError
from app.logger import logger

async def access_denied_handler(request: Request, exc: AccessDenied) -> JSONResponse:
    return JSONResponse(status_code=403, content={"error": AccessDenied.message})

async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})

async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
    logger.error(
        "storage unavailable",
        extra={"path": request.url.path, "method": request.method, "error_message": str(exc)},
    )
    return JSONResponse(status_code=500, content={"error": "internal error"})

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessDenied, access_denied_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
