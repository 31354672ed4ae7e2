"""JSON error envelope shared by the API routers."""

from typing import Optional

from fastapi.responses import JSONResponse

from paybridge.common.exceptions import PaybridgeError, ProviderError
from paybridge.common.schemas import ErrorResponse


def error_response(
    e: PaybridgeError,
    status: Optional[str] = None,
) -> JSONResponse:
    """Render ``e`` as ``{ok: false, error, details?, status?}``."""
    details = e.description if isinstance(e, ProviderError) else e.message
    body = ErrorResponse(error=e.code, details=details or None, status=status)
    return JSONResponse(
        status_code=e.http_status,
        content=body.model_dump(exclude_none=True),
    )
