# storefront/core/responses.py
"""
Unified API response envelope.

Success:  {"success": true, "data": ...}
Failure:  {"success": false, "error": {"code": ..., "message": ..., "fieldErrors": [...]}}
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse

from storefront.core.exceptions import (
    DEFAULT_ERROR_MESSAGES,
    ERROR_CODE_TO_HTTP_STATUS,
    ErrorCode,
    StorefrontError,
    ValidationError,
)
from storefront.core.logging_config import mask_sensitive_info

logger = logging.getLogger(__name__)


def success(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def error(
    code: ErrorCode,
    message: str,
    field_errors: Optional[List[Dict[str, str]]] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": code.value, "message": message}
    if field_errors:
        body["fieldErrors"] = field_errors
    return {"success": False, "error": body}


@dataclass
class ErrorHandleResult:
    code: ErrorCode
    message: str
    http_status: int
    field_errors: List[Dict[str, str]] = field(default_factory=list)


def handle_error(exc: BaseException) -> ErrorHandleResult:
    """Map any exception to an error code, message and HTTP status"""
    if isinstance(exc, ValidationError):
        return ErrorHandleResult(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
            field_errors=exc.field_errors,
        )

    if isinstance(exc, StorefrontError) and exc.code != ErrorCode.INTERNAL_ERROR:
        return ErrorHandleResult(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
        )

    # Anything unexpected is an internal error
    return ErrorHandleResult(
        code=ErrorCode.INTERNAL_ERROR,
        message=DEFAULT_ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR],
        http_status=ERROR_CODE_TO_HTTP_STATUS[ErrorCode.INTERNAL_ERROR],
    )


def mask_error_for_client(exc: BaseException) -> Dict[str, Any]:
    """Client-facing error body; internal details never leave the server"""
    result = handle_error(exc)

    if result.code == ErrorCode.INTERNAL_ERROR:
        return {
            "code": ErrorCode.INTERNAL_ERROR.value,
            "message": DEFAULT_ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR],
        }

    body: Dict[str, Any] = {"code": result.code.value, "message": result.message}
    if result.code == ErrorCode.VALIDATION_ERROR and result.field_errors:
        body["fieldErrors"] = result.field_errors
    return body


def format_error_for_log(exc: BaseException) -> str:
    """Log line for an exception with credentials masked"""
    return f"{type(exc).__name__}: {mask_sensitive_info(str(exc))}"


def error_response(exc: BaseException, context: str = "") -> JSONResponse:
    """Log the error internally and render the masked envelope"""
    result = handle_error(exc)

    if result.code == ErrorCode.INTERNAL_ERROR:
        logger.error(f"Error in {context}: {format_error_for_log(exc)}", exc_info=exc)
    else:
        logger.info(f"{context}: {result.code.value} ({result.http_status})")

    return JSONResponse(
        status_code=result.http_status,
        content={"success": False, "error": mask_error_for_client(exc)},
    )
