import logging
from typing import Dict, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Optional[Dict[str, str]] = None,
    code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
) -> HTTPException:
    """Build an HTTPException whose detail is ``{"message", "field_errors"}``.

    Rejected input is logged at warning; 5xx codes are logged at error.
    """
    field_errors = field_errors or {}
    level = logging.ERROR if code >= 500 else logging.WARNING
    logger.log(level, "%s %s", message, field_errors)
    return HTTPException(
        status_code=code,
        detail={"message": message, "field_errors": field_errors},
    )
