from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """
    Expected, typed outcome of a business operation.
    Each subclass maps to one HTTP status for the API layer.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"
    default_detail = "Request could not be completed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


def api_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "%s rejected: %s (%s)",
            view.__class__.__name__ if view is not None else "request", exc.code, exc.detail,
        )
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)
    return exception_handler(exc, context)
