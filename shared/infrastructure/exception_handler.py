"""
API error rendering

Installed as DRF's ``EXCEPTION_HANDLER``. Every error leaves the API as
``{"code": ..., "detail": ..., "errors": ...}`` so clients can tell
"slot taken" from "storage down" without parsing prose.
"""

from __future__ import annotations

import logging

from django.db import OperationalError  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import EngineError, Unavailable

logger = logging.getLogger(__name__)


def _problem(code: str, detail: str, errors=None) -> dict:
    body = {"code": code, "detail": detail}
    if errors:
        body["errors"] = errors
    return body


def api_exception_handler(exc, context):
    if isinstance(exc, EngineError):
        headers = {}
        if isinstance(exc, Unavailable):
            headers["Retry-After"] = str(exc.retry_after)
        return Response(
            _problem(exc.code, exc.message, exc.details),
            status=exc.status_code,
            headers=headers,
        )

    if isinstance(exc, OperationalError):
        view = context.get("view")
        logger.error(
            f"Database unavailable in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=True,
        )
        return Response(
            _problem(Unavailable.code, Unavailable.default_message),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
            headers={"Retry-After": str(Unavailable.retry_after)},
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        response.data = _problem("validation_error", "Invalid request.", response.data)
    elif isinstance(exc, exceptions.APIException):
        detail = response.data.get("detail", "") if isinstance(response.data, dict) else response.data
        code = getattr(detail, "code", None) or exc.default_code
        response.data = _problem(str(code), str(detail))
    return response
