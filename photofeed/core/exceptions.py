"""Uniform error bodies for the REST API.

Every failure leaves the API as ``{"message": str, "success": false}`` with a
meaningful status code, including unexpected exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = "User not authenticated"
SERVER_ERROR_MESSAGE = "Internal Server Error"


class InvalidCredentialsError(exceptions.APIException):
    """Wrong email or password on login.

    Not an ``AuthenticationFailed``: views without authenticators would turn
    that into a 403.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Incorrect email or password"
    default_code = "invalid_credentials"


def _first_message(detail: Any) -> str:
    if isinstance(detail, dict):
        if "detail" in detail:
            return _first_message(detail["detail"])
        for field, value in detail.items():
            text = _first_message(value)
            if field == "non_field_errors":
                return text
            return f"{field}: {text}"
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(str(exc) or None)
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied(str(exc) or None)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", type(view).__name__ if view else "view"
        )
        return Response(
            {"message": SERVER_ERROR_MESSAGE, "success": False},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.NotAuthenticated):
        message = NOT_AUTHENTICATED_MESSAGE
    else:
        message = _first_message(getattr(exc, "detail", response.data))
    response.data = {"message": message, "success": False}
    return response
