"""Project-wide DRF exception handler.

Errors DRF already knows how to render (validation, authentication,
permissions, 404, throttling) keep their normal response. Anything else is
logged with its traceback and answered with the generic German 500 message
the frontend displays.
"""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Ein Serverfehler ist aufgetreten"


def api_exception_handler(exc, context):  # type: ignore
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    request = context.get("request")
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'} "
        f"({getattr(request, 'method', '?')} {getattr(request, 'path', '?')}): {exc}",
        exc_info=exc,
    )
    return Response(
        {"success": False, "message": SERVER_ERROR_MESSAGE},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
