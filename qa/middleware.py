"""
================================================================================
STACKIT Q&A - CUSTOM MIDDLEWARE
================================================================================

@file        middleware.py
@description Maps workflow errors onto JSON API responses
@version     1.0.0

MODULE PURPOSE
================================================================================
ApiErrorMiddleware
   - Renders QAError subclasses raised by views/services as the standard
     {"success": false, "message": ..., "errors": ...} envelope
   - Renders any other exception raised under /api/ as a 500 envelope and
     logs it with the traceback

STATUS MAPPING
================================================================================
    InvalidInput            400
    CapabilityUnavailable   400
    Unauthorized            401
    Forbidden               403
    NotFound                404
    UpstreamFailure         502
    anything else (/api/)   500

Non-API paths (admin, health) keep Django's default error handling.

================================================================================
"""

import logging

from django.http import JsonResponse

from .exceptions import QAError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Convert exceptions into JSON responses.

    Attributes:
        get_response: Next middleware or view in the chain
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        """
        Called by Django when a view raises.

        Returns:
            JsonResponse for handled errors, None to let Django handle it
        """
        if isinstance(exception, QAError):
            if exception.status_code >= 500:
                logger.warning(f"{request.method} {request.path}: {exception.message}")
            return JsonResponse(exception.as_payload(), status=exception.status_code)

        if request.path.startswith("/api/"):
            logger.exception(f"Unhandled error on {request.method} {request.path}")
            return JsonResponse({"success": False, "message": "Internal server error."}, status=500)

        return None
