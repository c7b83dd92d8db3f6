import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.errors import IntegrityViolation, ServiceError

logger = logging.getLogger(__name__)


def service_exception_handler(exc, context):
    """Render ``ServiceError`` subclasses; defer everything else to DRF."""
    if isinstance(exc, ServiceError):
        if isinstance(exc, IntegrityViolation):
            logger.error("Integrity violation in %s: %s", context.get("view"), exc.message)
        return Response(exc.as_payload(), status=exc.status_code)
    return exception_handler(exc, context)
