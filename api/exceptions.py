"""
Maps application exceptions to HTTP responses.

Registered as REST_FRAMEWORK['EXCEPTION_HANDLER'].
"""
import logging
from django.db import IntegrityError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import (
    BaseApplicationException, ValidationError, NotFoundError,
    BusinessLogicError,
)

logger = logging.getLogger(__name__)


def _status_for(exc):
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, BusinessLogicError):
        # conflicts and lifecycle violations
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def api_exception_handler(exc, context):
    """DRF exception handler aware of core.exceptions"""
    if isinstance(exc, BaseApplicationException):
        return Response(
            {'detail': exc.message, 'code': exc.code, 'details': exc.details},
            status=_status_for(exc)
        )

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error reached the API layer: {exc}")
        return Response(
            {'detail': 'Resource was modified by another user, reload and retry', 'code': 'CONFLICT'},
            status=status.HTTP_409_CONFLICT
        )

    return exception_handler(exc, context)
