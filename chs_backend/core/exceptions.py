"""
Error taxonomy shared by all apps, and the DRF exception handler that turns
every error into the ``{"success": false, ...}`` response envelope.

Services raise these exceptions; views let them propagate to
``envelope_exception_handler`` instead of building error responses by hand.
"""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ClinicError(Exception):
    """Base exception for all domain errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Internal server error'

    def __init__(self, message: str | None = None, *, error: Any = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            'success': False,
            'message': self.message,
        }
        if self.error is not None:
            result['error'] = self.error
        return result


class NotFound(ClinicError):
    """Referenced patient, payment or claim does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found'


class InvalidState(ClinicError):
    """The record exists but is not in a state that allows the operation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid state for this operation'


class GatewayError(ClinicError):
    """
    The external payment provider was unreachable or rejected the request.

    ``error`` carries the provider's raw payload when one was returned.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = 'Payment gateway error'


class Forbidden(exceptions.PermissionDenied):
    default_detail = 'Your role is not permitted to perform this action.'


class Unauthenticated(exceptions.NotAuthenticated):
    pass


def _detail_message(data) -> str:
    if isinstance(data, dict) and 'detail' in data:
        return str(data['detail'])
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def envelope_exception_handler(exc, context):
    """DRF ``EXCEPTION_HANDLER``: map any exception to the JSON envelope."""
    if isinstance(exc, ClinicError):
        if exc.status_code >= 500:
            logger.error('%s: %s', exc.__class__.__name__, exc.message)
        return Response(exc.to_dict(), status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            'Unhandled error in %s',
            view.__class__.__name__ if view is not None else 'unknown view',
            exc_info=exc,
        )
        return Response(
            {'success': False, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'success': False,
            'message': 'Validation failed',
            'errors': response.data,
        }
    else:
        response.data = {
            'success': False,
            'message': _detail_message(response.data),
        }
    return response
