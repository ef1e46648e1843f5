import logging

from rest_framework import status as http_status
from rest_framework.response import Response

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_patient_action(user, action, patient_id=None, meta=None):
    """Write a patient/payment access event to the audit log.

    Audit failures are logged and never propagate to the request.
    """

    role_name = ''
    try:
        role = getattr(user, 'role', None)
        if role is not None:
            role_name = getattr(role, 'name', '') or ''
    except Exception:
        role_name = ''

    try:
        AuditLog.objects.create(
            user=user if getattr(user, 'is_authenticated', False) else None,
            role_name=role_name,
            action=action,
            patient_id=patient_id,
            meta=meta,
        )
    except Exception:
        logger.exception('AuditLog write failed (action=%s, patient_id=%s)', action, patient_id)


def envelope(data=None, *, message=None, status=http_status.HTTP_200_OK, **extra):
    """Build a success response: ``{"success": true, "message"?, "data"?, ...}``."""
    payload = {'success': True}
    if message:
        payload['message'] = message
    payload.update(extra)
    if data is not None:
        payload['data'] = data
    return Response(payload, status=status)
