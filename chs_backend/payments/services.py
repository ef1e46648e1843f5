"""
Payment initiation and M-Pesa callback handling.

``initiate_payment`` dispatches by method:

* cash      -> completed immediately, locally generated transaction id
* mpesa     -> STK push through the gateway, pending until the callback
* insurance -> ``chs_backend.insurance.services.submit_claim``

The Payment row is the only write (the patient link is its foreign key) and is
created inside ``transaction.atomic()``. Gateway calls happen before the
transaction opens.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from decimal import Decimal
from typing import Any

from django.db import transaction

from chs_backend.core.exceptions import InvalidState
from chs_backend.core.utils import log_patient_action
from chs_backend.patients.services import get_patient
from chs_backend.payments.gateway import MpesaClient, get_mpesa_client
from chs_backend.payments.models import Payment

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_lowercase
RESULT_CODE_SUCCESS = 0


def generate_reference(prefix: str, length: int, *, upper: bool = False) -> str:
    """``{prefix}-{epoch ms}-{random suffix}``, e.g. ``CASH-1718000000000-k3j9x0a1b``."""
    alphabet = (string.digits + string.ascii_uppercase) if upper else BASE36
    suffix = ''.join(secrets.choice(alphabet) for _ in range(length))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def account_reference_for(patient) -> str:
    return f"PAT{str(patient.pk)[-6:]}"


def record_cash_payment(*, patient_id, amount: Decimal, description: str = '', recorded_by=None) -> Payment:
    """Record a cash payment. Cash needs no confirmation so it is completed at once."""
    with transaction.atomic():
        patient = get_patient(patient_id)
        payment = Payment.objects.create(
            patient=patient,
            amount=amount,
            payment_method=Payment.METHOD_CASH,
            status=Payment.STATUS_COMPLETED,
            transaction_id=generate_reference('CASH', 9),
            description=description or '',
            recorded_by=recorded_by,
        )

    logger.info("Cash payment %s recorded for patient %s", payment.transaction_id, patient.pk)
    log_patient_action(
        recorded_by,
        'payment_cash',
        patient_id=patient.pk,
        meta={'payment_id': payment.pk, 'amount': str(amount)},
    )
    return payment


def initiate_mpesa_payment(
    *,
    patient_id,
    amount: Decimal,
    phone_number: str,
    description: str = '',
    recorded_by=None,
    client: MpesaClient | None = None,
) -> tuple[Payment, dict[str, Any]]:
    """Send an STK push and store the pending payment.

    Returns ``(payment, gateway_response)``. A gateway failure raises
    GatewayError and nothing is written.
    """
    patient = get_patient(patient_id)
    client = client or get_mpesa_client()

    response = client.stk_push(
        phone_number=phone_number,
        amount=amount,
        account_reference=account_reference_for(patient),
        description=description,
    )

    with transaction.atomic():
        payment = Payment.objects.create(
            patient=patient,
            amount=amount,
            payment_method=Payment.METHOD_MPESA,
            status=Payment.STATUS_PENDING,
            transaction_id=response['CheckoutRequestID'],
            merchant_request_id=response.get('MerchantRequestID') or '',
            phone_number=phone_number,
            description=description or '',
            recorded_by=recorded_by,
        )

    log_patient_action(
        recorded_by,
        'payment_mpesa_initiated',
        patient_id=patient.pk,
        meta={'payment_id': payment.pk, 'checkout_request_id': payment.transaction_id},
    )
    return payment, response


def initiate_payment(method: str, **params):
    """Dispatch a payment request by method."""
    if method == Payment.METHOD_CASH:
        return record_cash_payment(**params)
    if method == Payment.METHOD_MPESA:
        payment, _response = initiate_mpesa_payment(**params)
        return payment
    if method == Payment.METHOD_INSURANCE:
        from chs_backend.insurance.services import submit_claim

        payment, _claim = submit_claim(**params)
        return payment
    raise InvalidState(f"Payment method '{method}' cannot be initiated here")


def parse_stk_callback(payload) -> dict[str, Any] | None:
    """Flatten ``Body.stkCallback`` into a dict, or None when the shape is wrong.

    Metadata items (Amount, MpesaReceiptNumber, PhoneNumber, ...) become keys
    of ``metadata``.
    """
    try:
        callback = payload['Body']['stkCallback']
        checkout_request_id = callback['CheckoutRequestID']
        result_code = int(callback['ResultCode'])
    except (KeyError, TypeError, ValueError):
        return None
    if not isinstance(callback, dict) or not isinstance(checkout_request_id, str) or not checkout_request_id:
        return None

    callback_metadata = callback.get('CallbackMetadata') or {}
    if not isinstance(callback_metadata, dict):
        return None
    items = callback_metadata.get('Item') or []
    if not isinstance(items, list):
        return None

    metadata = {}
    for item in items:
        if isinstance(item, dict) and isinstance(item.get('Name'), str):
            metadata[item['Name']] = item.get('Value')

    return {
        'checkout_request_id': checkout_request_id,
        'merchant_request_id': str(callback.get('MerchantRequestID') or ''),
        'result_code': result_code,
        'result_desc': str(callback.get('ResultDesc') or ''),
        'metadata': metadata,
    }


def handle_mpesa_callback(payload) -> Payment | None:
    """Apply a gateway callback to the matching pending payment.

    Never raises for application-side mismatches: malformed bodies, unknown
    checkout ids and transitions the lifecycle rejects are logged and ignored.
    Re-delivery of an already applied outcome is a no-op. Returns the payment
    when one was matched.
    """
    parsed = parse_stk_callback(payload)
    if parsed is None:
        logger.warning("Ignoring malformed M-Pesa callback: %s", payload)
        return None

    checkout_request_id = parsed['checkout_request_id']
    success = parsed['result_code'] == RESULT_CODE_SUCCESS
    metadata = parsed['metadata']

    with transaction.atomic():
        payment = (
            Payment.objects.select_for_update()
            .filter(transaction_id=checkout_request_id, payment_method=Payment.METHOD_MPESA)
            .first()
        )
        if payment is None:
            logger.warning("M-Pesa callback for unknown checkout id %s", checkout_request_id)
            return None

        if success:
            new_status = Payment.STATUS_COMPLETED
            changes = {
                'mpesa_receipt_number': str(metadata.get('MpesaReceiptNumber') or ''),
                'result_description': parsed['result_desc'][:255],
            }
            if metadata.get('PhoneNumber'):
                changes['phone_number'] = str(metadata['PhoneNumber'])
        else:
            new_status = Payment.STATUS_FAILED
            changes = {'result_description': parsed['result_desc'][:255]}

        try:
            applied = payment.transition_to(new_status, **changes)
        except InvalidState as exc:
            logger.warning("Ignoring M-Pesa callback for %s: %s", checkout_request_id, exc.message)
            return payment

    if not applied:
        logger.info("Duplicate M-Pesa callback for %s ignored", checkout_request_id)
        return payment

    logger.info(
        "M-Pesa payment %s -> %s (result %s)",
        checkout_request_id, payment.status, parsed['result_code'],
    )
    log_patient_action(
        None,
        'payment_mpesa_callback',
        patient_id=payment.patient_id,
        meta={
            'payment_id': payment.pk,
            'status': payment.status,
            'result_code': parsed['result_code'],
            'amount': metadata.get('Amount'),
        },
    )
    return payment
