"""
Insurance claims and membership verification.

Claims are stored as ``Payment`` rows with method ``insurance``; the claim
number doubles as the payment's transaction id. Adjudication is external: the
claim stays ``pending`` here until someone updates it by other means.

NSSF and SHA verification are mocked. They accept any member number, mark
the patient's cover active and return a synthetic verification payload.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from chs_backend.core.exceptions import InvalidState, NotFound
from chs_backend.core.utils import log_patient_action
from chs_backend.patients.models import Patient
from chs_backend.patients.services import get_patient
from chs_backend.payments.models import Payment
from chs_backend.payments.services import generate_reference

logger = logging.getLogger(__name__)

ESTIMATED_PROCESSING_TIME = '5-7 business days'


def submit_claim(
    *,
    patient_id,
    amount: Decimal,
    service_description: str = '',
    documents=None,
    recorded_by=None,
    description: str = '',
) -> tuple[Payment, dict]:
    """Create a pending insurance claim for a patient with active cover.

    Returns ``(payment, claim)`` where ``claim`` is the submission receipt.
    """
    service_description = service_description or description

    with transaction.atomic():
        patient = get_patient(patient_id, for_update=True)
        if not patient.has_active_insurance:
            raise InvalidState('Patient does not have active insurance coverage')

        claim_number = generate_reference('CLM', 6, upper=True)
        payment = Payment.objects.create(
            patient=patient,
            amount=amount,
            payment_method=Payment.METHOD_INSURANCE,
            status=Payment.STATUS_PENDING,
            transaction_id=claim_number,
            description=service_description,
            claim_provider=patient.insurance_provider,
            claim_number=claim_number,
            claim_approved_amount=Decimal('0'),
            claim_status=Payment.CLAIM_PENDING,
            recorded_by=recorded_by,
        )

    claim = {
        'claim_number': claim_number,
        'status': Payment.CLAIM_PENDING,
        'submitted_date': payment.created_at,
        'provider': patient.insurance_provider,
        'requested_amount': amount,
        'estimated_processing_time': ESTIMATED_PROCESSING_TIME,
        'documents': list(documents or []),
    }

    logger.info("Insurance claim %s submitted for patient %s", claim_number, patient.pk)
    log_patient_action(
        recorded_by,
        'insurance_claim_submitted',
        patient_id=patient.pk,
        meta={'payment_id': payment.pk, 'claim_number': claim_number},
    )
    return payment, claim


def get_claim_status(claim_number: str) -> dict:
    try:
        payment = Payment.objects.select_related('patient').get(
            payment_method=Payment.METHOD_INSURANCE,
            claim_number=claim_number,
        )
    except Payment.DoesNotExist:
        raise NotFound('Claim not found')

    return {
        'claim_number': payment.claim_number,
        'status': payment.claim_status,
        'provider': payment.claim_provider,
        'requested_amount': payment.amount,
        'approved_amount': payment.claim_approved_amount,
        'last_updated': payment.updated_at,
        'remarks': (
            'Claim is being reviewed'
            if payment.claim_status == Payment.CLAIM_PENDING
            else 'Claim processed'
        ),
    }


def get_patient_insurance(patient_id) -> dict:
    patient = get_patient(patient_id)
    return {
        'insurance_provider': patient.insurance_provider,
        'insurance_number': patient.insurance_number,
        'insurance_status': patient.insurance_status,
    }


def _mark_verified(patient: Patient, provider: str, member_number: str) -> None:
    patient.insurance_provider = provider
    patient.insurance_number = member_number
    patient.insurance_status = Patient.INSURANCE_ACTIVE
    patient.save(update_fields=['insurance_provider', 'insurance_number', 'insurance_status', 'updated_at'])


def verify_membership(provider: str, *, patient_id, member_number: str, user=None) -> dict:
    """Mock NSSF/SHA membership check that activates the patient's cover."""
    if provider not in (Patient.PROVIDER_NSSF, Patient.PROVIDER_SHA):
        raise InvalidState(f"Verification is not available for provider '{provider}'")

    with transaction.atomic():
        patient = get_patient(patient_id, for_update=True)
        _mark_verified(patient, provider, member_number)

    expiry_date = (timezone.now() + timedelta(days=365)).date()
    if provider == Patient.PROVIDER_NSSF:
        result = {
            'is_valid': True,
            'member_name': patient.name,
            'member_id': member_number,
            'status': Patient.INSURANCE_ACTIVE,
            'coverage_amount': 50000,
            'expiry_date': expiry_date,
        }
    else:
        result = {
            'is_valid': True,
            'member_name': patient.name,
            'sha_number': member_number,
            'status': Patient.INSURANCE_ACTIVE,
            'tier': 'Basic',
            'coverage_details': {
                'outpatient': 'Covered',
                'inpatient': 'Covered',
                'maternity': 'Covered',
                'dental': 'Limited',
            },
            'facilities': ['Level 1-5 facilities'],
            'expiry_date': expiry_date,
        }

    log_patient_action(
        user,
        'insurance_verified',
        patient_id=patient.pk,
        meta={'provider': provider},
    )
    return result
