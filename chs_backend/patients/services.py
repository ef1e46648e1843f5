"""
Patient lookups and visit recording shared by the patients, payments and
insurance apps.
"""

from __future__ import annotations

from decimal import Decimal

from chs_backend.core.exceptions import NotFound
from chs_backend.patients.models import Patient, Visit


def get_patient(patient_id, *, for_update: bool = False) -> Patient:
    """Return the patient or raise NotFound."""
    qs = Patient.objects.all()
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=patient_id)
    except (Patient.DoesNotExist, ValueError, TypeError):
        raise NotFound('Patient not found')


def add_visit(
    patient: Patient,
    *,
    purpose: str,
    diagnosis: str,
    treatment: str = '',
    cost: Decimal | None = None,
    attended_by=None,
) -> Visit:
    """Append a visit to the patient's history."""
    visit = Visit.objects.create(
        patient=patient,
        purpose=purpose,
        diagnosis=diagnosis,
        treatment=treatment or '',
        cost=cost,
        attended_by=attended_by,
    )
    # Touch updated_at on the patient like any other mutation
    patient.save(update_fields=['updated_at'])
    return visit
