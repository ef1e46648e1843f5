from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from chs_backend.core.exceptions import InvalidState
from chs_backend.patients.models import Patient
from chs_backend.payments.models import Payment


class PaymentStateMachineTest(TestCase):
    def setUp(self):
        self.patient = Patient.objects.create(
            name="Samuel Kiprop",
            age=61,
            gender=Patient.GENDER_MALE,
            phone_number="0700111222",
            condition="Type 2 diabetes",
        )

    def _payment(self, status=Payment.STATUS_PENDING):
        return Payment.objects.create(
            patient=self.patient,
            amount=Decimal("100"),
            payment_method=Payment.METHOD_MPESA,
            status=status,
        )

    def test_pending_can_complete_or_fail(self):
        payment = self._payment()
        self.assertTrue(payment.can_transition_to(Payment.STATUS_COMPLETED))
        self.assertTrue(payment.can_transition_to(Payment.STATUS_FAILED))
        self.assertFalse(payment.can_transition_to(Payment.STATUS_REFUNDED))

    def test_transition_persists_status_and_changes(self):
        payment = self._payment()

        self.assertTrue(payment.transition_to(Payment.STATUS_COMPLETED, mpesa_receipt_number="QK12ABC"))

        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.STATUS_COMPLETED)
        self.assertEqual(payment.mpesa_receipt_number, "QK12ABC")

    def test_same_status_is_noop(self):
        payment = self._payment(Payment.STATUS_COMPLETED)
        self.assertFalse(payment.transition_to(Payment.STATUS_COMPLETED))

    def test_terminal_states_reject_transitions(self):
        for status in (Payment.STATUS_FAILED, Payment.STATUS_REFUNDED):
            payment = self._payment(status)
            with self.assertRaises(InvalidState):
                payment.transition_to(Payment.STATUS_COMPLETED)
            payment.refresh_from_db()
            self.assertEqual(payment.status, status)

    def test_refund_only_from_completed(self):
        payment = self._payment(Payment.STATUS_COMPLETED)
        self.assertTrue(payment.refund())
        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.STATUS_REFUNDED)

        with self.assertRaises(InvalidState):
            self._payment().refund()

    def test_insurance_claim_only_for_insurance_payments(self):
        self.assertIsNone(self._payment().insurance_claim)

        claim = Payment.objects.create(
            patient=self.patient,
            amount=Decimal("2000"),
            payment_method=Payment.METHOD_INSURANCE,
            transaction_id="CLM-1-ABCDEF",
            claim_provider=Patient.PROVIDER_SHA,
            claim_number="CLM-1-ABCDEF",
            claim_approved_amount=Decimal("0"),
            claim_status=Payment.CLAIM_PENDING,
        )
        self.assertEqual(claim.insurance_claim["provider"], Patient.PROVIDER_SHA)
        self.assertEqual(claim.insurance_claim["status"], Payment.CLAIM_PENDING)

    def test_payment_survives_patient_delete(self):
        payment = self._payment(Payment.STATUS_COMPLETED)
        self.patient.delete()

        payment.refresh_from_db()
        self.assertIsNone(payment.patient_id)
