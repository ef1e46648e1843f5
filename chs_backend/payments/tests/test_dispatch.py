from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

from django.test import TestCase

from chs_backend.core.exceptions import InvalidState
from chs_backend.patients.models import Patient
from chs_backend.payments.models import Payment
from chs_backend.payments.services import initiate_payment


class InitiatePaymentDispatchTest(TestCase):
    """``initiate_payment`` routes each method to its flow."""

    def setUp(self):
        self.patient = Patient.objects.create(
            name="Zawadi Chebet",
            age=27,
            gender=Patient.GENDER_FEMALE,
            phone_number="0711000222",
            condition="Antenatal care",
            insurance_provider=Patient.PROVIDER_NSSF,
            insurance_number="NSSF-4455",
            insurance_status=Patient.INSURANCE_ACTIVE,
        )

    def test_cash_is_completed(self):
        payment = initiate_payment(Payment.METHOD_CASH, patient_id=self.patient.id, amount=Decimal("200"))

        self.assertEqual(payment.status, Payment.STATUS_COMPLETED)

    def test_mpesa_uses_given_client(self):
        client = MagicMock()
        client.stk_push.return_value = {"CheckoutRequestID": "ws_CO_DISPATCH", "MerchantRequestID": "m-1"}

        payment = initiate_payment(
            Payment.METHOD_MPESA,
            patient_id=self.patient.id,
            amount=Decimal("100"),
            phone_number="0711000222",
            client=client,
        )

        self.assertEqual(payment.status, Payment.STATUS_PENDING)
        self.assertEqual(payment.transaction_id, "ws_CO_DISPATCH")
        client.stk_push.assert_called_once()

    def test_insurance_delegates_to_claim_submission(self):
        payment = initiate_payment(
            Payment.METHOD_INSURANCE,
            patient_id=self.patient.id,
            amount=Decimal("4200"),
            service_description="Maternity admission",
        )

        payment.refresh_from_db()
        self.assertEqual(payment.payment_method, Payment.METHOD_INSURANCE)
        self.assertEqual(payment.status, Payment.STATUS_PENDING)
        self.assertEqual(payment.patient_id, self.patient.id)
        self.assertEqual(payment.description, "Maternity admission")
        self.assertEqual(payment.claim_provider, Patient.PROVIDER_NSSF)
        self.assertEqual(payment.claim_status, Payment.CLAIM_PENDING)
        self.assertEqual(payment.claim_approved_amount, Decimal("0"))
        self.assertTrue(payment.transaction_id.startswith("CLM-"))
        self.assertEqual(payment.transaction_id, payment.claim_number)

    def test_insurance_without_cover_creates_nothing(self):
        self.patient.insurance_status = Patient.INSURANCE_INACTIVE
        self.patient.save()

        with self.assertRaises(InvalidState):
            initiate_payment(
                Payment.METHOD_INSURANCE,
                patient_id=self.patient.id,
                amount=Decimal("4200"),
                service_description="Maternity admission",
            )
        self.assertFalse(Payment.objects.exists())

    def test_card_cannot_be_initiated(self):
        with self.assertRaises(InvalidState):
            initiate_payment(Payment.METHOD_CARD, patient_id=self.patient.id, amount=Decimal("100"))
        self.assertFalse(Payment.objects.exists())
