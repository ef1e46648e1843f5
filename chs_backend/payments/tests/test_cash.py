from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from rest_framework.test import APIClient

from chs_backend.core.models import AuditLog, Role, User
from chs_backend.patients.models import Patient
from chs_backend.payments.models import Payment


class CashPaymentAPITest(TestCase):
    """Tests for /api/payments/cash/ and the payment listing."""

    def setUp(self):
        role, _ = Role.objects.get_or_create(
            name=Role.COMMUNITY_WORKER,
            defaults={"label": "Community Health Worker"},
        )
        self.worker = User.objects.create_user(
            username="chw_cash_test",
            email="chw_cash@example.com",
            password="DummyPass123!",
            role=role,
        )
        self.patient = Patient.objects.create(
            name="Halima Abdi",
            age=29,
            gender=Patient.GENDER_FEMALE,
            phone_number="0711222333",
            condition="Antenatal care",
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.worker)

    def test_cash_payment_is_completed_immediately(self):
        response = self.client.post(
            "/api/payments/cash/",
            {"patient_id": self.patient.id, "amount": 500, "description": "Consultation"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["success"])
        data = response.data["data"]
        self.assertEqual(data["status"], Payment.STATUS_COMPLETED)
        self.assertEqual(data["payment_method"], Payment.METHOD_CASH)
        self.assertTrue(data["transaction_id"].startswith("CASH-"))
        self.assertEqual(data["patient"]["id"], self.patient.id)
        self.assertIsNone(data["insurance_claim"])

    def test_patient_payment_list_grows_by_one(self):
        self.assertEqual(self.patient.payments.count(), 0)

        self.client.post(
            "/api/payments/cash/",
            {"patient_id": self.patient.id, "amount": "500.00"},
            format="json",
        )

        payments = list(self.patient.payments.all())
        self.assertEqual(len(payments), 1)
        self.assertEqual(payments[0].amount, Decimal("500.00"))
        detail = self.client.get(f"/api/patients/{self.patient.id}/")
        self.assertEqual([p["id"] for p in detail.data["data"]["payments"]], [payments[0].id])

    def test_transaction_ids_are_unique(self):
        for _ in range(3):
            self.client.post(
                "/api/payments/cash/",
                {"patient_id": self.patient.id, "amount": 100},
                format="json",
            )

        ids = list(Payment.objects.values_list("transaction_id", flat=True))
        self.assertEqual(len(ids), 3)
        self.assertEqual(len(set(ids)), 3)

    def test_unknown_patient_is_not_found(self):
        response = self.client.post(
            "/api/payments/cash/",
            {"patient_id": 999999, "amount": 500},
            format="json",
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["message"], "Patient not found")
        self.assertFalse(Payment.objects.exists())

    def test_amount_must_be_positive(self):
        for amount in (0, -10):
            response = self.client.post(
                "/api/payments/cash/",
                {"patient_id": self.patient.id, "amount": amount},
                format="json",
            )
            self.assertEqual(response.status_code, 400)
            self.assertIn("amount", response.data["errors"])
        self.assertFalse(Payment.objects.exists())

    def test_cash_payment_is_audited(self):
        self.client.post(
            "/api/payments/cash/",
            {"patient_id": self.patient.id, "amount": 250},
            format="json",
        )

        entry = AuditLog.objects.get(action="payment_cash")
        self.assertEqual(entry.user_id, self.worker.id)
        self.assertEqual(entry.patient_id, self.patient.id)

    def test_list_filters(self):
        Payment.objects.create(
            patient=self.patient,
            amount=Decimal("1000"),
            payment_method=Payment.METHOD_MPESA,
            transaction_id="ws_CO_TEST_1",
        )
        self.client.post(
            "/api/payments/cash/",
            {"patient_id": self.patient.id, "amount": 300},
            format="json",
        )

        response = self.client.get("/api/payments/")
        self.assertEqual(response.data["count"], 2)

        response = self.client.get("/api/payments/", {"status": Payment.STATUS_PENDING})
        self.assertEqual([p["transaction_id"] for p in response.data["data"]], ["ws_CO_TEST_1"])

        response = self.client.get("/api/payments/", {"payment_method": Payment.METHOD_CASH})
        self.assertEqual(response.data["count"], 1)

        response = self.client.get("/api/payments/", {"patient_id": self.patient.id})
        self.assertEqual(response.data["count"], 2)

        response = self.client.get("/api/payments/", {"patient_id": "abc"})
        self.assertEqual(response.data["count"], 0)

    def test_detail_and_not_found(self):
        payment = Payment.objects.create(
            patient=self.patient,
            amount=Decimal("50"),
            payment_method=Payment.METHOD_CASH,
            status=Payment.STATUS_COMPLETED,
            transaction_id="CASH-1-abc",
        )

        response = self.client.get(f"/api/payments/{payment.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["transaction_id"], "CASH-1-abc")

        response = self.client.get("/api/payments/999999/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["message"], "Payment not found")

    def test_requires_authentication(self):
        response = APIClient().post(
            "/api/payments/cash/",
            {"patient_id": self.patient.id, "amount": 500},
            format="json",
        )

        self.assertEqual(response.status_code, 401)
