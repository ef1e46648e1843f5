from __future__ import annotations

from django.contrib import admin
from django.test import RequestFactory, TestCase

from chs_backend.core.models import User
from chs_backend.payments.models import Payment


class PaymentAdminTest(TestCase):
    def test_claim_fields_are_read_only(self):
        superuser = User.objects.create_superuser(
            username="admin_payment_test",
            email="admin_payment@example.com",
            password="DummyPass123!",
        )
        request = RequestFactory().get("/admin/payments/payment/")
        request.user = superuser

        readonly = admin.site._registry[Payment].get_readonly_fields(request)

        for field in ("claim_provider", "claim_number", "claim_approved_amount", "claim_status", "status"):
            self.assertIn(field, readonly)
