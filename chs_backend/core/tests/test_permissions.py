from __future__ import annotations

from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, TestCase

from chs_backend.core.exceptions import Forbidden, Unauthenticated
from chs_backend.core.models import Role, User
from chs_backend.core.permissions import authorize, is_permitted


class PolicyTableTest(SimpleTestCase):
    """The authorization gate decides on role and operation alone."""

    def test_visit_create_limited_to_clinical_roles(self):
        self.assertTrue(is_permitted(Role.DOCTOR, "visit.create"))
        self.assertTrue(is_permitted(Role.NURSE, "visit.create"))
        self.assertFalse(is_permitted(Role.COMMUNITY_WORKER, "visit.create"))
        self.assertFalse(is_permitted(Role.ADMIN, "visit.create"))

    def test_patient_delete_limited_to_doctor_and_admin(self):
        self.assertTrue(is_permitted(Role.DOCTOR, "patient.delete"))
        self.assertTrue(is_permitted(Role.ADMIN, "patient.delete"))
        self.assertFalse(is_permitted(Role.NURSE, "patient.delete"))
        self.assertFalse(is_permitted(Role.COMMUNITY_WORKER, "patient.delete"))

    def test_other_operations_open_to_every_role(self):
        for role in (Role.ADMIN, Role.DOCTOR, Role.NURSE, Role.COMMUNITY_WORKER):
            for operation in ("patient.read", "patient.update", "payment.create", "claim.create"):
                self.assertTrue(is_permitted(role, operation), (role, operation))

    def test_missing_role_is_never_permitted(self):
        self.assertFalse(is_permitted(None, "patient.read"))
        self.assertFalse(is_permitted("", "patient.read"))


class AuthorizeTest(TestCase):
    def setUp(self):
        role, _ = Role.objects.get_or_create(
            name=Role.COMMUNITY_WORKER,
            defaults={"label": "Community Health Worker"},
        )
        self.worker = User.objects.create_user(
            username="chw_perm_test",
            email="chw_perm@example.com",
            password="DummyPass123!",
            role=role,
        )

    def test_anonymous_is_unauthenticated(self):
        with self.assertRaises(Unauthenticated):
            authorize(AnonymousUser(), "patient.read")

    def test_role_outside_policy_is_forbidden(self):
        with self.assertRaises(Forbidden):
            authorize(self.worker, "visit.create")

    def test_permitted_operation_passes(self):
        authorize(self.worker, "patient.create")
