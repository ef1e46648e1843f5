from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from chs_backend.core.models import Role, User
from chs_backend.patients.models import Patient


class SeedCommandTest(TestCase):
    def test_seed_is_repeatable(self):
        call_command("seed", stdout=StringIO())
        roles = Role.objects.count()
        users = User.objects.count()
        patients = Patient.objects.count()

        call_command("seed", stdout=StringIO())

        self.assertEqual(roles, 4)
        self.assertGreater(patients, 0)
        self.assertEqual(Role.objects.count(), roles)
        self.assertEqual(User.objects.count(), users)
        self.assertEqual(Patient.objects.count(), patients)
        self.assertTrue(User.objects.filter(username="dr_wanjiku", role__name=Role.DOCTOR).exists())
