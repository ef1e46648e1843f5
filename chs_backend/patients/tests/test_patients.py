from __future__ import annotations

from django.test import TestCase

from rest_framework.test import APIClient

from chs_backend.core.models import AuditLog, Role, User
from chs_backend.patients.models import Patient, Visit


class PatientAPITestBase(TestCase):
    """Shared fixtures: one user per role and one registered patient."""

    def setUp(self):
        self.users = {}
        for name, label in (
            (Role.ADMIN, "Administrator"),
            (Role.DOCTOR, "Doctor"),
            (Role.NURSE, "Nurse"),
            (Role.COMMUNITY_WORKER, "Community Health Worker"),
        ):
            role, _ = Role.objects.get_or_create(name=name, defaults={"label": label})
            self.users[name] = User.objects.create_user(
                username=f"{name}_patient_test",
                email=f"{name}_patient@example.com",
                password="DummyPass123!",
                role=role,
            )

        self.patient = Patient.objects.create(
            name="Grace Akinyi",
            age=34,
            gender=Patient.GENDER_FEMALE,
            phone_number="0712345678",
            national_id="12345678",
            condition="Malaria",
            assigned_worker=self.users[Role.COMMUNITY_WORKER],
        )

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def _new_patient_payload(self, **overrides):
        payload = {
            "name": "John Kamau",
            "age": 52,
            "gender": Patient.GENDER_MALE,
            "phone_number": "0722000111",
            "condition": "Hypertension",
        }
        payload.update(overrides)
        return payload


class PatientCreateTest(PatientAPITestBase):
    def test_create_applies_defaults(self):
        client = self._client_for(self.users[Role.COMMUNITY_WORKER])
        response = client.post("/api/patients/", self._new_patient_payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["success"])
        data = response.data["data"]
        self.assertEqual(data["insurance_status"], Patient.INSURANCE_INACTIVE)
        self.assertEqual(data["status"], Patient.STATUS_ACTIVE)
        self.assertEqual(data["insurance_provider"], Patient.PROVIDER_NONE)
        self.assertEqual(data["visits"], [])
        self.assertEqual(data["payments"], [])
        self.assertEqual(data["assigned_worker"]["id"], self.users[Role.COMMUNITY_WORKER].id)

    def test_create_with_nested_clinical_fields(self):
        client = self._client_for(self.users[Role.NURSE])
        payload = self._new_patient_payload(
            symptoms=["headache", "dizziness"],
            medical_history=[{"condition": "Asthma", "diagnosed_date": "2019-03-01"}],
            current_medication=[{"name": "Amlodipine", "dosage": "5mg", "frequency": "daily"}],
        )
        response = client.post("/api/patients/", payload, format="json")

        self.assertEqual(response.status_code, 201)
        patient = Patient.objects.get(pk=response.data["data"]["id"])
        self.assertEqual(patient.symptoms, ["headache", "dizziness"])
        self.assertEqual(patient.medical_history[0]["diagnosed_date"], "2019-03-01")
        self.assertEqual(patient.current_medication[0]["name"], "Amlodipine")

    def test_duplicate_national_id_is_validation_error(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.post(
            "/api/patients/",
            self._new_patient_payload(national_id="12345678"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data["success"])
        self.assertIn("national_id", response.data["errors"])
        self.assertEqual(Patient.objects.filter(national_id="12345678").count(), 1)

    def test_blank_national_ids_do_not_collide(self):
        client = self._client_for(self.users[Role.DOCTOR])
        first = client.post("/api/patients/", self._new_patient_payload(national_id=""), format="json")
        second = client.post(
            "/api/patients/",
            self._new_patient_payload(name="Mary Wanjiru", national_id=""),
            format="json",
        )

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 201)
        self.assertIsNone(second.data["data"]["national_id"])

    def test_missing_required_fields(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.post("/api/patients/", {"name": "Incomplete"}, format="json")

        self.assertEqual(response.status_code, 400)
        for field in ("age", "gender", "phone_number", "condition"):
            self.assertIn(field, response.data["errors"])

    def test_create_writes_audit_entry(self):
        user = self.users[Role.NURSE]
        client = self._client_for(user)
        response = client.post("/api/patients/", self._new_patient_payload(), format="json")

        entry = AuditLog.objects.order_by("-id").first()
        self.assertEqual(entry.action, "patient_created")
        self.assertEqual(entry.user_id, user.id)
        self.assertEqual(entry.role_name, Role.NURSE)
        self.assertEqual(entry.patient_id, response.data["data"]["id"])


class PatientReadTest(PatientAPITestBase):
    def setUp(self):
        super().setUp()
        Patient.objects.create(
            name="Peter Otieno",
            age=8,
            gender=Patient.GENDER_MALE,
            phone_number="0733444555",
            condition="Typhoid",
            status=Patient.STATUS_RECOVERED,
            insurance_provider=Patient.PROVIDER_SHA,
            insurance_status=Patient.INSURANCE_ACTIVE,
        )

    def test_list_unauthenticated(self):
        response = APIClient().get("/api/patients/")

        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.data["success"])

    def test_list_returns_count_newest_first(self):
        client = self._client_for(self.users[Role.COMMUNITY_WORKER])
        response = client.get("/api/patients/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(response.data["data"][0]["name"], "Peter Otieno")

    def test_filter_by_status_and_provider(self):
        client = self._client_for(self.users[Role.NURSE])

        response = client.get("/api/patients/", {"status": Patient.STATUS_RECOVERED})
        self.assertEqual([p["name"] for p in response.data["data"]], ["Peter Otieno"])

        response = client.get("/api/patients/", {"insurance_provider": Patient.PROVIDER_NONE})
        self.assertEqual([p["name"] for p in response.data["data"]], ["Grace Akinyi"])

    def test_search_matches_name_national_id_and_phone(self):
        client = self._client_for(self.users[Role.NURSE])

        for term in ("akinyi", "12345678", "0712345"):
            response = client.get("/api/patients/", {"search": term})
            self.assertEqual(response.data["count"], 1, term)
            self.assertEqual(response.data["data"][0]["id"], self.patient.id)

    def test_detail_expands_payments_and_logs_view(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.get(f"/api/patients/{self.patient.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["data"]["name"], "Grace Akinyi")
        self.assertEqual(response.data["data"]["payments"], [])
        self.assertTrue(AuditLog.objects.filter(action="patient_viewed", patient_id=self.patient.id).exists())

    def test_detail_unknown_patient_is_not_found(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.get("/api/patients/999999/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {"success": False, "message": "Patient not found"})


class PatientUpdateDeleteTest(PatientAPITestBase):
    def test_put_updates_only_supplied_fields(self):
        client = self._client_for(self.users[Role.COMMUNITY_WORKER])
        response = client.put(
            f"/api/patients/{self.patient.id}/",
            {"status": Patient.STATUS_REFERRED},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.patient.refresh_from_db()
        self.assertEqual(self.patient.status, Patient.STATUS_REFERRED)
        self.assertEqual(self.patient.condition, "Malaria")

    def test_delete_forbidden_for_nurse_and_community_worker(self):
        for role in (Role.NURSE, Role.COMMUNITY_WORKER):
            client = self._client_for(self.users[role])
            response = client.delete(f"/api/patients/{self.patient.id}/")

            self.assertEqual(response.status_code, 403, role)
            self.assertFalse(response.data["success"])
        self.assertTrue(Patient.objects.filter(pk=self.patient.id).exists())

    def test_delete_as_doctor(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.delete(f"/api/patients/{self.patient.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Patient deleted successfully")
        self.assertFalse(Patient.objects.filter(pk=self.patient.id).exists())

    def test_delete_as_admin(self):
        client = self._client_for(self.users[Role.ADMIN])
        response = client.delete(f"/api/patients/{self.patient.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Patient.objects.filter(pk=self.patient.id).exists())


class VisitCreateTest(PatientAPITestBase):
    def _visit_payload(self):
        return {
            "purpose": "Follow-up",
            "diagnosis": "Malaria, improving",
            "treatment": "Continue ACT course",
            "cost": "350.00",
        }

    def test_nurse_can_add_visit(self):
        nurse = self.users[Role.NURSE]
        client = self._client_for(nurse)
        response = client.post(f"/api/patients/{self.patient.id}/visits/", self._visit_payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Visit record added successfully")
        visits = response.data["data"]["visits"]
        self.assertEqual(len(visits), 1)
        self.assertEqual(visits[0]["purpose"], "Follow-up")
        self.assertEqual(visits[0]["attended_by"]["id"], nurse.id)
        self.assertTrue(AuditLog.objects.filter(action="visit_added", patient_id=self.patient.id).exists())

    def test_visits_are_appended_in_order(self):
        client = self._client_for(self.users[Role.DOCTOR])
        client.post(f"/api/patients/{self.patient.id}/visits/", self._visit_payload(), format="json")
        payload = self._visit_payload()
        payload["purpose"] = "Discharge"
        response = client.post(f"/api/patients/{self.patient.id}/visits/", payload, format="json")

        purposes = [v["purpose"] for v in response.data["data"]["visits"]]
        self.assertEqual(purposes, ["Follow-up", "Discharge"])

    def test_non_clinical_roles_cannot_add_visit(self):
        for role in (Role.COMMUNITY_WORKER, Role.ADMIN):
            client = self._client_for(self.users[role])
            response = client.post(
                f"/api/patients/{self.patient.id}/visits/",
                self._visit_payload(),
                format="json",
            )

            self.assertEqual(response.status_code, 403, role)
        self.assertEqual(Visit.objects.filter(patient=self.patient).count(), 0)

    def test_visit_for_unknown_patient(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.post("/api/patients/999999/visits/", self._visit_payload(), format="json")

        self.assertEqual(response.status_code, 404)

    def test_visit_requires_purpose_and_diagnosis(self):
        client = self._client_for(self.users[Role.DOCTOR])
        response = client.post(f"/api/patients/{self.patient.id}/visits/", {}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("purpose", response.data["errors"])
        self.assertIn("diagnosis", response.data["errors"])
