import random

from django.contrib.auth import get_user_model
from django.db import transaction

from chs_backend.core.models import Role
from chs_backend.patients.models import Patient
from chs_backend.patients.services import add_visit

User = get_user_model()

RANDOM_SEED = 42

# Seeded patients are recognisable by this national ID prefix
SEED_ID_PREFIX = "SEED-"

FIRST_NAMES = ["Amina", "Baraka", "Chebet", "Daudi", "Esther", "Faith", "Juma", "Kamau", "Njeri", "Wafula"]
LAST_NAMES = ["Mwangi", "Odhiambo", "Kiprop", "Mutua", "Wambui", "Ouma", "Kariuki", "Nyambura"]
CONDITIONS = [
    ("Malaria", ["fever", "chills", "headache"]),
    ("Hypertension", ["headache", "dizziness"]),
    ("Upper respiratory infection", ["cough", "sore throat"]),
    ("Type 2 diabetes", ["fatigue", "thirst"]),
    ("Typhoid", ["fever", "abdominal pain"]),
]


def seed_patients(flush: bool = False, count: int = 20) -> dict:
    """Create demo patients with a few visits each."""
    random.seed(RANDOM_SEED)
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            Patient.objects.filter(national_id__startswith=SEED_ID_PREFIX).delete()

        workers = list(User.objects.filter(role__name__in=[Role.DOCTOR, Role.NURSE, Role.COMMUNITY_WORKER]))
        clinicians = [w for w in workers if w.role_name in (Role.DOCTOR, Role.NURSE)]

        created = 0
        visits = 0
        for i in range(count):
            national_id = f"{SEED_ID_PREFIX}{10000 + i}"
            if Patient.objects.filter(national_id=national_id).exists():
                continue
            condition, symptoms = random.choice(CONDITIONS)
            provider = random.choice([Patient.PROVIDER_NONE, Patient.PROVIDER_NSSF, Patient.PROVIDER_SHA])
            patient = Patient.objects.create(
                name=f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
                age=random.randint(1, 90),
                gender=random.choice([Patient.GENDER_MALE, Patient.GENDER_FEMALE]),
                phone_number=f"2547{random.randint(10000000, 99999999)}",
                national_id=national_id,
                condition=condition,
                symptoms=symptoms,
                insurance_provider=provider,
                insurance_number=f"MEM{random.randint(100000, 999999)}" if provider != Patient.PROVIDER_NONE else "",
                insurance_status=(
                    Patient.INSURANCE_ACTIVE if provider != Patient.PROVIDER_NONE else Patient.INSURANCE_INACTIVE
                ),
                assigned_worker=random.choice(workers) if workers else None,
            )
            created += 1
            for _ in range(random.randint(0, 3)):
                add_visit(
                    patient,
                    purpose="Follow-up",
                    diagnosis=condition,
                    treatment="Medication review",
                    cost=random.choice([None, 300, 500, 1000]),
                    attended_by=random.choice(clinicians) if clinicians else None,
                )
                visits += 1

        stats["patients"] = created
        stats["patient_visits"] = visits

    return stats
