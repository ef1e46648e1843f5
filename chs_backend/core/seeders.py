import random

from django.contrib.auth import get_user_model
from django.db import transaction

from .models import Role, AuditLog
from .serializers import ROLE_LABELS

User = get_user_model()

RANDOM_SEED = 42

SEED_EMAIL_DOMAIN = "@seed.local"


def seed_core(flush: bool = False) -> dict:
    """
    Seeds:
    - roles
    - one demo user per role

    With flush=True:
        - deletes audit logs
        - never deletes superusers
        - deletes only users whose email ends with '@seed.local'
    """
    random.seed(RANDOM_SEED)

    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            AuditLog.objects.all().delete()
            User.objects.filter(is_superuser=False, email__endswith=SEED_EMAIL_DOMAIN).delete()

        roles = _seed_roles()
        stats["core_roles"] = len(roles)

        users = _seed_users(roles)
        stats["core_users"] = len(users)

    return stats


def _seed_roles() -> list[Role]:
    roles: list[Role] = []
    for name, label in ROLE_LABELS.items():
        role, _created = Role.objects.get_or_create(name=name, defaults={"label": label})
        roles.append(role)
    return roles


def _seed_users(roles: list[Role]) -> list[User]:
    users: list[User] = []

    def get_role(name: str) -> Role | None:
        return next((r for r in roles if r.name == name), None)

    if not User.objects.filter(is_superuser=True).exists():
        su = User.objects.create_superuser(
            username="admin",
            email="admin@chs.local",
            password="admin",
            role=get_role(Role.ADMIN),
        )
        users.append(su)

    demo_accounts = [
        ("dr_wanjiku", "Grace", "Wanjiku", Role.DOCTOR, "General Practitioner"),
        ("nurse_otieno", "Brian", "Otieno", Role.NURSE, ""),
        ("chw_achieng", "Mercy", "Achieng", Role.COMMUNITY_WORKER, ""),
    ]
    for username, first, last, role_name, specialization in demo_accounts:
        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                "email": f"{username}{SEED_EMAIL_DOMAIN}",
                "first_name": first,
                "last_name": last,
                "role": get_role(role_name),
                "phone_number": f"2547{random.randint(10000000, 99999999)}",
                "license_number": f"LIC-{random.randint(1000, 9999)}" if role_name != Role.COMMUNITY_WORKER else "",
                "specialization": specialization,
            },
        )
        if created:
            user.set_password("password123")
            user.save(update_fields=["password"])
        users.append(user)
    return users
