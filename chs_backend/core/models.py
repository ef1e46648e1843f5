from django.contrib.auth.models import AbstractUser
from django.db import models
from django.conf import settings


class Role(models.Model):
    """User roles for RBAC (Role-Based Access Control).

    Standard roles: admin, doctor, nurse, community_worker
    """

    ADMIN = 'admin'
    DOCTOR = 'doctor'
    NURSE = 'nurse'
    COMMUNITY_WORKER = 'community_worker'

    name = models.CharField(max_length=64, unique=True, db_index=True)
    label = models.CharField(max_length=128)

    class Meta:
        db_table = 'core_role'
        ordering = ['name']
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'

    def __str__(self) -> str:
        return self.label


class User(AbstractUser):
    """Healthcare worker account.

    Extends Django's AbstractUser with:
    - role: ForeignKey to Role for RBAC
    - phone_number, license_number, specialization: professional details
    - email: made unique (used for login lookups)
    """

    email = models.EmailField('email address', blank=True, unique=True)
    phone_number = models.CharField(max_length=20, blank=True, default='')
    license_number = models.CharField(max_length=64, blank=True, default='')
    specialization = models.CharField(max_length=128, blank=True, default='')
    role = models.ForeignKey(
        Role,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='users',
    )

    class Meta:
        db_table = 'core_user'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    @property
    def role_name(self):
        role = getattr(self, 'role', None)
        return getattr(role, 'name', None)

    def display_name(self) -> str:
        return self.get_full_name() or self.username


class AuditLog(models.Model):
    """Audit log for patient and payment actions.

    Tracks who accessed/modified patient data and when. patient_id is kept as
    a plain integer so audit rows survive a privileged patient delete.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    role_name = models.CharField(max_length=50, db_index=True)
    action = models.CharField(max_length=50, db_index=True)
    patient_id = models.IntegerField(null=True, blank=True, db_index=True)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    meta = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = 'core_auditlog'
        ordering = ['-timestamp', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['action', 'timestamp'], name='core_audit_action_ts_idx'),
            models.Index(fields=['patient_id', 'timestamp'], name='core_audit_patient_ts_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.timestamp} {self.action} (patient_id={self.patient_id})"
