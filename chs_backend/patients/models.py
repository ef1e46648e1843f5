from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class Patient(models.Model):
    """A patient registered by a healthcare worker.

    Visits are stored in the append-only ``Visit`` table (``patient.visits``).
    Payment references are the reverse side of ``Payment.patient``
    (``patient.payments``).
    """

    GENDER_MALE = 'male'
    GENDER_FEMALE = 'female'
    GENDER_OTHER = 'other'
    GENDER_CHOICES = [
        (GENDER_MALE, 'Male'),
        (GENDER_FEMALE, 'Female'),
        (GENDER_OTHER, 'Other'),
    ]

    PROVIDER_NSSF = 'NSSF'
    PROVIDER_SHA = 'SHA'
    PROVIDER_PRIVATE = 'Private'
    PROVIDER_NONE = 'None'
    INSURANCE_PROVIDER_CHOICES = [
        (PROVIDER_NSSF, 'NSSF'),
        (PROVIDER_SHA, 'SHA (Social Health Authority)'),
        (PROVIDER_PRIVATE, 'Private'),
        (PROVIDER_NONE, 'None'),
    ]

    INSURANCE_ACTIVE = 'active'
    INSURANCE_INACTIVE = 'inactive'
    INSURANCE_PENDING = 'pending'
    INSURANCE_STATUS_CHOICES = [
        (INSURANCE_ACTIVE, 'Active'),
        (INSURANCE_INACTIVE, 'Inactive'),
        (INSURANCE_PENDING, 'Pending'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_RECOVERED = 'recovered'
    STATUS_REFERRED = 'referred'
    STATUS_DECEASED = 'deceased'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_RECOVERED, 'Recovered'),
        (STATUS_REFERRED, 'Referred'),
        (STATUS_DECEASED, 'Deceased'),
    ]

    name = models.CharField(max_length=200)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(0), MaxValueValidator(150)])
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    phone_number = models.CharField(max_length=20)
    national_id = models.CharField(max_length=32, unique=True, null=True, blank=True)
    address = models.CharField(max_length=255, blank=True, default='')

    # Clinical
    condition = models.CharField(max_length=255)
    symptoms = models.JSONField(default=list, blank=True)
    diagnosis = models.TextField(blank=True, default='')
    medical_history = models.JSONField(default=list, blank=True)
    current_medication = models.JSONField(default=list, blank=True)

    # Insurance
    insurance_provider = models.CharField(
        max_length=16,
        choices=INSURANCE_PROVIDER_CHOICES,
        default=PROVIDER_NONE,
        db_index=True,
    )
    insurance_number = models.CharField(max_length=64, blank=True, default='')
    insurance_status = models.CharField(
        max_length=16,
        choices=INSURANCE_STATUS_CHOICES,
        default=INSURANCE_INACTIVE,
    )

    assigned_worker = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='assigned_patients',
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients_patient'
        ordering = ['-created_at', '-id']
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'

    def __str__(self) -> str:
        return f"{self.name} (#{self.pk})"

    @property
    def has_active_insurance(self) -> bool:
        return (
            self.insurance_status == self.INSURANCE_ACTIVE
            and bool(self.insurance_provider)
            and self.insurance_provider != self.PROVIDER_NONE
        )


class Visit(models.Model):
    """A clinical visit. Append-only: rows are created, never edited."""

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='visits')
    date = models.DateTimeField(default=timezone.now)
    purpose = models.CharField(max_length=255)
    diagnosis = models.TextField()
    treatment = models.TextField(blank=True, default='')
    cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    attended_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='attended_visits',
    )

    class Meta:
        db_table = 'patients_visit'
        ordering = ['date', 'id']
        verbose_name = 'Visit'
        verbose_name_plural = 'Visits'

    def __str__(self) -> str:
        return f"{self.date:%Y-%m-%d} {self.purpose} (patient_id={self.patient_id})"
