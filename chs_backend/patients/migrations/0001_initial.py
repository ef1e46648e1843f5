import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("age", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(150)])),
                ("gender", models.CharField(choices=[("male", "Male"), ("female", "Female"), ("other", "Other")], max_length=10)),
                ("phone_number", models.CharField(max_length=20)),
                ("national_id", models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("condition", models.CharField(max_length=255)),
                ("symptoms", models.JSONField(blank=True, default=list)),
                ("diagnosis", models.TextField(blank=True, default="")),
                ("medical_history", models.JSONField(blank=True, default=list)),
                ("current_medication", models.JSONField(blank=True, default=list)),
                ("insurance_provider", models.CharField(choices=[("NSSF", "NSSF"), ("SHA", "SHA (Social Health Authority)"), ("Private", "Private"), ("None", "None")], db_index=True, default="None", max_length=16)),
                ("insurance_number", models.CharField(blank=True, default="", max_length=64)),
                ("insurance_status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("pending", "Pending")], default="inactive", max_length=16)),
                ("status", models.CharField(choices=[("active", "Active"), ("recovered", "Recovered"), ("referred", "Referred"), ("deceased", "Deceased")], db_index=True, default="active", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assigned_worker", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_patients", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Patient",
                "verbose_name_plural": "Patients",
                "db_table": "patients_patient",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Visit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateTimeField(default=django.utils.timezone.now)),
                ("purpose", models.CharField(max_length=255)),
                ("diagnosis", models.TextField()),
                ("treatment", models.TextField(blank=True, default="")),
                ("cost", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("attended_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="attended_visits", to=settings.AUTH_USER_MODEL)),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="visits", to="patients.patient")),
            ],
            options={
                "verbose_name": "Visit",
                "verbose_name_plural": "Visits",
                "db_table": "patients_visit",
                "ordering": ["date", "id"],
            },
        ),
    ]
