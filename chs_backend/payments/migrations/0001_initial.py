from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("patients", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("payment_method", models.CharField(choices=[("mpesa", "M-Pesa"), ("cash", "Cash"), ("insurance", "Insurance"), ("card", "Card")], db_index=True, max_length=16)),
                ("transaction_id", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("completed", "Completed"), ("failed", "Failed"), ("refunded", "Refunded")], db_index=True, default="pending", max_length=16)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("phone_number", models.CharField(blank=True, default="", max_length=20)),
                ("mpesa_receipt_number", models.CharField(blank=True, default="", max_length=32)),
                ("merchant_request_id", models.CharField(blank=True, default="", max_length=64)),
                ("result_description", models.CharField(blank=True, default="", max_length=255)),
                ("claim_provider", models.CharField(blank=True, default="", max_length=16)),
                ("claim_number", models.CharField(blank=True, max_length=40, null=True, unique=True)),
                ("claim_approved_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("claim_status", models.CharField(blank=True, choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")], default="", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("patient", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payments", to="patients.patient")),
                ("recorded_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="recorded_payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "db_table": "payments_payment",
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="payments_amount_positive"),
                ],
            },
        ),
    ]
