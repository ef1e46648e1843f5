from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from chs_backend.core.exceptions import InvalidState


class Payment(models.Model):
    """A single payment attempt for a patient.

    Status lifecycle::

        pending --> completed --> refunded
           \\
            --> failed

    Cash payments are created ``completed``; M-Pesa and insurance payments
    start ``pending``. ``failed`` and ``refunded`` are terminal.

    Insurance payments carry an embedded claim (``claim_*`` columns, exposed
    as ``insurance_claim``).
    """

    METHOD_MPESA = 'mpesa'
    METHOD_CASH = 'cash'
    METHOD_INSURANCE = 'insurance'
    METHOD_CARD = 'card'
    METHOD_CHOICES = [
        (METHOD_MPESA, 'M-Pesa'),
        (METHOD_CASH, 'Cash'),
        (METHOD_INSURANCE, 'Insurance'),
        (METHOD_CARD, 'Card'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_COMPLETED = 'completed'
    STATUS_FAILED = 'failed'
    STATUS_REFUNDED = 'refunded'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_REFUNDED, 'Refunded'),
    ]

    ALLOWED_TRANSITIONS = {
        STATUS_PENDING: frozenset({STATUS_COMPLETED, STATUS_FAILED}),
        STATUS_COMPLETED: frozenset({STATUS_REFUNDED}),
    }

    CLAIM_PENDING = 'pending'
    CLAIM_APPROVED = 'approved'
    CLAIM_REJECTED = 'rejected'
    CLAIM_STATUS_CHOICES = [
        (CLAIM_PENDING, 'Pending'),
        (CLAIM_APPROVED, 'Approved'),
        (CLAIM_REJECTED, 'Rejected'),
    ]

    # Nullable so payment records outlive a privileged patient delete
    patient = models.ForeignKey(
        'patients.Patient',
        null=True,
        on_delete=models.SET_NULL,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    payment_method = models.CharField(max_length=16, choices=METHOD_CHOICES, db_index=True)
    transaction_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    description = models.CharField(max_length=255, blank=True, default='')

    # M-Pesa
    phone_number = models.CharField(max_length=20, blank=True, default='')
    mpesa_receipt_number = models.CharField(max_length=32, blank=True, default='')
    merchant_request_id = models.CharField(max_length=64, blank=True, default='')
    result_description = models.CharField(max_length=255, blank=True, default='')

    # Insurance claim
    claim_provider = models.CharField(max_length=16, blank=True, default='')
    claim_number = models.CharField(max_length=40, unique=True, null=True, blank=True)
    claim_approved_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    claim_status = models.CharField(max_length=16, choices=CLAIM_STATUS_CHOICES, blank=True, default='')

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='recorded_payments',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments_payment'
        ordering = ['-created_at', '-id']
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name='payments_amount_positive'),
        ]

    def __str__(self) -> str:
        return f"{self.get_payment_method_display()} {self.amount} [{self.status}] ({self.transaction_id})"

    @property
    def insurance_claim(self):
        if self.payment_method != self.METHOD_INSURANCE or not self.claim_number:
            return None
        return {
            'provider': self.claim_provider,
            'claim_number': self.claim_number,
            'approved_amount': self.claim_approved_amount,
            'status': self.claim_status,
        }

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, frozenset())

    def transition_to(self, new_status: str, *, save: bool = True, **changes) -> bool:
        """Move to ``new_status`` and apply ``changes``.

        Returns False without touching the row when the payment is already in
        ``new_status``. Raises InvalidState for transitions the lifecycle does
        not define.
        """
        if new_status == self.status:
            return False
        if not self.can_transition_to(new_status):
            raise InvalidState(
                f"Payment {self.pk} cannot move from '{self.status}' to '{new_status}'"
            )

        self.status = new_status
        for field_name, value in changes.items():
            setattr(self, field_name, value)
        if save:
            self.save(update_fields=['status', 'updated_at', *changes.keys()])
        return True

    def refund(self) -> bool:
        """Administrative completed -> refunded transition."""
        return self.transition_to(self.STATUS_REFUNDED)
