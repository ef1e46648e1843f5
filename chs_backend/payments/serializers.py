from decimal import Decimal

from rest_framework import serializers

from chs_backend.patients.models import Patient
from chs_backend.payments.models import Payment


class PatientSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Patient
        fields = ['id', 'name', 'phone_number']
        read_only_fields = fields


class InsuranceClaimSerializer(serializers.Serializer):
    provider = serializers.CharField(read_only=True)
    claim_number = serializers.CharField(read_only=True)
    approved_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    status = serializers.CharField(read_only=True)


class PaymentSerializer(serializers.ModelSerializer):
    """Full payment representation used by the payments endpoints."""

    patient = PatientSummarySerializer(read_only=True)
    insurance_claim = InsuranceClaimSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'patient',
            'amount',
            'payment_method',
            'transaction_id',
            'status',
            'description',
            'phone_number',
            'mpesa_receipt_number',
            'result_description',
            'insurance_claim',
            'recorded_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PaymentSummarySerializer(serializers.ModelSerializer):
    """Compact payment used inside the patient detail view."""

    class Meta:
        model = Payment
        fields = ['id', 'amount', 'payment_method', 'transaction_id', 'status', 'created_at']
        read_only_fields = fields


class CashPaymentSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class MpesaSTKPushSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    # M-Pesa only charges whole shillings
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('1'))
    phone_number = serializers.RegexField(
        r'^\+?\d{9,15}$',
        max_length=20,
        error_messages={'invalid': 'Enter a valid phone number, e.g. 0712345678 or 254712345678.'},
    )
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
