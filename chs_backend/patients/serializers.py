from rest_framework import serializers

from chs_backend.core.serializers import UserSummarySerializer
from chs_backend.patients.models import Patient, Visit
from chs_backend.payments.serializers import PaymentSummarySerializer


class MedicalHistoryEntrySerializer(serializers.Serializer):
    condition = serializers.CharField(max_length=255)
    diagnosed_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        # Stored in a JSON column, so dates are kept as ISO strings
        if attrs.get('diagnosed_date') is not None:
            attrs['diagnosed_date'] = attrs['diagnosed_date'].isoformat()
        return attrs


class MedicationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=128)
    dosage = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    frequency = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')


class VisitSerializer(serializers.ModelSerializer):
    """Read-only visit with the attending worker summary."""

    attended_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Visit
        fields = ['id', 'date', 'purpose', 'diagnosis', 'treatment', 'cost', 'attended_by']
        read_only_fields = fields


class VisitCreateSerializer(serializers.Serializer):
    purpose = serializers.CharField(max_length=255)
    diagnosis = serializers.CharField()
    treatment = serializers.CharField(required=False, allow_blank=True, default='')
    cost = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        allow_null=True,
        min_value=0,
    )


class PatientReadSerializer(serializers.ModelSerializer):
    """Patient with visit history and payment references (ids)."""

    assigned_worker = UserSummarySerializer(read_only=True)
    visits = VisitSerializer(many=True, read_only=True)
    payments = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Patient
        fields = [
            'id',
            'name',
            'age',
            'gender',
            'phone_number',
            'national_id',
            'address',
            'condition',
            'symptoms',
            'diagnosis',
            'medical_history',
            'current_medication',
            'insurance_provider',
            'insurance_number',
            'insurance_status',
            'assigned_worker',
            'status',
            'visits',
            'payments',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PatientDetailSerializer(PatientReadSerializer):
    """Single patient view: payments are expanded."""

    payments = PaymentSummarySerializer(many=True, read_only=True)


class PatientWriteSerializer(serializers.ModelSerializer):
    """Write serializer for create/update operations.

    Visits and payments are not writable here; they have their own endpoints.
    """

    symptoms = serializers.ListField(child=serializers.CharField(max_length=255), required=False)
    medical_history = serializers.ListField(child=MedicalHistoryEntrySerializer(), required=False)
    current_medication = serializers.ListField(child=MedicationSerializer(), required=False)

    class Meta:
        model = Patient
        fields = [
            'name',
            'age',
            'gender',
            'phone_number',
            'national_id',
            'address',
            'condition',
            'symptoms',
            'diagnosis',
            'medical_history',
            'current_medication',
            'insurance_provider',
            'insurance_number',
            'insurance_status',
            'status',
        ]

    def validate_national_id(self, value):
        """Blank national IDs are stored as NULL so uniqueness only applies when present."""
        if value is None:
            return None
        value = value.strip()
        return value or None
