from decimal import Decimal

from rest_framework import serializers

from chs_backend.payments.serializers import PaymentSerializer


class ClaimSubmitSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    service_description = serializers.CharField(max_length=255)
    documents = serializers.ListField(
        child=serializers.CharField(max_length=255),
        required=False,
        default=list,
    )


class ClaimReceiptSerializer(serializers.Serializer):
    claim_number = serializers.CharField()
    status = serializers.CharField()
    submitted_date = serializers.DateTimeField()
    provider = serializers.CharField()
    requested_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    estimated_processing_time = serializers.CharField()
    documents = serializers.ListField(child=serializers.CharField())


class ClaimSubmissionResultSerializer(serializers.Serializer):
    claim = ClaimReceiptSerializer()
    payment = PaymentSerializer()


class ClaimStatusSerializer(serializers.Serializer):
    claim_number = serializers.CharField()
    status = serializers.CharField()
    provider = serializers.CharField()
    requested_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    approved_amount = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    last_updated = serializers.DateTimeField()
    remarks = serializers.CharField()


class PatientInsuranceSerializer(serializers.Serializer):
    insurance_provider = serializers.CharField()
    insurance_number = serializers.CharField(allow_blank=True)
    insurance_status = serializers.CharField()


class VerifyNSSFSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    member_id = serializers.CharField(max_length=64)


class VerifySHASerializer(serializers.Serializer):
    patient_id = serializers.IntegerField()
    sha_number = serializers.CharField(max_length=64)
