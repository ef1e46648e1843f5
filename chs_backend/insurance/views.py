from rest_framework import generics, status

from chs_backend.core.permissions import RBACPermission
from chs_backend.core.utils import envelope
from chs_backend.insurance.serializers import (
    ClaimStatusSerializer,
    ClaimSubmissionResultSerializer,
    ClaimSubmitSerializer,
    PatientInsuranceSerializer,
    VerifyNSSFSerializer,
    VerifySHASerializer,
)
from chs_backend.insurance.services import (
    get_claim_status,
    get_patient_insurance,
    submit_claim,
    verify_membership,
)
from chs_backend.patients.models import Patient


class ClaimSubmitView(generics.GenericAPIView):
    """Submit an insurance claim for a patient with active cover."""

    permission_classes = [RBACPermission]
    operations = {'POST': 'claim.create'}
    serializer_class = ClaimSubmitSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment, claim = submit_claim(recorded_by=request.user, **serializer.validated_data)
        return envelope(
            ClaimSubmissionResultSerializer({'claim': claim, 'payment': payment}).data,
            message='Insurance claim submitted successfully',
            status=status.HTTP_201_CREATED,
        )


class ClaimStatusView(generics.GenericAPIView):
    permission_classes = [RBACPermission]
    operations = {'GET': 'claim.read'}

    def get(self, request, claim_number, *args, **kwargs):
        return envelope(ClaimStatusSerializer(get_claim_status(claim_number)).data)


class PatientInsuranceView(generics.GenericAPIView):
    permission_classes = [RBACPermission]
    operations = {'GET': 'patient.read'}

    def get(self, request, patient_id, *args, **kwargs):
        return envelope(PatientInsuranceSerializer(get_patient_insurance(patient_id)).data)


class _VerifyMembershipView(generics.GenericAPIView):
    permission_classes = [RBACPermission]
    operations = {'POST': 'insurance.verify'}
    provider = None
    member_field = None
    success_message = None

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = verify_membership(
            self.provider,
            patient_id=serializer.validated_data['patient_id'],
            member_number=serializer.validated_data[self.member_field],
            user=request.user,
        )
        return envelope(result, message=self.success_message)


class VerifyNSSFView(_VerifyMembershipView):
    """Mocked NSSF membership check; activates the patient's NSSF cover."""

    serializer_class = VerifyNSSFSerializer
    provider = Patient.PROVIDER_NSSF
    member_field = 'member_id'
    success_message = 'NSSF membership verified successfully'


class VerifySHAView(_VerifyMembershipView):
    """Mocked SHA coverage check; activates the patient's SHA cover."""

    serializer_class = VerifySHASerializer
    provider = Patient.PROVIDER_SHA
    member_field = 'sha_number'
    success_message = 'SHA coverage verified successfully'
