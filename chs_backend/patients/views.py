from django.db import transaction
from django.db.models import Prefetch, Q

from rest_framework import generics, status

from chs_backend.core.permissions import RBACPermission
from chs_backend.core.utils import envelope, log_patient_action
from chs_backend.patients.models import Patient, Visit
from chs_backend.patients.serializers import (
    PatientDetailSerializer,
    PatientReadSerializer,
    PatientWriteSerializer,
    VisitCreateSerializer,
)
from chs_backend.patients.services import add_visit, get_patient


def _patient_queryset():
    return (
        Patient.objects.all()
        .select_related('assigned_worker__role')
        .prefetch_related(
            Prefetch('visits', queryset=Visit.objects.select_related('attended_by__role')),
            'payments',
        )
    )


class PatientListCreateView(generics.ListCreateAPIView):
    """List patients (filterable) or register a new patient.

    Query parameters: ``status``, ``insurance_provider`` and ``search``
    (case-insensitive match on name, national ID or phone number).
    """

    permission_classes = [RBACPermission]
    operations = {'GET': 'patient.read', 'POST': 'patient.create'}

    def get_queryset(self):
        qs = _patient_queryset()
        params = self.request.query_params

        status_filter = params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)

        provider = params.get('insurance_provider')
        if provider:
            qs = qs.filter(insurance_provider=provider)

        search = (params.get('search') or '').strip()
        if search:
            qs = qs.filter(
                Q(name__icontains=search)
                | Q(national_id__icontains=search)
                | Q(phone_number__icontains=search)
            )
        return qs

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return PatientWriteSerializer
        return PatientReadSerializer

    def list(self, request, *args, **kwargs):
        data = self.get_serializer(self.get_queryset(), many=True).data
        return envelope(data, count=len(data))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        patient = serializer.save(assigned_worker=request.user)
        log_patient_action(request.user, 'patient_created', patient_id=patient.pk)
        return envelope(
            PatientReadSerializer(patient).data,
            message='Patient registered successfully',
            status=status.HTTP_201_CREATED,
        )


class PatientDetailView(generics.RetrieveUpdateDestroyAPIView):
    """Retrieve, update or delete a patient.

    PUT behaves like PATCH: only the supplied fields change. Delete is
    limited to doctors and admins by the authorization gate.
    """

    permission_classes = [RBACPermission]
    operations = {
        'GET': 'patient.read',
        'PUT': 'patient.update',
        'PATCH': 'patient.update',
        'DELETE': 'patient.delete',
    }

    def get_queryset(self):
        return _patient_queryset()

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return PatientWriteSerializer
        return PatientDetailSerializer

    def get_object(self):
        patient = get_patient(self.kwargs['pk'])
        self.check_object_permissions(self.request, patient)
        return patient

    def retrieve(self, request, *args, **kwargs):
        patient = self.get_object()
        log_patient_action(request.user, 'patient_viewed', patient_id=patient.pk)
        return envelope(PatientDetailSerializer(patient).data)

    def update(self, request, *args, **kwargs):
        patient = self.get_object()
        serializer = PatientWriteSerializer(patient, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        log_patient_action(
            request.user,
            'patient_updated',
            patient_id=patient.pk,
            meta={'fields': sorted(serializer.validated_data.keys())},
        )
        refreshed = self.get_queryset().get(pk=patient.pk)
        return envelope(PatientReadSerializer(refreshed).data, message='Patient updated successfully')

    def destroy(self, request, *args, **kwargs):
        patient = self.get_object()
        patient_id = patient.pk
        patient.delete()
        log_patient_action(request.user, 'patient_deleted', patient_id=patient_id)
        return envelope(message='Patient deleted successfully')


class PatientVisitCreateView(generics.GenericAPIView):
    """Append a visit record. Restricted to doctors and nurses."""

    permission_classes = [RBACPermission]
    operations = {'POST': 'visit.create'}
    serializer_class = VisitCreateSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            patient = get_patient(kwargs['pk'], for_update=True)
            visit = add_visit(patient, attended_by=request.user, **serializer.validated_data)

        log_patient_action(
            request.user,
            'visit_added',
            patient_id=patient.pk,
            meta={'visit_id': visit.pk},
        )
        patient = _patient_queryset().get(pk=patient.pk)
        return envelope(
            PatientReadSerializer(patient).data,
            message='Visit record added successfully',
            status=status.HTTP_201_CREATED,
        )
