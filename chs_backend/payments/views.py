import logging

from rest_framework import generics, status
from rest_framework.exceptions import ParseError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from chs_backend.core.exceptions import NotFound
from chs_backend.core.permissions import RBACPermission
from chs_backend.core.utils import envelope
from chs_backend.payments.models import Payment
from chs_backend.payments.serializers import (
    CashPaymentSerializer,
    MpesaSTKPushSerializer,
    PaymentSerializer,
)
from chs_backend.payments.services import handle_mpesa_callback, initiate_payment

logger = logging.getLogger(__name__)


class PaymentListView(generics.ListAPIView):
    """List payments, newest first.

    Query parameters: ``status``, ``patient_id``, ``payment_method``.
    """

    permission_classes = [RBACPermission]
    operations = {'GET': 'payment.read'}
    serializer_class = PaymentSerializer

    def get_queryset(self):
        qs = Payment.objects.select_related('patient')
        params = self.request.query_params

        status_filter = params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)

        patient_id = params.get('patient_id')
        if patient_id:
            if not patient_id.isdigit():
                return qs.none()
            qs = qs.filter(patient_id=int(patient_id))

        method = params.get('payment_method')
        if method:
            qs = qs.filter(payment_method=method)
        return qs

    def list(self, request, *args, **kwargs):
        data = self.get_serializer(self.get_queryset(), many=True).data
        return envelope(data, count=len(data))


class PaymentDetailView(generics.RetrieveAPIView):
    permission_classes = [RBACPermission]
    operations = {'GET': 'payment.read'}
    serializer_class = PaymentSerializer

    def get_object(self):
        try:
            return Payment.objects.select_related('patient').get(pk=self.kwargs['pk'])
        except Payment.DoesNotExist:
            raise NotFound('Payment not found')

    def retrieve(self, request, *args, **kwargs):
        return envelope(self.get_serializer(self.get_object()).data)


class CashPaymentView(generics.GenericAPIView):
    """Record a cash payment; it is completed immediately."""

    permission_classes = [RBACPermission]
    operations = {'POST': 'payment.create'}
    serializer_class = CashPaymentSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = initiate_payment(
            Payment.METHOD_CASH,
            recorded_by=request.user,
            **serializer.validated_data,
        )
        return envelope(
            PaymentSerializer(payment).data,
            message='Cash payment recorded successfully',
            status=status.HTTP_201_CREATED,
        )


class MpesaSTKPushView(generics.GenericAPIView):
    """Start an M-Pesa charge. The payment stays pending until the callback arrives."""

    permission_classes = [RBACPermission]
    operations = {'POST': 'payment.create'}
    serializer_class = MpesaSTKPushSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = initiate_payment(
            Payment.METHOD_MPESA,
            recorded_by=request.user,
            **serializer.validated_data,
        )
        return envelope(
            {
                'payment': PaymentSerializer(payment).data,
                'checkout_request_id': payment.transaction_id,
                'merchant_request_id': payment.merchant_request_id,
            },
            message='STK push sent. Please check your phone.',
        )


class MpesaCallbackView(APIView):
    """Webhook called by the gateway. Unauthenticated; always acknowledged."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        try:
            payload = request.data
        except ParseError:
            payload = None
        logger.info("M-Pesa callback received")
        handle_mpesa_callback(payload)
        return Response({'success': True, 'ResultCode': 0, 'ResultDesc': 'Accepted'})
