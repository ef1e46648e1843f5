"""Payments App URLs.

Prefix: /api/payments/
Routes:
    GET   /api/payments/                  - List payments (status, patient_id, payment_method)
    GET   /api/payments/<pk>/             - Payment detail
    POST  /api/payments/cash/             - Record a completed cash payment
    POST  /api/payments/mpesa/stk-push/   - Initiate an M-Pesa STK push
    POST  /api/payments/mpesa/callback/   - Gateway webhook (no auth)
"""

from django.urls import path

from chs_backend.payments.views import (
    CashPaymentView,
    MpesaCallbackView,
    MpesaSTKPushView,
    PaymentDetailView,
    PaymentListView,
)

app_name = 'payments'

urlpatterns = [
    path('', PaymentListView.as_view(), name='list'),
    path('<int:pk>/', PaymentDetailView.as_view(), name='detail'),
    path('cash/', CashPaymentView.as_view(), name='cash'),
    path('mpesa/stk-push/', MpesaSTKPushView.as_view(), name='mpesa-stk-push'),
    path('mpesa/callback/', MpesaCallbackView.as_view(), name='mpesa-callback'),
]
