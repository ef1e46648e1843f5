"""Insurance App URLs.

Prefix: /api/insurance/
Routes:
    POST  /api/insurance/verify-nssf/                  - Mocked NSSF membership check
    POST  /api/insurance/verify-sha/                   - Mocked SHA coverage check
    POST  /api/insurance/claim/                        - Submit a claim (active cover required)
    GET   /api/insurance/claim-status/<claim_number>/  - Claim status with remarks
    GET   /api/insurance/patient/<patient_id>/         - Patient insurance summary
"""

from django.urls import path

from chs_backend.insurance.views import (
    ClaimStatusView,
    ClaimSubmitView,
    PatientInsuranceView,
    VerifyNSSFView,
    VerifySHAView,
)

app_name = 'insurance'

urlpatterns = [
    path('verify-nssf/', VerifyNSSFView.as_view(), name='verify-nssf'),
    path('verify-sha/', VerifySHAView.as_view(), name='verify-sha'),
    path('claim/', ClaimSubmitView.as_view(), name='claim'),
    path('claim-status/<str:claim_number>/', ClaimStatusView.as_view(), name='claim-status'),
    path('patient/<int:patient_id>/', PatientInsuranceView.as_view(), name='patient'),
]
