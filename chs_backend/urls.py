"""Community Health Service URL configuration.

API routes:
    /api/auth/       - Authentication (core)
    /api/health/     - Health check (core)
    /api/patients/   - Patient registry and visits (patients)
    /api/payments/   - Cash and M-Pesa payments (payments)
    /api/insurance/  - Insurance verification and claims (insurance)
"""

from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path


def root(request):
    """Plain-text liveness response for load balancers."""
    return HttpResponse("Community Health Service API is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", admin.site.urls),

    path("api/", include("chs_backend.core.urls")),
    path("api/", include("chs_backend.patients.urls")),
    path("api/payments/", include("chs_backend.payments.urls")),
    path("api/insurance/", include("chs_backend.insurance.urls")),
]
