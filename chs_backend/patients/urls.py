"""Patients App URLs.

Prefix: /api/
Routes:
    GET/POST           /api/patients/              - List/Register patients
    GET/PUT/PATCH/DEL  /api/patients/<pk>/         - Retrieve/Update/Delete patient
    POST               /api/patients/<pk>/visits/  - Append a visit (doctor, nurse)
"""

from django.urls import path

from chs_backend.patients.views import (
    PatientDetailView,
    PatientListCreateView,
    PatientVisitCreateView,
)

app_name = 'patients'

urlpatterns = [
    path('patients/', PatientListCreateView.as_view(), name='list'),
    path('patients/<int:pk>/', PatientDetailView.as_view(), name='detail'),
    path('patients/<int:pk>/visits/', PatientVisitCreateView.as_view(), name='visits'),
]
