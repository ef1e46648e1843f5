"""Core app views.

Contains:
- health: Health check endpoint
- RegisterView: health-worker self registration
- LoginView: JWT token obtain with user/role info
- RefreshView: JWT token refresh
- MeView: Current authenticated user info
"""

from django.db import connection
from django.http import JsonResponse
from django.utils import timezone

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from rest_framework_simplejwt.tokens import RefreshToken

from chs_backend.core.serializers import (
    LoginSerializer,
    RefreshSerializer,
    RegisterSerializer,
    UserMeSerializer,
)
from chs_backend.core.utils import envelope


def health(request):
    """Health check endpoint - no authentication required."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1;')
    except Exception as exc:
        return JsonResponse({'success': False, 'status': 'error', 'message': str(exc)}, status=503)

    return JsonResponse({
        'success': True,
        'status': 'ok',
        'message': 'Community Health Service API is running',
        'timestamp': timezone.now().isoformat(),
    })


def _issue_tokens(user):
    """Return (access, refresh) for ``user`` with the role claim attached."""
    refresh = RefreshToken.for_user(user)
    role = getattr(user, 'role', None)
    refresh['role'] = role.name if role else None
    return str(refresh.access_token), str(refresh)


def _auth_payload(user):
    access, refresh = _issue_tokens(user)
    return {
        'user': UserMeSerializer(user).data,
        'access': access,
        'refresh': refresh,
    }


class RegisterView(APIView):
    """Register a new healthcare worker.

    POST /api/auth/register/
    Returns: {"success": true, "data": {"user": {...}, "access": "...", "refresh": "..."}}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return envelope(
            _auth_payload(user),
            message='Registration successful',
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """Obtain JWT access and refresh tokens.

    POST /api/auth/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"success": true, "data": {"user": {...}, "access": "...", "refresh": "..."}}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        return envelope(_auth_payload(user), message='Login successful')


class RefreshView(APIView):
    """Refresh JWT access token.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        refresh = RefreshToken(serializer.validated_data['refresh'])
        return envelope({'access': str(refresh.access_token)})


class MeView(APIView):
    """Get current authenticated user info.

    GET /api/auth/me/
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return envelope(UserMeSerializer(request.user).data)
