"""Serializers for the core app.

Contains serializers for User and Role, and the authentication payloads.
Follows the Read/Write serializer pattern used across the project.
"""

from rest_framework import serializers

from chs_backend.core.models import Role, User


ROLE_LABELS = {
    Role.ADMIN: 'Administrator',
    Role.DOCTOR: 'Doctor',
    Role.NURSE: 'Nurse',
    Role.COMMUNITY_WORKER: 'Community Health Worker',
}

# Roles a health worker may pick when self-registering.
SELF_REGISTER_ROLES = (Role.DOCTOR, Role.NURSE, Role.COMMUNITY_WORKER)


# -----------------------------------------------------------------------------
# Role / User Serializers
# -----------------------------------------------------------------------------


class RoleSerializer(serializers.ModelSerializer):
    """Read-only serializer for Role model."""

    class Meta:
        model = Role
        fields = ['id', 'name', 'label']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact worker reference embedded in patients and visits."""

    name = serializers.CharField(source='display_name', read_only=True)
    role = serializers.CharField(source='role_name', read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'role']
        read_only_fields = fields


class UserMeSerializer(serializers.ModelSerializer):
    """Serializer for the /auth/me/ endpoint.

    Returns current user info with role details.
    """

    role = RoleSerializer(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'phone_number',
            'license_number',
            'specialization',
            'is_active',
            'role',
        ]
        read_only_fields = fields


# -----------------------------------------------------------------------------
# Authentication Serializers
# -----------------------------------------------------------------------------


class RegisterSerializer(serializers.ModelSerializer):
    """Health-worker self registration.

    Doctors and nurses must provide a license number; doctors also a
    specialization.
    """

    password = serializers.CharField(write_only=True, required=True, min_length=8)
    role = serializers.ChoiceField(choices=SELF_REGISTER_ROLES, default=Role.COMMUNITY_WORKER)
    email = serializers.EmailField(required=True)

    class Meta:
        model = User
        fields = [
            'username',
            'email',
            'password',
            'first_name',
            'last_name',
            'phone_number',
            'role',
            'license_number',
            'specialization',
        ]

    def validate_email(self, value):
        """Ensure email is unique."""
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('A user with this email already exists.')
        return value.lower()

    def validate(self, attrs):
        role = attrs.get('role')
        errors = {}
        if role in (Role.DOCTOR, Role.NURSE) and not attrs.get('license_number'):
            errors['license_number'] = ['License number is required for doctors and nurses.']
        if role == Role.DOCTOR and not attrs.get('specialization'):
            errors['specialization'] = ['Specialization is required for doctors.']
        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    def create(self, validated_data):
        """Create user with hashed password and resolve the role by name."""
        password = validated_data.pop('password')
        role_name = validated_data.pop('role')
        role, _ = Role.objects.get_or_create(
            name=role_name,
            defaults={'label': ROLE_LABELS.get(role_name, role_name)},
        )
        return User.objects.create_user(password=password, role=role, **validated_data)


class LoginSerializer(serializers.Serializer):
    """Serializer for user login.

    Validates credentials and returns user with role info.
    """

    username = serializers.CharField(required=True)
    password = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        from django.contrib.auth import authenticate

        username = attrs.get('username')
        password = attrs.get('password')

        if not username or not password:
            raise serializers.ValidationError('Username and password are required.')

        user = authenticate(username=username, password=password)

        if user is None:
            # Inactive accounts also fail here with ModelBackend
            raise serializers.ValidationError('Invalid credentials.')

        attrs['user'] = user
        return attrs


class RefreshSerializer(serializers.Serializer):
    """Serializer for token refresh.

    Validates refresh token and returns new access token.
    """

    refresh = serializers.CharField(required=True)

    def validate_refresh(self, value):
        from rest_framework_simplejwt.tokens import RefreshToken
        from rest_framework_simplejwt.exceptions import TokenError

        try:
            RefreshToken(value)
        except TokenError as e:
            raise serializers.ValidationError(f'Invalid or expired refresh token: {str(e)}')
        return value
