from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user payload nested in bookings, codes and payouts."""

    class Meta:
        model = User
        fields = ["id", "full_name", "email"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Expose the public fields for the custom user model."""

    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "full_name",
            "phone_number",
            "roles",
        ]
        read_only_fields = fields

    def get_roles(self, obj):
        return sorted(obj.user_roles.values_list("role__name", flat=True))
