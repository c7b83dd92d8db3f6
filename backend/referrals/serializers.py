from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from referrals.models import CommissionPayment, ReferralCode, ReferralCommission, ReferralUsage


class ReferralCodeSerializer(serializers.ModelSerializer):
    owner = UserSummarySerializer(read_only=True)

    class Meta:
        model = ReferralCode
        fields = [
            "id",
            "owner",
            "code",
            "discount_percentage",
            "commission_percentage",
            "expiry_date",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReferralCodeCreateSerializer(serializers.Serializer):
    owner_id = serializers.IntegerField()
    code = serializers.CharField(max_length=20)
    discount_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)
    commission_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)


class ReferralCodeUpdateSerializer(serializers.Serializer):
    discount_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False)
    commission_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)


class ApplyReferralCodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=20)
    context = serializers.ChoiceField(choices=ReferralUsage.CONTEXTS)


class ReferralUsageSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = ReferralUsage
        fields = ["id", "user", "referral_code", "context", "used_at"]
        read_only_fields = fields


class ReferralCommissionSerializer(serializers.ModelSerializer):
    code = serializers.CharField(source="referral_code.code", read_only=True)
    transaction_id = serializers.CharField(source="payment_id", read_only=True)

    class Meta:
        model = ReferralCommission
        fields = ["id", "referral_code", "code", "transaction_id", "amount", "created_at"]
        read_only_fields = fields


class CommissionPaymentSerializer(serializers.ModelSerializer):
    code = serializers.CharField(source="referral_code.code", read_only=True)

    class Meta:
        model = CommissionPayment
        fields = [
            "id",
            "referral_code",
            "code",
            "amount",
            "status",
            "transaction_id",
            "paid_at",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CommissionPaymentRequestSerializer(serializers.Serializer):
    referral_code_id = serializers.CharField(max_length=32)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class CommissionPaymentStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    transaction_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=120)
