from rest_framework import serializers

from payments.models import Payment
from payments.serializers import PaymentSummarySerializer
from practices.models import Practice, PracticePurchase


class PracticeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Practice
        fields = ["id", "title", "price", "is_active"]
        read_only_fields = fields


class PracticePurchaseSerializer(serializers.ModelSerializer):
    practice = PracticeSerializer(read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta:
        model = PracticePurchase
        fields = ["id", "practice", "referral_usage", "status", "payment", "purchase_date", "updated_at"]
        read_only_fields = fields

    def get_payment(self, obj):
        try:
            return PaymentSummarySerializer(obj.payment).data
        except Payment.DoesNotExist:
            return None


class PracticePurchaseCreateSerializer(serializers.Serializer):
    practice_id = serializers.IntegerField()
    referral_usage_id = serializers.IntegerField(required=False, allow_null=True)
