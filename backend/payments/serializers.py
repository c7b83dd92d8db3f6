from rest_framework import serializers

from payments.models import Payment


class PaymentSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "amount", "status", "payment_method", "transaction_id", "payment_date"]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    kind = serializers.CharField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "kind",
            "booking",
            "practice_purchase",
            "amount",
            "status",
            "payment_method",
            "transaction_id",
            "payment_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GatewayPaymentRequestSerializer(serializers.Serializer):
    reference_id = serializers.CharField(max_length=40)
    payment_method = serializers.CharField(max_length=40, required=False, allow_blank=True)


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class GatewayCallbackSerializer(serializers.Serializer):
    """Duitku posts form fields in camelCase; the names are kept as sent."""

    merchantCode = serializers.CharField()
    amount = serializers.CharField()
    merchantOrderId = serializers.CharField()
    resultCode = serializers.CharField(required=False, allow_blank=True, default="")
    reference = serializers.CharField(required=False, allow_blank=True, default="")
    signature = serializers.CharField()
