from rest_framework import serializers

from accounts.serializers import UserSummarySerializer
from bookings.models import Booking, BookingParticipant
from mentoring.serializers import MentoringServiceSummarySerializer
from payments.models import Payment
from payments.serializers import PaymentSummarySerializer


class BookingParticipantSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = BookingParticipant
        fields = ["id", "user", "is_leader", "payment_status"]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    mentee = UserSummarySerializer(read_only=True)
    mentoring_service = MentoringServiceSummarySerializer(read_only=True)
    participants = BookingParticipantSerializer(source="booking_participants", many=True, read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "mentee",
            "mentoring_service",
            "referral_usage",
            "special_requests",
            "booking_date",
            "status",
            "participants",
            "payment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_payment(self, obj: Booking):
        try:
            payment = obj.payment
        except Payment.DoesNotExist:
            return None
        return PaymentSummarySerializer(payment).data


class BookingCreateSerializer(serializers.Serializer):
    mentoring_service_id = serializers.IntegerField()
    referral_usage_id = serializers.IntegerField(required=False, allow_null=True)
    special_requests = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    # Parsed by the booking service so date errors carry their own codes.
    booking_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    participant_ids = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)


class BookingUpdateSerializer(serializers.Serializer):
    special_requests = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    participant_ids = serializers.ListField(child=serializers.IntegerField(), required=False)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
