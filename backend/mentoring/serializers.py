from rest_framework import serializers

from mentoring.models import MentoringService, MentoringSession


class MentoringServiceSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = MentoringService
        fields = ["id", "service_name", "service_type", "price", "max_participants"]
        read_only_fields = fields


class MentorSessionUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=MentoringSession.STATUSES, required=False)
    meeting_link = serializers.URLField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide status or meeting_link to update.")
        return attrs


class MentoringSessionSerializer(serializers.ModelSerializer):
    service = MentoringServiceSummarySerializer(read_only=True)

    class Meta:
        model = MentoringSession
        fields = [
            "id",
            "service",
            "date",
            "start_time",
            "end_time",
            "duration_minutes",
            "meeting_link",
            "status",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
