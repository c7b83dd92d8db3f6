from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsMentor
from mentoring.serializers import MentoringSessionSerializer, MentorSessionUpdateSerializer
from mentoring.services.sessions import update_session_by_mentor


class MentorSessionUpdateView(APIView):
    """Let an assigned mentor change a session's status or meeting link (throttled)."""

    permission_classes = [permissions.IsAuthenticated, IsMentor]

    def patch(self, request, session_id):
        serializer = MentorSessionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = update_session_by_mentor(session_id, request.user, serializer.validated_data)
        return Response(MentoringSessionSerializer(session).data)
