from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import UserSerializer


class MeView(APIView):
    """Return the serialized profile and roles for the current authenticated user."""

    def get(self, request, *args, **kwargs):
        return Response(UserSerializer(request.user).data)
