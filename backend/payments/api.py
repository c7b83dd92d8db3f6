import logging

from django.db.models import Q
from django.http import HttpResponse
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole
from core.errors import NotFound
from core.pagination import StandardPagination
from payments.models import Payment
from payments.serializers import (
    GatewayCallbackSerializer,
    GatewayPaymentRequestSerializer,
    PaymentSerializer,
    PaymentStatusSerializer,
)
from payments.services.gateway import create_gateway_payment, process_gateway_callback, update_payment_status

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """Payments owned by the caller, and their hand-off to the gateway."""

    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = StandardPagination
    filterset_fields = ["status"]

    def get_queryset(self):
        user = self.request.user
        return Payment.objects.filter(Q(booking__mentee=user) | Q(practice_purchase__user=user))

    def create(self, request, *args, **kwargs):
        serializer = GatewayPaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reference_id = serializer.validated_data["reference_id"]
        if not self.get_queryset().filter(pk=reference_id).exists():
            raise NotFound("Payment not found.")

        gateway_response = create_gateway_payment(
            reference_id,
            payment_method=serializer.validated_data.get("payment_method") or None,
            email=request.user.email,
            phone_number=request.user.phone_number or "",
        )
        return Response(gateway_response, status=status.HTTP_201_CREATED)


class AdminPaymentViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    pagination_class = StandardPagination
    queryset = Payment.objects.all()
    filterset_fields = ["status", "payment_method"]
    search_fields = ["id", "transaction_id"]
    ordering_fields = ["created_at", "amount", "payment_date"]

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = PaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = update_payment_status(pk, serializer.validated_data["status"], admin=request.user)
        return Response(PaymentSerializer(payment).data)


class GatewayCallbackView(APIView):
    """Receive Duitku payment notifications."""

    permission_classes: list = []
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        serializer = GatewayCallbackSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning("Malformed gateway callback: %s", serializer.errors)
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        process_gateway_callback(serializer.validated_data)
        return HttpResponse("OK", content_type="text/plain")
