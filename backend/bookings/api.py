from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdminRole
from bookings.models import Booking
from bookings.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    BookingUpdateSerializer,
)
from bookings.services.booking import create_booking
from bookings.services.lifecycle import cancel_booking, update_booking, update_booking_status
from core.pagination import StandardPagination


def _booking_queryset():
    return Booking.objects.select_related(
        "mentee",
        "mentoring_service",
        "payment",
    ).prefetch_related("booking_participants__user")


class BookingViewSet(viewsets.ReadOnlyModelViewSet):
    """Mentee-facing bookings: create, list own, edit or cancel while pending."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = StandardPagination
    filterset_fields = ["status"]
    ordering_fields = ["created_at", "booking_date"]

    def get_queryset(self):
        return _booking_queryset().filter(mentee=self.request.user)

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = create_booking(request.user, **serializer.validated_data)

        booking = _booking_queryset().get(pk=result.booking.pk)
        payload = dict(BookingSerializer(booking).data)
        payload["original_price"] = str(result.original_price)
        payload["final_price"] = str(result.final_price)
        return Response(payload, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = BookingUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        booking = update_booking(kwargs["pk"], request.user, **serializer.validated_data)
        return Response(BookingSerializer(_booking_queryset().get(pk=booking.pk)).data)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        booking = cancel_booking(pk, request.user)
        return Response(BookingSerializer(_booking_queryset().get(pk=booking.pk)).data)


class AdminBookingViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    pagination_class = StandardPagination
    filterset_fields = ["status", "mentoring_service", "mentee"]
    search_fields = ["id", "mentee__email", "mentee__full_name", "mentoring_service__service_name"]
    ordering_fields = ["created_at", "booking_date", "status"]

    def get_queryset(self):
        return _booking_queryset()

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = update_booking_status(pk, serializer.validated_data["status"], admin=request.user)
        return Response(BookingSerializer(_booking_queryset().get(pk=booking.pk)).data)
