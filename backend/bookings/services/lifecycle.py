from __future__ import annotations

import logging
from typing import Optional, Sequence

from django.db import transaction

from bookings.models import Booking, BookingParticipant
from bookings.services.booking import check_group_capacity, check_unique_participants, check_users_exist
from core.errors import Immutable, InvalidParticipants, InvalidStatus, NotFound
from mentoring.models import MentoringService
from payments.models import Payment

logger = logging.getLogger(__name__)

_UNSET = object()


def _lock_booking(booking_id) -> Booking:
    booking = (
        Booking.objects.select_for_update()
        .select_related("mentoring_service")
        .filter(pk=booking_id)
        .first()
    )
    if booking is None:
        raise NotFound("Booking not found.")
    return booking


def _lock_own_booking(booking_id, mentee) -> Booking:
    booking = _lock_booking(booking_id)
    if booking.mentee_id != mentee.pk:
        raise NotFound("Booking not found.")
    return booking


def ensure_mentee_can_modify(booking: Booking) -> None:
    if booking.status != Booking.PENDING:
        raise Immutable("Booking can no longer be modified.")
    payment_status = Payment.objects.filter(booking=booking).values_list("status", flat=True).first()
    if payment_status in Payment.SETTLED_STATUSES:
        raise Immutable("Booking has already been paid and can no longer be modified.")


def _replace_participants(booking: Booking, mentee, participant_ids: Sequence[int]) -> None:
    booking.booking_participants.all().delete()
    BookingParticipant.objects.bulk_create(
        [BookingParticipant(booking=booking, user=mentee, is_leader=True)]
        + [BookingParticipant(booking=booking, user_id=user_id) for user_id in participant_ids]
    )


def update_booking(booking_id, mentee, *, special_requests=_UNSET, participant_ids: Optional[Sequence[int]] = None) -> Booking:
    with transaction.atomic():
        booking = _lock_own_booking(booking_id, mentee)
        ensure_mentee_can_modify(booking)

        if special_requests is not _UNSET:
            booking.special_requests = special_requests

        service = booking.mentoring_service
        if participant_ids is not None and service.service_type != MentoringService.GROUP:
            if participant_ids:
                raise InvalidParticipants("Participants can only be changed on group bookings.")
            participant_ids = None

        if participant_ids is not None:
            participant_ids = list(participant_ids)
            check_group_capacity(service, 1 + len(participant_ids))
            check_unique_participants(mentee, participant_ids)
            check_users_exist(participant_ids)
            _replace_participants(booking, mentee, participant_ids)

        booking.save()

    logger.info("Booking %s updated by mentee %s", booking.pk, mentee.pk)
    return booking


def cancel_booking(booking_id, mentee) -> Booking:
    with transaction.atomic():
        booking = _lock_own_booking(booking_id, mentee)
        ensure_mentee_can_modify(booking)
        booking.status = Booking.CANCELLED
        booking.save(update_fields=["status", "updated_at"])
        booking.booking_participants.update(payment_status=BookingParticipant.FAILED)

    logger.info("Booking %s cancelled by mentee %s", booking.pk, mentee.pk)
    return booking


def update_booking_status(booking_id, status: str, *, admin=None) -> Booking:
    if status not in dict(Booking.STATUSES):
        raise InvalidStatus("Invalid booking status.")

    with transaction.atomic():
        booking = _lock_booking(booking_id)
        previous = booking.status
        booking.status = status
        booking.save(update_fields=["status", "updated_at"])

        if status == Booking.CANCELLED:
            booking.booking_participants.update(payment_status=BookingParticipant.FAILED)
        elif status == Booking.CONFIRMED and not booking.mentoring_service.is_special:
            booking.booking_participants.update(payment_status=BookingParticipant.CONFIRMED)

    logger.info(
        "Booking %s status %s -> %s by admin %s",
        booking.pk,
        previous,
        status,
        getattr(admin, "pk", None),
    )
    return booking
