"""
Booking creation.

Everything a booking writes (the booking, its participants, its payment and
the referral commission) is inserted in one transaction. The mentoring
service row and the referral usage row are locked for the duration so the
capacity check and the referral link cannot race another booking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from bookings.models import Booking, BookingParticipant
from core import identifiers
from core.errors import (
    CapacityExceeded,
    Conflict,
    DuplicateParticipant,
    Inactive,
    IntegrityViolation,
    InvalidDate,
    InvalidParticipants,
    InvalidServiceType,
    InvalidUser,
    MissingDate,
    NotFound,
)
from mentoring.models import MentoringService
from payments.models import Payment
from referrals.models import ReferralUsage
from referrals.services.pricing import lock_unconsumed_usage, quote_price, record_commission

logger = logging.getLogger(__name__)


@dataclass
class BookingResult:
    booking: Booking
    payment: Payment
    original_price: Decimal
    final_price: Decimal
    commission: Optional[Decimal] = None


def check_group_capacity(service: MentoringService, participant_count: int) -> None:
    if service.max_participants is not None and participant_count > service.max_participants:
        raise CapacityExceeded(
            f"Total participants ({participant_count}) exceed the maximum allowed "
            f"({service.max_participants})."
        )


def check_unique_participants(mentee, participant_ids: Sequence[int]) -> None:
    if len(set(participant_ids)) != len(participant_ids):
        raise DuplicateParticipant("Duplicate user in participant_ids.")
    if mentee.pk in participant_ids:
        raise DuplicateParticipant("The mentee is already a participant of the booking.")


def check_users_exist(user_ids: Iterable[int]) -> None:
    wanted = set(user_ids)
    found = set(get_user_model().objects.filter(pk__in=wanted).values_list("pk", flat=True))
    missing = wanted - found
    if missing:
        raise InvalidUser("One or more user ids are invalid.", details={"missing_user_ids": sorted(missing)})


def _check_seats_left(service: MentoringService) -> None:
    if service.max_participants is None:
        return
    active = Booking.objects.filter(
        mentoring_service=service,
        status__in=Booking.ACTIVE_STATUSES,
    ).count()
    if active >= service.max_participants:
        raise CapacityExceeded("The mentoring service is fully booked.")


def parse_booking_date(value) -> Optional[datetime]:
    """Accept a datetime, a date or an ISO string; return an aware datetime."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value)
        try:
            parsed = parse_datetime(text)
            day = None if parsed else parse_date(text)
        except ValueError as exc:
            raise InvalidDate("Invalid booking_date format. Use yyyy-mm-dd.") from exc
        if parsed is None:
            if day is None:
                raise InvalidDate("Invalid booking_date format. Use yyyy-mm-dd.")
            parsed = datetime.combine(day, time.min)
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _resolve_booking_date(service: MentoringService, value) -> datetime:
    if service.is_manual:
        if value in (None, ""):
            raise MissingDate("booking_date is required for one-on-one and group sessions.")
        return parse_booking_date(value)
    return parse_booking_date(value) or timezone.now()


def create_booking(
    mentee,
    *,
    mentoring_service_id,
    referral_usage_id=None,
    special_requests: Optional[str] = None,
    booking_date=None,
    participant_ids: Sequence[int] = (),
) -> BookingResult:
    participant_ids = list(participant_ids or [])

    try:
        with transaction.atomic():
            service = MentoringService.objects.select_for_update().filter(pk=mentoring_service_id).first()
            if service is None:
                raise NotFound("Mentoring service not found.")
            if not service.is_active:
                raise Inactive("Mentoring service is not active.")
            if not service.is_known_type:
                raise InvalidServiceType(f"Unknown service type: {service.service_type}.")

            if participant_ids and service.service_type != MentoringService.GROUP:
                raise InvalidParticipants("Participants are only allowed for group sessions.")
            if service.service_type == MentoringService.GROUP:
                check_group_capacity(service, 1 + len(participant_ids))
            if not service.is_manual:
                _check_seats_left(service)

            check_unique_participants(mentee, participant_ids)
            check_users_exist([mentee.pk, *participant_ids])

            usage = None
            if referral_usage_id:
                usage = lock_unconsumed_usage(referral_usage_id, mentee, ReferralUsage.CONTEXT_BOOKING)
            scheduled_for = _resolve_booking_date(service, booking_date)

            quote = quote_price(service.price, usage)
            settled = service.is_manual
            status = Booking.CONFIRMED if settled else Booking.PENDING

            booking = Booking.objects.create(
                id=identifiers.generate_unique_id(
                    Booking, lambda: identifiers.booking_id(service.service_type)
                ),
                mentee=mentee,
                mentoring_service=service,
                referral_usage=usage,
                special_requests=special_requests,
                booking_date=scheduled_for,
                status=status,
            )
            BookingParticipant.objects.bulk_create(
                [
                    BookingParticipant(
                        booking=booking,
                        user=mentee,
                        is_leader=settled,
                        payment_status=(
                            BookingParticipant.CONFIRMED if settled else BookingParticipant.PENDING
                        ),
                    )
                ]
                + [
                    BookingParticipant(
                        booking=booking,
                        user_id=user_id,
                        is_leader=False,
                        payment_status=BookingParticipant.CONFIRMED,
                    )
                    for user_id in participant_ids
                ]
            )

            payment = Payment.objects.create(
                id=identifiers.generate_unique_id(Payment, lambda: identifiers.payment_id("booking")),
                booking=booking,
                amount=quote.final_price,
                status=Payment.CONFIRMED if settled else Payment.PENDING,
            )
            if payment.booking_id and payment.practice_purchase_id:
                raise IntegrityViolation(f"Payment {payment.pk} is linked to both a booking and a practice purchase.")

            record_commission(quote, payment)
    except IntegrityError as exc:
        logger.warning("Booking insert for mentee %s collided: %s", mentee.pk, exc)
        raise Conflict() from exc

    logger.info(
        "Booking %s created for mentee %s on service %s (%s, amount %s)",
        booking.pk,
        mentee.pk,
        service.pk,
        booking.status,
        quote.final_price,
    )
    return BookingResult(
        booking=booking,
        payment=payment,
        original_price=quote.original_price,
        final_price=quote.final_price,
        commission=quote.commission,
    )
