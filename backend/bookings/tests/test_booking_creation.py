from decimal import Decimal

import pytest

from accounts.models import User
from bookings.models import Booking, BookingParticipant
from bookings.services.booking import create_booking
from core.errors import (
    AlreadyUsed,
    CapacityExceeded,
    DuplicateParticipant,
    Inactive,
    InvalidDate,
    InvalidInput,
    InvalidParticipants,
    InvalidServiceType,
    InvalidUser,
    MissingDate,
    NotFound,
)
from mentoring.models import MentoringService
from payments.models import Payment
from referrals.models import ReferralCode, ReferralCommission, ReferralUsage


def _user(email):
    return User.objects.create_user(username=email, email=email, password="password123")


def _row_counts():
    return (
        Booking.objects.count(),
        BookingParticipant.objects.count(),
        Payment.objects.count(),
        ReferralCommission.objects.count(),
    )


@pytest.fixture
def mentee(db):
    return _user("mentee@example.com")


@pytest.fixture
def friends(db):
    return [_user("ana@example.com"), _user("budi@example.com")]


@pytest.fixture
def group_service(db):
    return MentoringService.objects.create(
        service_name="Portfolio Review",
        service_type=MentoringService.GROUP,
        price=Decimal("300000"),
        max_participants=3,
    )


@pytest.fixture
def one_on_one(db):
    return MentoringService.objects.create(
        service_name="Career Coaching",
        service_type=MentoringService.ONE_ON_ONE,
        price=Decimal("100000"),
    )


@pytest.fixture
def bootcamp(db):
    return MentoringService.objects.create(
        service_name="Data Bootcamp",
        service_type=MentoringService.BOOTCAMP,
        price=Decimal("2500000"),
        max_participants=1,
    )


@pytest.fixture
def referral_usage(db, mentee):
    owner = _user("affiliate@example.com")
    code = ReferralCode.objects.create(
        id="REF-20250101-AB12",
        owner=owner,
        code="SAVE20",
        discount_percentage=Decimal("20"),
        commission_percentage=Decimal("10"),
    )
    return ReferralUsage.objects.create(user=mentee, referral_code=code, context=ReferralUsage.CONTEXT_BOOKING)


@pytest.mark.django_db
def test_group_booking_with_participants(mentee, friends, group_service):
    result = create_booking(
        mentee,
        mentoring_service_id=group_service.pk,
        booking_date="2025-11-03",
        participant_ids=[friend.pk for friend in friends],
    )

    booking = result.booking
    assert booking.id.startswith("Booking-group-")
    assert booking.status == Booking.CONFIRMED
    participants = list(booking.booking_participants.order_by("-is_leader", "user_id"))
    assert len(participants) == 3
    assert participants[0].user == mentee and participants[0].is_leader
    assert all(not p.is_leader for p in participants[1:])
    assert all(p.payment_status == BookingParticipant.CONFIRMED for p in participants)

    payment = Payment.objects.get(booking=booking)
    assert payment.amount == group_service.price
    assert payment.status == Payment.CONFIRMED
    assert payment.id.startswith("PAY-BKG-")
    assert ReferralCommission.objects.count() == 0
    assert result.original_price == result.final_price == Decimal("300000.00")


@pytest.mark.django_db
def test_duplicate_participant_leaves_no_rows(mentee, friends, group_service):
    with pytest.raises(DuplicateParticipant):
        create_booking(
            mentee,
            mentoring_service_id=group_service.pk,
            booking_date="2025-11-03",
            participant_ids=[friends[0].pk, friends[0].pk],
        )

    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
def test_mentee_cannot_be_listed_as_participant(mentee, friends, group_service):
    with pytest.raises(DuplicateParticipant):
        create_booking(
            mentee,
            mentoring_service_id=group_service.pk,
            booking_date="2025-11-03",
            participant_ids=[mentee.pk],
        )


@pytest.mark.django_db
def test_one_on_one_with_referral_discount_and_commission(mentee, one_on_one, referral_usage):
    result = create_booking(
        mentee,
        mentoring_service_id=one_on_one.pk,
        referral_usage_id=referral_usage.pk,
        booking_date="2025-11-03T10:00:00+07:00",
    )

    assert result.final_price == Decimal("80000.00")
    assert result.booking.status == Booking.CONFIRMED
    assert result.booking.referral_usage == referral_usage
    payment = result.payment
    assert payment.amount == Decimal("80000")
    commission = ReferralCommission.objects.get()
    assert commission.amount == Decimal("8000")
    assert commission.payment == payment
    assert commission.referral_code == referral_usage.referral_code


@pytest.mark.django_db
def test_referral_usage_cannot_be_consumed_twice(mentee, one_on_one, referral_usage):
    create_booking(
        mentee,
        mentoring_service_id=one_on_one.pk,
        referral_usage_id=referral_usage.pk,
        booking_date="2025-11-03",
    )

    with pytest.raises(AlreadyUsed):
        create_booking(
            mentee,
            mentoring_service_id=one_on_one.pk,
            referral_usage_id=referral_usage.pk,
            booking_date="2025-11-04",
        )
    assert Booking.objects.count() == 1
    assert ReferralCommission.objects.count() == 1


@pytest.mark.django_db
def test_unknown_referral_usage(mentee, one_on_one):
    with pytest.raises(NotFound):
        create_booking(mentee, mentoring_service_id=one_on_one.pk, referral_usage_id=999, booking_date="2025-11-03")
    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
@pytest.mark.parametrize("max_participants", [1, 2, 3, 5])
def test_group_capacity_is_enforced(mentee, max_participants):
    service = MentoringService.objects.create(
        service_name="Small Group",
        service_type=MentoringService.GROUP,
        price=Decimal("50000"),
        max_participants=max_participants,
    )
    extras = [_user(f"extra{i}@example.com") for i in range(max_participants)]

    with pytest.raises(CapacityExceeded):
        create_booking(
            mentee,
            mentoring_service_id=service.pk,
            booking_date="2025-11-03",
            participant_ids=[user.pk for user in extras],
        )
    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
def test_non_manual_service_is_pending_and_seat_limited(mentee, bootcamp):
    result = create_booking(mentee, mentoring_service_id=bootcamp.pk)

    assert result.booking.status == Booking.PENDING
    assert result.booking.id.startswith("Booking-bootcamp-")
    assert result.payment.status == Payment.PENDING
    leader = result.booking.booking_participants.get()
    assert leader.user == mentee and not leader.is_leader
    assert leader.payment_status == BookingParticipant.PENDING

    other = _user("late@example.com")
    with pytest.raises(CapacityExceeded):
        create_booking(other, mentoring_service_id=bootcamp.pk)


@pytest.mark.django_db
def test_cancelled_bookings_free_their_seat(mentee, bootcamp):
    result = create_booking(mentee, mentoring_service_id=bootcamp.pk)
    Booking.objects.filter(pk=result.booking.pk).update(status=Booking.CANCELLED)

    second = create_booking(_user("next@example.com"), mentoring_service_id=bootcamp.pk)
    assert second.booking.status == Booking.PENDING


@pytest.mark.django_db
def test_live_class_slug_replaces_spaces(mentee):
    service = MentoringService.objects.create(
        service_name="Live Q&A",
        service_type=MentoringService.LIVE_CLASS,
        price=Decimal("10000"),
    )
    result = create_booking(mentee, mentoring_service_id=service.pk)
    assert result.booking.id.startswith("Booking-live-class-")
    assert len(result.booking.id.rsplit("-", 1)[1]) == 10


@pytest.mark.django_db
def test_missing_and_inactive_services(mentee, one_on_one):
    with pytest.raises(NotFound):
        create_booking(mentee, mentoring_service_id=12345, booking_date="2025-11-03")

    one_on_one.is_active = False
    one_on_one.save()
    with pytest.raises(Inactive):
        create_booking(mentee, mentoring_service_id=one_on_one.pk, booking_date="2025-11-03")


@pytest.mark.django_db
def test_unknown_service_type_is_rejected(mentee):
    service = MentoringService.objects.create(service_name="Legacy", service_type="webinar", price=Decimal("1"))
    with pytest.raises(InvalidServiceType):
        create_booking(mentee, mentoring_service_id=service.pk, booking_date="2025-11-03")


@pytest.mark.django_db
def test_participants_only_for_group(mentee, friends, one_on_one):
    with pytest.raises(InvalidParticipants):
        create_booking(
            mentee,
            mentoring_service_id=one_on_one.pk,
            booking_date="2025-11-03",
            participant_ids=[friends[0].pk],
        )


@pytest.mark.django_db
def test_unknown_participant_is_invalid_user(mentee, group_service):
    with pytest.raises(InvalidUser):
        create_booking(
            mentee,
            mentoring_service_id=group_service.pk,
            booking_date="2025-11-03",
            participant_ids=[987654],
        )
    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
def test_manual_types_require_a_valid_date(mentee, one_on_one):
    with pytest.raises(MissingDate):
        create_booking(mentee, mentoring_service_id=one_on_one.pk)
    with pytest.raises(InvalidDate):
        create_booking(mentee, mentoring_service_id=one_on_one.pk, booking_date="next tuesday")
    with pytest.raises(InvalidDate):
        create_booking(mentee, mentoring_service_id=one_on_one.pk, booking_date="2025-13-45")
    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
def test_failure_after_usage_lock_rolls_back(mentee, one_on_one, referral_usage):
    with pytest.raises(MissingDate):
        create_booking(mentee, mentoring_service_id=one_on_one.pk, referral_usage_id=referral_usage.pk)

    referral_usage.refresh_from_db()
    assert not referral_usage.is_consumed
    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
def test_non_manual_types_reject_a_malformed_date(mentee, bootcamp):
    with pytest.raises(InvalidDate):
        create_booking(mentee, mentoring_service_id=bootcamp.pk, booking_date="not-a-date")
    assert _row_counts() == (0, 0, 0, 0)

    result = create_booking(mentee, mentoring_service_id=bootcamp.pk, booking_date="2025-12-01")
    assert result.booking.booking_date.date().isoformat() == "2025-12-01"


@pytest.mark.django_db
def test_referral_usage_of_another_user_is_not_found(mentee, one_on_one, referral_usage):
    stranger = _user("stranger@example.com")

    with pytest.raises(NotFound):
        create_booking(
            stranger,
            mentoring_service_id=one_on_one.pk,
            referral_usage_id=referral_usage.pk,
            booking_date="2025-11-03",
        )

    referral_usage.refresh_from_db()
    assert not referral_usage.is_consumed
    assert _row_counts() == (0, 0, 0, 0)


@pytest.mark.django_db
def test_practice_usage_cannot_discount_a_booking(mentee, one_on_one, referral_usage):
    ReferralUsage.objects.filter(pk=referral_usage.pk).update(context=ReferralUsage.CONTEXT_PRACTICE_PURCHASE)

    with pytest.raises(InvalidInput):
        create_booking(
            mentee,
            mentoring_service_id=one_on_one.pk,
            referral_usage_id=referral_usage.pk,
            booking_date="2025-11-03",
        )
    assert _row_counts() == (0, 0, 0, 0)
