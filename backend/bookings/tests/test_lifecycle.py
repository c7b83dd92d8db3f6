from decimal import Decimal

import pytest

from accounts.models import User
from bookings.models import Booking, BookingParticipant
from bookings.services.booking import create_booking
from bookings.services.lifecycle import cancel_booking, update_booking, update_booking_status
from core.errors import CapacityExceeded, Immutable, InvalidParticipants, InvalidStatus, NotFound
from mentoring.models import MentoringService
from payments.models import Payment


def _user(email):
    return User.objects.create_user(username=email, email=email, password="password123")


@pytest.fixture
def mentee(db):
    return _user("mentee@example.com")


@pytest.fixture
def shortclass(db):
    return MentoringService.objects.create(
        service_name="SQL Short Class",
        service_type=MentoringService.SHORTCLASS,
        price=Decimal("200000"),
        max_participants=10,
    )


@pytest.fixture
def group_service(db):
    return MentoringService.objects.create(
        service_name="Study Group",
        service_type=MentoringService.GROUP,
        price=Decimal("90000"),
        max_participants=3,
    )


@pytest.fixture
def pending_booking(mentee, shortclass):
    return create_booking(mentee, mentoring_service_id=shortclass.pk, special_requests="Vegan snacks").booking


@pytest.fixture
def pending_group_booking(mentee, group_service):
    friend = _user("friend@example.com")
    booking = create_booking(
        mentee,
        mentoring_service_id=group_service.pk,
        booking_date="2025-11-03",
        participant_ids=[friend.pk],
    ).booking
    # Group bookings start confirmed; reopen one so the mentee may edit it.
    Booking.objects.filter(pk=booking.pk).update(status=Booking.PENDING)
    Payment.objects.filter(booking=booking).update(status=Payment.PENDING)
    return booking


@pytest.mark.django_db
def test_mentee_updates_special_requests(mentee, pending_booking):
    booking = update_booking(pending_booking.pk, mentee, special_requests="Window seat")
    booking.refresh_from_db()
    assert booking.special_requests == "Window seat"


@pytest.mark.django_db
def test_mentee_replaces_group_participants(mentee, pending_group_booking):
    newcomers = [_user("c@example.com"), _user("d@example.com")]

    update_booking(pending_group_booking.pk, mentee, participant_ids=[u.pk for u in newcomers])

    rows = list(pending_group_booking.booking_participants.all())
    assert {row.user_id for row in rows} == {mentee.pk, *(u.pk for u in newcomers)}
    assert [row.user_id for row in rows if row.is_leader] == [mentee.pk]
    assert all(row.payment_status == BookingParticipant.PENDING for row in rows)


@pytest.mark.django_db
def test_participant_replacement_respects_capacity(mentee, pending_group_booking):
    crowd = [_user(f"p{i}@example.com") for i in range(3)]
    with pytest.raises(CapacityExceeded):
        update_booking(pending_group_booking.pk, mentee, participant_ids=[u.pk for u in crowd])
    assert pending_group_booking.booking_participants.count() == 2


@pytest.mark.django_db
def test_participants_cannot_be_set_on_non_group(mentee, pending_booking):
    friend = _user("friend@example.com")
    with pytest.raises(InvalidParticipants):
        update_booking(pending_booking.pk, mentee, participant_ids=[friend.pk])


@pytest.mark.django_db
def test_empty_participant_list_is_accepted_on_non_group(mentee, pending_booking):
    booking = update_booking(pending_booking.pk, mentee, special_requests="Aisle", participant_ids=[])

    booking.refresh_from_db()
    assert booking.special_requests == "Aisle"
    assert [row.user_id for row in booking.booking_participants.all()] == [mentee.pk]


@pytest.mark.django_db
def test_other_users_cannot_touch_booking(pending_booking):
    stranger = _user("stranger@example.com")
    with pytest.raises(NotFound):
        cancel_booking(pending_booking.pk, stranger)


@pytest.mark.django_db
def test_cancel_marks_participants_failed_and_is_not_repeatable(mentee, pending_booking):
    cancel_booking(pending_booking.pk, mentee)

    pending_booking.refresh_from_db()
    assert pending_booking.status == Booking.CANCELLED
    assert set(pending_booking.booking_participants.values_list("payment_status", flat=True)) == {
        BookingParticipant.FAILED
    }
    with pytest.raises(Immutable):
        cancel_booking(pending_booking.pk, mentee)


@pytest.mark.django_db
@pytest.mark.parametrize("booking_status", [Booking.CONFIRMED, Booking.COMPLETED, Booking.CANCELLED])
@pytest.mark.parametrize("payment_status", [Payment.PENDING, Payment.CONFIRMED, Payment.FAILED])
def test_non_pending_bookings_are_immutable(mentee, pending_booking, booking_status, payment_status):
    Booking.objects.filter(pk=pending_booking.pk).update(status=booking_status)
    Payment.objects.filter(booking=pending_booking).update(status=payment_status)

    with pytest.raises(Immutable):
        update_booking(pending_booking.pk, mentee, special_requests="late change")
    with pytest.raises(Immutable):
        cancel_booking(pending_booking.pk, mentee)


@pytest.mark.django_db
def test_settled_payment_locks_pending_booking(mentee, pending_booking):
    Payment.objects.filter(booking=pending_booking).update(status=Payment.CONFIRMED)

    with pytest.raises(Immutable):
        update_booking(pending_booking.pk, mentee, special_requests="late change")
    with pytest.raises(Immutable):
        cancel_booking(pending_booking.pk, mentee)


@pytest.mark.django_db
def test_admin_cancel_fails_every_participant(mentee, group_service):
    friend = _user("friend2@example.com")
    booking = create_booking(
        mentee,
        mentoring_service_id=group_service.pk,
        booking_date="2025-11-03",
        participant_ids=[friend.pk],
    ).booking
    assert booking.booking_participants.filter(payment_status=BookingParticipant.CONFIRMED).count() == 2

    update_booking_status(booking.pk, Booking.CANCELLED)

    assert set(booking.booking_participants.values_list("payment_status", flat=True)) == {BookingParticipant.FAILED}


@pytest.mark.django_db
def test_admin_confirm_settles_participants_except_special_types(mentee, pending_booking, pending_group_booking):
    update_booking_status(pending_group_booking.pk, Booking.CONFIRMED)
    assert set(pending_group_booking.booking_participants.values_list("payment_status", flat=True)) == {
        BookingParticipant.CONFIRMED
    }

    update_booking_status(pending_booking.pk, Booking.CONFIRMED)
    pending_booking.refresh_from_db()
    assert pending_booking.status == Booking.CONFIRMED
    assert set(pending_booking.booking_participants.values_list("payment_status", flat=True)) == {
        BookingParticipant.PENDING
    }


@pytest.mark.django_db
def test_admin_status_validation(pending_booking):
    with pytest.raises(InvalidStatus):
        update_booking_status(pending_booking.pk, "archived")
    with pytest.raises(NotFound):
        update_booking_status("Booking-group-0000000000", Booking.COMPLETED)
