import re

import pytest
from django.utils import timezone

from accounts.models import User
from bookings.models import Booking
from core import identifiers
from core.errors import GenerationExhausted
from mentoring.models import MentoringService

TAKEN = "Booking-group-1111111111"


@pytest.fixture
def taken_booking(db):
    mentee = User.objects.create_user(username="m@example.com", email="m@example.com", password="password123")
    service = MentoringService.objects.create(service_name="Group", service_type=MentoringService.GROUP, price=1)
    return Booking.objects.create(id=TAKEN, mentee=mentee, mentoring_service=service, booking_date=timezone.now())


def test_identifier_formats():
    assert re.fullmatch(r"Booking-one-on-one-[1-9]\d{9}", identifiers.booking_id("one-on-one"))
    assert re.fullmatch(r"Booking-live-class-\d{10}", identifiers.booking_id("Live Class"))
    assert re.fullmatch(r"PAY-BKG-\d{8}-\d{10}", identifiers.payment_id("booking"))
    assert re.fullmatch(r"PAY-PRC-\d{8}-\d{10}", identifiers.payment_id("practice"))
    assert re.fullmatch(r"REF-\d{8}-[A-Z0-9]{4}", identifiers.referral_code_id())
    assert re.fullmatch(r"Purchase-\d{10}", identifiers.practice_purchase_id())


@pytest.mark.django_db
def test_generation_retries_until_free(taken_booking):
    candidates = iter([TAKEN, TAKEN, "Booking-group-2222222222"])

    assert identifiers.generate_unique_id(Booking, lambda: next(candidates)) == "Booking-group-2222222222"


@pytest.mark.django_db
def test_generation_gives_up_after_max_attempts(taken_booking):
    attempts = []

    def build():
        attempts.append(1)
        return TAKEN

    with pytest.raises(GenerationExhausted):
        identifiers.generate_unique_id(Booking, build)
    assert len(attempts) == identifiers.MAX_ATTEMPTS
