from datetime import timedelta
from decimal import Decimal
from itertools import count

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import Role, User, grant_role
from core.errors import Forbidden, Immutable, InsufficientBalance, InvalidInput, InvalidStatus, IntegrityViolation, NotFound
from payments.models import Payment
from practices.models import Practice, PracticePurchase
from referrals.models import CommissionPayment, ReferralCode, ReferralCommission
from referrals.services import ledger
from referrals.services.withdrawals import request_commission_payment, update_commission_payment_status

_sequence = count(1)


def _user(email):
    return User.objects.create_user(username=email, email=email, password="password123")


def _earn(referral_code, amount, *, created_at=None):
    n = next(_sequence)
    practice = Practice.objects.create(title=f"Drill {n}", price=Decimal(amount))
    purchase = PracticePurchase.objects.create(id=f"Purchase-{n:010d}", user=referral_code.owner, practice=practice)
    payment = Payment.objects.create(id=f"PAY-PRC-20250101-{n:010d}", practice_purchase=purchase, amount=Decimal(amount))
    return ReferralCommission.objects.create(
        referral_code=referral_code,
        payment=payment,
        amount=Decimal(amount),
        created_at=created_at or timezone.now(),
    )


@pytest.fixture
def affiliator(db):
    user = _user("affiliate@example.com")
    grant_role(user, Role.AFFILIATOR)
    return user


@pytest.fixture
def referral_code(affiliator):
    return ReferralCode.objects.create(
        id="REF-20250101-ZX90",
        owner=affiliator,
        code="ZX90",
        discount_percentage=Decimal("10"),
        commission_percentage=Decimal("10"),
    )


@pytest.mark.django_db
def test_pending_withdrawal_encumbers_balance(referral_code, affiliator):
    _earn(referral_code, "50000")
    CommissionPayment.objects.create(referral_code=referral_code, amount=Decimal("30000"))

    assert ledger.available_balance(referral_code.pk) == Decimal("20000")
    with pytest.raises(InsufficientBalance):
        request_commission_payment(referral_code.pk, affiliator, Decimal("25000"))

    withdrawal = request_commission_payment(referral_code.pk, affiliator, Decimal("20000"))
    assert withdrawal.status == CommissionPayment.PENDING
    assert ledger.available_balance(referral_code.pk) == Decimal("0")


@pytest.mark.django_db
def test_failed_withdrawals_release_balance(referral_code, affiliator):
    _earn(referral_code, "10000")
    CommissionPayment.objects.create(referral_code=referral_code, amount=Decimal("10000"), status=CommissionPayment.FAILED)

    assert ledger.total_encumbered(referral_code.pk) == Decimal("0")
    assert request_commission_payment(referral_code.pk, affiliator, "10000").amount == Decimal("10000")


@pytest.mark.django_db
def test_sequential_requests_never_exceed_earned(referral_code, affiliator):
    _earn(referral_code, "30000")
    granted = Decimal("0")
    for _ in range(5):
        try:
            granted += request_commission_payment(referral_code.pk, affiliator, Decimal("7000")).amount
        except InsufficientBalance:
            pass
    assert granted == Decimal("28000")
    assert ledger.total_encumbered(referral_code.pk) <= ledger.total_earned(referral_code.pk)


@pytest.mark.django_db
def test_request_validation(referral_code, affiliator):
    with pytest.raises(InvalidInput):
        request_commission_payment(referral_code.pk, affiliator, "0")
    with pytest.raises(NotFound):
        request_commission_payment("REF-19990101-NONE", affiliator, "1")
    with pytest.raises(Forbidden):
        request_commission_payment(referral_code.pk, _user("thief@example.com"), "1")


@pytest.mark.django_db
def test_paid_sets_paid_at_and_is_terminal(referral_code):
    withdrawal = CommissionPayment.objects.create(referral_code=referral_code, amount=Decimal("5000"))

    updated = update_commission_payment_status(withdrawal.pk, CommissionPayment.PAID, transaction_id="TRF-001", notes="BCA")
    assert updated.paid_at is not None
    assert updated.transaction_id == "TRF-001"
    assert updated.notes == "BCA"

    with pytest.raises(Immutable):
        update_commission_payment_status(withdrawal.pk, CommissionPayment.FAILED)


@pytest.mark.django_db
def test_non_paid_status_clears_paid_at(referral_code):
    withdrawal = CommissionPayment.objects.create(
        referral_code=referral_code,
        amount=Decimal("5000"),
        paid_at=timezone.now(),
    )

    updated = update_commission_payment_status(withdrawal.pk, CommissionPayment.FAILED, notes="Wrong account")
    assert updated.paid_at is None
    assert updated.status == CommissionPayment.FAILED


@pytest.mark.django_db
def test_status_update_errors(referral_code):
    with pytest.raises(InvalidStatus):
        update_commission_payment_status(1, "refunded")
    with pytest.raises(NotFound):
        update_commission_payment_status(9999, CommissionPayment.PAID)


@pytest.mark.django_db
def test_commission_rows_are_append_only(referral_code):
    commission = _earn(referral_code, "1000")
    commission.amount = Decimal("999999")
    with pytest.raises(IntegrityViolation):
        commission.save()
    with pytest.raises(IntegrityViolation):
        commission.delete()
    assert ReferralCommission.objects.get(pk=commission.pk).amount == Decimal("1000")


@pytest.mark.django_db
def test_commission_listing_date_range(referral_code):
    now = timezone.now()
    _earn(referral_code, "100", created_at=now - timedelta(days=10))
    recent = _earn(referral_code, "200", created_at=now)

    today = timezone.localdate().isoformat()
    rows = ledger.commissions_for(referral_code_id=referral_code.pk, start_date=today, end_date=today)
    assert list(rows) == [recent]

    with pytest.raises(InvalidInput):
        list(ledger.commissions_for(referral_code_id=referral_code.pk, start_date="03/11/2025"))


@pytest.mark.django_db
def test_affiliator_api_flow(referral_code, affiliator):
    _earn(referral_code, "50000")
    client = APIClient()
    client.force_authenticate(affiliator)

    response = client.get(f"/api/referrals/codes/{referral_code.pk}/commissions/")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 1
    assert body["available_balance"] == "50000.00"

    response = client.post(
        "/api/referrals/commission-payments/",
        {"referral_code_id": referral_code.pk, "amount": "60000"},
        format="json",
    )
    assert response.status_code == 400
    assert response.json()["code"] == "insufficient_balance"

    response = client.post(
        "/api/referrals/commission-payments/",
        {"referral_code_id": referral_code.pk, "amount": "45000"},
        format="json",
    )
    assert response.status_code == 201
    withdrawal_id = response.json()["id"]

    listing = client.get("/api/referrals/commission-payments/").json()
    assert [row["id"] for row in listing["data"]] == [withdrawal_id]

    admin_user = _user("admin@example.com")
    grant_role(admin_user, Role.ADMIN)
    client.force_authenticate(admin_user)
    response = client.patch(
        f"/api/admin/commission-payments/{withdrawal_id}/status/",
        {"status": "paid", "transaction_id": "TRF-42"},
        format="json",
    )
    assert response.status_code == 200
    assert response.json()["paid_at"] is not None


@pytest.mark.django_db
def test_affiliator_cannot_see_other_codes(referral_code):
    other = _user("other-affiliate@example.com")
    grant_role(other, Role.AFFILIATOR)
    client = APIClient()
    client.force_authenticate(other)

    assert client.get(f"/api/referrals/codes/{referral_code.pk}/commissions/").status_code == 404
    assert client.get("/api/referrals/codes/").json()["pagination"]["total"] == 0
