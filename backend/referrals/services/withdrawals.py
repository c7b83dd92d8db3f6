from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import transaction
from django.utils import timezone

from core.errors import Forbidden, Immutable, InsufficientBalance, InvalidInput, InvalidStatus, NotFound
from referrals.models import CommissionPayment, ReferralCode
from referrals.services.ledger import available_balance

logger = logging.getLogger(__name__)


def _positive_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidInput("Amount must be a number.") from exc
    if not value.is_finite() or value <= 0:
        raise InvalidInput("Amount must be greater than zero.")
    return value


def request_commission_payment(referral_code_id, owner, amount) -> CommissionPayment:
    """
    Insert a pending withdrawal if ``amount`` fits the available balance.

    The referral code row stays locked while the balance is recomputed and
    the request inserted, so concurrent requests for one code run one at a time.
    """
    amount = _positive_amount(amount)

    with transaction.atomic():
        referral_code = ReferralCode.objects.select_for_update().filter(pk=referral_code_id).first()
        if referral_code is None:
            raise NotFound("Referral code not found.")
        if referral_code.owner_id != owner.pk:
            raise Forbidden("Referral code does not belong to you.")

        balance = available_balance(referral_code.pk)
        if amount > balance:
            raise InsufficientBalance(
                f"Insufficient commission balance. Available: {balance}.",
                details={"available_balance": str(balance)},
            )

        withdrawal = CommissionPayment.objects.create(
            referral_code=referral_code,
            amount=amount,
            status=CommissionPayment.PENDING,
        )

    logger.info("Withdrawal %s of %s requested on referral code %s", withdrawal.pk, amount, referral_code.pk)
    return withdrawal


def update_commission_payment_status(
    payment_id,
    status: str,
    *,
    notes: Optional[str] = None,
    transaction_id: Optional[str] = None,
    admin=None,
) -> CommissionPayment:
    if status not in dict(CommissionPayment.STATUSES):
        raise InvalidStatus("Invalid commission payment status.")

    with transaction.atomic():
        withdrawal = CommissionPayment.objects.select_for_update().filter(pk=payment_id).first()
        if withdrawal is None:
            raise NotFound("Commission payment not found.")
        if withdrawal.status in CommissionPayment.TERMINAL_STATUSES:
            raise Immutable(f"Commission payment is already {withdrawal.status}.")

        withdrawal.status = status
        if status == CommissionPayment.PAID:
            withdrawal.paid_at = timezone.now()
            if transaction_id:
                withdrawal.transaction_id = transaction_id
        else:
            withdrawal.paid_at = None
        if notes is not None:
            withdrawal.notes = notes
        withdrawal.save()

    logger.info(
        "Commission payment %s set to %s by %s",
        withdrawal.pk,
        status,
        getattr(admin, "pk", None),
    )
    return withdrawal
