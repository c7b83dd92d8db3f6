from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import IntegrityError, transaction

from core import identifiers
from core.errors import Conflict, Forbidden, Immutable, Inactive, IntegrityViolation, NotFound
from payments.models import Payment
from practices.models import Practice, PracticePurchase
from referrals.models import ReferralUsage
from referrals.services.pricing import lock_unconsumed_usage, quote_price, record_commission

logger = logging.getLogger(__name__)


@dataclass
class PurchaseResult:
    purchase: PracticePurchase
    payment: Payment
    original_price: Decimal
    final_price: Decimal


def create_practice_purchase(user, practice_id, *, referral_usage_id=None) -> PurchaseResult:
    """Buy a practice package; payment and commission are written with the purchase."""
    try:
        with transaction.atomic():
            practice = Practice.objects.filter(pk=practice_id).first()
            if practice is None:
                raise NotFound("Practice not found.")
            if not practice.is_active:
                raise Inactive("Practice is not active.")

            usage = None
            if referral_usage_id:
                usage = lock_unconsumed_usage(referral_usage_id, user, ReferralUsage.CONTEXT_PRACTICE_PURCHASE)
            quote = quote_price(practice.price, usage)

            purchase = PracticePurchase.objects.create(
                id=identifiers.generate_unique_id(PracticePurchase, identifiers.practice_purchase_id),
                user=user,
                practice=practice,
                referral_usage=usage,
                status=PracticePurchase.PENDING,
            )
            payment = Payment.objects.create(
                id=identifiers.generate_unique_id(Payment, lambda: identifiers.payment_id("practice")),
                practice_purchase=purchase,
                amount=quote.final_price,
                status=Payment.PENDING,
            )
            if payment.booking_id and payment.practice_purchase_id:
                raise IntegrityViolation(f"Payment {payment.pk} is linked to both a booking and a practice purchase.")

            record_commission(quote, payment)
    except IntegrityError as exc:
        logger.warning("Practice purchase insert for user %s collided: %s", user.pk, exc)
        raise Conflict() from exc

    logger.info("Practice purchase %s created for user %s (amount %s)", purchase.pk, user.pk, quote.final_price)
    return PurchaseResult(
        purchase=purchase,
        payment=payment,
        original_price=quote.original_price,
        final_price=quote.final_price,
    )


def cancel_practice_purchase(user, purchase_id) -> PracticePurchase:
    with transaction.atomic():
        purchase = PracticePurchase.objects.select_for_update().filter(pk=purchase_id).first()
        if purchase is None:
            raise NotFound("Practice purchase not found.")
        if purchase.user_id != user.pk:
            raise Forbidden("You can only cancel your own purchases.")
        if purchase.status != PracticePurchase.PENDING:
            raise Immutable("Only pending purchases can be cancelled.")

        purchase.status = PracticePurchase.CANCELLED
        purchase.save(update_fields=["status", "updated_at"])
        Payment.objects.filter(practice_purchase=purchase, status=Payment.PENDING).update(status=Payment.FAILED)

    logger.info("Practice purchase %s cancelled by user %s", purchase.pk, user.pk)
    return purchase
