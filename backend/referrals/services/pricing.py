from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from core.errors import AlreadyUsed, InvalidInput, NotFound
from referrals.models import ReferralCommission, ReferralUsage

HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingQuote:
    """Prices for one purchase, with the referral that discounted it (if any)."""

    original_price: Decimal
    final_price: Decimal
    commission: Optional[Decimal] = None
    usage: Optional[ReferralUsage] = None

    @property
    def has_referral(self) -> bool:
        return self.usage is not None


def quote_price(price, usage: Optional[ReferralUsage] = None) -> PricingQuote:
    """
    finalPrice = price * (1 - discount / 100); commission is taken from the
    final (discounted) price.
    """
    original = _money(price)
    if usage is None:
        return PricingQuote(original_price=original, final_price=original)

    code = usage.referral_code
    final = _money(original * (HUNDRED - code.discount_percentage) / HUNDRED)
    commission = _money(final * code.commission_percentage / HUNDRED)
    return PricingQuote(original_price=original, final_price=final, commission=commission, usage=usage)


def lock_unconsumed_usage(referral_usage_id, user, context: str) -> ReferralUsage:
    """
    Row-lock ``user``'s referral usage and make sure nothing has consumed it yet.

    Must run inside ``transaction.atomic()``; the lock is held until the
    caller links the usage to its booking or purchase.
    """
    usage = (
        ReferralUsage.objects.select_for_update()
        .select_related("referral_code")
        .filter(pk=referral_usage_id, user_id=user.pk)
        .first()
    )
    if usage is None:
        raise NotFound("Referral usage not found.")
    if usage.context != context:
        raise InvalidInput(f"Referral usage was applied for {usage.get_context_display().lower()}.")
    if usage.is_consumed:
        raise AlreadyUsed("Referral usage has already been used.")
    return usage


def record_commission(quote: PricingQuote, payment) -> Optional[ReferralCommission]:
    if not quote.has_referral:
        return None
    return ReferralCommission.objects.create(
        referral_code=quote.usage.referral_code,
        payment=payment,
        amount=quote.commission,
    )
