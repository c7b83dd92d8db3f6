"""
Read side of the commission ledger.

Earned commission is the sum of ``ReferralCommission`` rows. Withdrawals that
are pending or paid already count against it, so a second request can never
spend the same commission twice.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import Optional, Tuple

from django.db.models import QuerySet, Sum
from django.utils import timezone

from core.errors import InvalidInput
from referrals.models import CommissionPayment, ReferralCode, ReferralCommission, ReferralUsage

ZERO = Decimal("0.00")
DATE_FORMAT = "%Y-%m-%d"


def total_earned(referral_code_id) -> Decimal:
    total = ReferralCommission.objects.filter(referral_code_id=referral_code_id).aggregate(total=Sum("amount"))["total"]
    return total or ZERO


def total_encumbered(referral_code_id) -> Decimal:
    total = CommissionPayment.objects.filter(
        referral_code_id=referral_code_id,
        status__in=CommissionPayment.ENCUMBERING_STATUSES,
    ).aggregate(total=Sum("amount"))["total"]
    return total or ZERO


def available_balance(referral_code_id) -> Decimal:
    return total_earned(referral_code_id) - total_encumbered(referral_code_id)


def _parse_date(value: Optional[str], field: str):
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid {field} format. Use yyyy-mm-dd.") from exc


def date_range(start_date: Optional[str] = None, end_date: Optional[str] = None) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Aware bounds for a yyyy-mm-dd range; the end date covers its whole day."""
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")
    if start and end and start > end:
        raise InvalidInput("start_date must not be after end_date.")
    tz = timezone.get_current_timezone()
    return (
        timezone.make_aware(datetime.combine(start, time.min), tz) if start else None,
        timezone.make_aware(datetime.combine(end, time.max), tz) if end else None,
    )


def _within(queryset: QuerySet, field: str, start_date, end_date) -> QuerySet:
    start, end = date_range(start_date, end_date)
    if start:
        queryset = queryset.filter(**{f"{field}__gte": start})
    if end:
        queryset = queryset.filter(**{f"{field}__lte": end})
    return queryset


def codes_for_owner(owner) -> QuerySet:
    return ReferralCode.objects.filter(owner=owner)


def commissions_for(
    *,
    referral_code_id=None,
    owner=None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> QuerySet:
    queryset = ReferralCommission.objects.select_related("referral_code", "payment")
    if referral_code_id is not None:
        queryset = queryset.filter(referral_code_id=referral_code_id)
    if owner is not None:
        queryset = queryset.filter(referral_code__owner=owner)
    return _within(queryset, "created_at", start_date, end_date)


def usages_for_code(referral_code_id, *, start_date: Optional[str] = None, end_date: Optional[str] = None) -> QuerySet:
    queryset = ReferralUsage.objects.filter(referral_code_id=referral_code_id).select_related("user")
    return _within(queryset, "used_at", start_date, end_date)


def commission_payments_for(*, owner=None, referral_code_id=None, status: Optional[str] = None) -> QuerySet:
    queryset = CommissionPayment.objects.select_related("referral_code", "referral_code__owner")
    if owner is not None:
        queryset = queryset.filter(referral_code__owner=owner)
    if referral_code_id is not None:
        queryset = queryset.filter(referral_code_id=referral_code_id)
    if status:
        if status not in dict(CommissionPayment.STATUSES):
            raise InvalidInput("Invalid status filter.")
        queryset = queryset.filter(status=status)
    return queryset
