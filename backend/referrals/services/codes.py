from __future__ import annotations

import logging
from typing import Tuple

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from accounts.models import Role
from core import identifiers
from core.errors import AlreadyUsed, Conflict, Forbidden, Inactive, InvalidInput, NotFound
from referrals.models import ReferralCode, ReferralUsage

logger = logging.getLogger(__name__)


def create_referral_code(
    *,
    owner_id,
    code: str,
    discount_percentage,
    commission_percentage,
    expiry_date=None,
    is_active: bool = True,
) -> ReferralCode:
    User = get_user_model()
    owner = User.objects.filter(pk=owner_id).first()
    if owner is None:
        raise NotFound("Owner not found.")
    if not owner.has_role(Role.AFFILIATOR):
        raise Forbidden("Referral code owner must have the affiliator role.")

    code = code.strip()
    if not code:
        raise InvalidInput("Referral code is required.")
    if ReferralCode.objects.filter(code=code).exists():
        raise Conflict("Referral code already exists.")

    try:
        with transaction.atomic():
            referral_code = ReferralCode.objects.create(
                id=identifiers.generate_unique_id(ReferralCode, identifiers.referral_code_id),
                owner=owner,
                code=code,
                discount_percentage=discount_percentage,
                commission_percentage=commission_percentage,
                expiry_date=expiry_date,
                is_active=is_active,
            )
    except IntegrityError as exc:
        raise Conflict("Referral code already exists.") from exc

    logger.info("Referral code %s (%s) created for owner %s", referral_code.id, code, owner.pk)
    return referral_code


def apply_referral_code(user, code: str, context: str) -> Tuple[ReferralUsage, object]:
    """
    Claim ``code`` for ``user``. Returns the new usage and its discount.

    The usage is only consumed later, when a booking or purchase links it.
    """
    if context not in dict(ReferralUsage.CONTEXTS):
        raise InvalidInput("Invalid referral context.")

    referral_code = ReferralCode.objects.filter(code=code).first()
    if referral_code is None:
        raise NotFound("Referral code not found.")
    if not referral_code.is_active:
        raise Inactive("Referral code is not active.")
    if referral_code.is_expired:
        raise Inactive("Referral code has expired.")

    already_used = AlreadyUsed("Referral code has already been used by this user.")
    if ReferralUsage.objects.filter(user=user, referral_code=referral_code).exists():
        raise already_used

    try:
        with transaction.atomic():
            usage = ReferralUsage.objects.create(user=user, referral_code=referral_code, context=context)
    except IntegrityError as exc:
        raise already_used from exc

    logger.info("User %s applied referral code %s for %s", user.pk, referral_code.id, context)
    return usage, referral_code.discount_percentage


UPDATABLE_FIELDS = ("discount_percentage", "commission_percentage", "expiry_date", "is_active")


def update_referral_code(referral_code_id, **changes) -> ReferralCode:
    """Change the terms of a code. Codes and owners are fixed once created."""
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidInput(f"Cannot update: {', '.join(sorted(unknown))}.")
    for field in ("discount_percentage", "commission_percentage"):
        value = changes.get(field)
        if value is not None and not 0 <= value <= 100:
            raise InvalidInput(f"{field} must be between 0 and 100.")

    with transaction.atomic():
        referral_code = ReferralCode.objects.select_for_update().filter(pk=referral_code_id).first()
        if referral_code is None:
            raise NotFound("Referral code not found.")
        for field, value in changes.items():
            setattr(referral_code, field, value)
        referral_code.save(update_fields=[*changes, "updated_at"])

    logger.info("Referral code %s updated: %s", referral_code.id, ", ".join(sorted(changes)) or "no changes")
    return referral_code


def delete_referral_code(referral_code_id) -> None:
    referral_code = ReferralCode.objects.filter(pk=referral_code_id).first()
    if referral_code is None:
        raise NotFound("Referral code not found.")
    try:
        with transaction.atomic():
            referral_code.delete()
    except IntegrityError as exc:
        raise Conflict("Referral code has bookings, purchases or commissions and cannot be deleted.") from exc

    logger.info("Referral code %s deleted", referral_code_id)
