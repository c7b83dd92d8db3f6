from __future__ import annotations

import logging
import re
import secrets
import string
from typing import Callable, Type

from django.db import models
from django.utils import timezone

from core.errors import GenerationExhausted

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits

PAYMENT_PREFIXES = {
    "booking": "PAY-BKG",
    "practice": "PAY-PRC",
}


def random_digits(length: int = 10) -> str:
    """Random number with exactly ``length`` digits (no leading zero)."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def random_suffix(length: int = 4) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def date_part() -> str:
    return timezone.localdate().strftime("%Y%m%d")


def service_type_slug(service_type: str | None) -> str:
    return re.sub(r"\s+", "-", (service_type or "unknown").strip().lower())


def booking_id(service_type: str | None) -> str:
    return f"Booking-{service_type_slug(service_type)}-{random_digits()}"


def payment_id(kind: str) -> str:
    return f"{PAYMENT_PREFIXES[kind]}-{date_part()}-{random_digits()}"


def referral_code_id() -> str:
    return f"REF-{date_part()}-{random_suffix()}"


def practice_purchase_id() -> str:
    return f"Purchase-{random_digits()}"


def generate_unique_id(
    model: Type[models.Model],
    build_candidate: Callable[[], str],
    *,
    max_attempts: int = MAX_ATTEMPTS,
) -> str:
    """
    Return a candidate primary key for ``model`` that is not yet taken.

    Nothing is reserved: the caller must insert within the same transaction,
    and the primary key constraint still rejects a concurrent duplicate.
    """
    for _ in range(max_attempts):
        candidate = build_candidate()
        if not model.objects.filter(pk=candidate).exists():
            return candidate
    logger.error("Exhausted %s attempts generating a %s id", max_attempts, model.__name__)
    raise GenerationExhausted(
        f"Failed to generate a unique {model.__name__} id after {max_attempts} attempts."
    )
