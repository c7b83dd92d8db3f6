"""
Duitku payment gateway bridge.

``create_gateway_payment`` registers an existing ``Payment`` with Duitku's
inquiry endpoint; ``process_gateway_callback`` verifies and applies the
result Duitku posts back. In stub mode no HTTP request is made and a
predictable local reference is returned instead.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

import requests
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.errors import GatewayError, InvalidInput, InvalidSignature, InvalidStatus, NotFound
from payments.models import Payment

logger = logging.getLogger(__name__)

SUCCESS_RESULT_CODE = "00"


@dataclass
class GatewayPaymentStub:
    """Stand-in for the inquiry response when the gateway is stubbed."""

    merchantCode: str
    reference: str
    paymentUrl: str
    amount: str
    statusCode: str = "00"
    statusMessage: str = "SUCCESS"

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


def _merchant_code() -> str:
    return getattr(settings, "DUITKU_MERCHANT_CODE", "") or ""


def _api_key() -> str:
    return getattr(settings, "DUITKU_API_KEY", "") or ""


def _should_use_stub() -> bool:
    if getattr(settings, "DUITKU_USE_STUB", False):
        return True
    return not (_merchant_code() and _api_key())


def _inquiry_url() -> str:
    if getattr(settings, "DUITKU_SANDBOX", True):
        return settings.DUITKU_SANDBOX_URL
    return settings.DUITKU_PRODUCTION_URL


def _md5(raw: str) -> str:
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def format_amount(amount: Decimal) -> str:
    """Duitku amounts are whole rupiah; fractional amounts are rejected."""
    value = Decimal(amount)
    if value != value.to_integral_value():
        raise InvalidInput(f"Payment amount {value} is not a whole rupiah amount.")
    return str(int(value))


def inquiry_signature(merchant_code: str, invoice_number: str, amount: str, api_key: str) -> str:
    return _md5(f"{merchant_code}{invoice_number}{amount}{api_key}")


def callback_signature(merchant_code: str, amount: str, merchant_order_id: str, api_key: str) -> str:
    return _md5(f"{merchant_code}{amount}{merchant_order_id}{api_key}")


def _invoice_number() -> str:
    return f"INV-{int(time.time() * 1000)}"


def _build_inquiry(payment: Payment, *, invoice_number: str, amount: str, payment_method: Optional[str], email: str, phone_number: str) -> Dict[str, Any]:
    merchant_code = _merchant_code()
    signature = inquiry_signature(merchant_code, invoice_number, amount, _api_key())
    payload: Dict[str, Any] = {
        "merchantCode": merchant_code,
        "paymentAmount": int(amount),
        "merchantOrderId": invoice_number,
        "productDetails": f"Pembayaran {payment.kind}",
        "email": email,
        "phoneNumber": phone_number,
        "returnUrl": f"{settings.FRONTEND_URL.rstrip('/')}/payment/success",
        "callbackUrl": f"{settings.BACKEND_URL.rstrip('/')}/api/payments/duitku/callback/",
        "signature": signature,
        "expiryPeriod": settings.DUITKU_EXPIRY_PERIOD,
    }
    if payment_method:
        payload["paymentMethod"] = payment_method
    return payload


def _stub_inquiry(payment: Payment, amount: str) -> Dict[str, Any]:
    reference = f"DSTUB-{uuid4().hex[:16].upper()}"
    preview_url = (
        f"{settings.FRONTEND_URL.rstrip('/')}/payments/preview?"
        f"payment={payment.pk}&amount={amount}&reference={reference}"
    )
    return GatewayPaymentStub(
        merchantCode=_merchant_code() or "STUB",
        reference=reference,
        paymentUrl=preview_url,
        amount=amount,
    ).as_dict()


def _post_inquiry(payload: Dict[str, Any]) -> Dict[str, Any]:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "x-duitku-merchantcode": payload["merchantCode"],
        "x-duitku-signature": payload["signature"],
    }
    try:
        response = requests.post(
            _inquiry_url(),
            json=payload,
            headers=headers,
            timeout=settings.DUITKU_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        logger.exception("Duitku inquiry for %s failed", payload["merchantOrderId"])
        raise GatewayError() from exc

    try:
        data = response.json()
    except ValueError:
        data = {}

    if response.status_code != 200 or not data.get("reference"):
        message = data.get("Message") or data.get("message") or data.get("statusMessage")
        logger.warning(
            "Duitku rejected inquiry %s (HTTP %s): %s",
            payload["merchantOrderId"],
            response.status_code,
            message,
        )
        raise GatewayError(message or None)
    return data


def create_gateway_payment(
    reference_id: str,
    *,
    payment_method: Optional[str] = None,
    email: str = "",
    phone_number: str = "",
) -> Dict[str, Any]:
    """Register ``Payment`` ``reference_id`` with the gateway and store its reference."""
    payment = Payment.objects.filter(pk=reference_id).first()
    if payment is None:
        raise NotFound("Payment not found.")

    amount = format_amount(payment.amount)
    if _should_use_stub():
        data = _stub_inquiry(payment, amount)
    else:
        payload = _build_inquiry(
            payment,
            invoice_number=_invoice_number(),
            amount=amount,
            payment_method=payment_method,
            email=email,
            phone_number=phone_number,
        )
        data = _post_inquiry(payload)

    payment.transaction_id = data["reference"]
    payment.status = Payment.PENDING
    update_fields = ["transaction_id", "status", "updated_at"]
    if payment_method:
        payment.payment_method = payment_method
        update_fields.append("payment_method")
    payment.save(update_fields=update_fields)

    logger.info("Payment %s registered with gateway as %s", payment.pk, payment.transaction_id)
    return data


def process_gateway_callback(payload: Mapping[str, Any]) -> int:
    """
    Verify a Duitku callback and settle the matching payments.

    Returns the number of payments updated. Nothing is written when the
    signature does not match.
    """
    merchant_code = str(payload.get("merchantCode") or "")
    amount = str(payload.get("amount") or "")
    merchant_order_id = str(payload.get("merchantOrderId") or "")
    supplied = str(payload.get("signature") or "")
    reference = str(payload.get("reference") or "")

    expected = callback_signature(merchant_code, amount, merchant_order_id, _api_key())
    if not supplied or not hmac.compare_digest(expected.encode(), supplied.lower().encode()):
        logger.warning("Rejected gateway callback for order %s: signature mismatch", merchant_order_id)
        raise InvalidSignature()

    new_status = Payment.CONFIRMED if payload.get("resultCode") == SUCCESS_RESULT_CODE else Payment.FAILED
    now = timezone.now()
    with transaction.atomic():
        updated = Payment.objects.filter(transaction_id=reference).update(
            status=new_status,
            payment_date=now,
            updated_at=now,
        )

    if updated != 1:
        logger.warning("Gateway callback reference %s matched %s payments", reference, updated)
    logger.info("Gateway callback for %s applied: %s", reference, new_status)
    return updated


def update_payment_status(payment_id: str, status: str, *, admin=None) -> Payment:
    if status not in dict(Payment.STATUSES):
        raise InvalidStatus("Invalid payment status.")

    with transaction.atomic():
        payment = Payment.objects.select_for_update().filter(pk=payment_id).first()
        if payment is None:
            raise NotFound("Payment not found.")
        payment.status = status
        if status == Payment.CONFIRMED and payment.payment_date is None:
            payment.payment_date = timezone.now()
        payment.save(update_fields=["status", "payment_date", "updated_at"])

    logger.info("Payment %s set to %s by admin %s", payment.pk, status, getattr(admin, "pk", None))
    return payment
