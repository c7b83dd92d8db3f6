"""
Domain errors raised by the service layer.

Every failure the booking, referral and payment services can report is one of
the subclasses below. Views never build error responses by hand for these:
``core.exceptions.service_exception_handler`` renders them with the status
code and machine-readable ``code`` declared on the class.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for all service-layer failures."""

    status_code = 400
    code = "error"
    default_message = "The request could not be processed."

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFound(ServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class Forbidden(ServiceError):
    status_code = 403
    code = "forbidden"
    default_message = "You do not have access to this resource."


class InvalidInput(ServiceError):
    code = "invalid_input"
    default_message = "Invalid input."


class Inactive(ServiceError):
    code = "inactive"
    default_message = "Resource is not active."


class InvalidServiceType(ServiceError):
    code = "invalid_service_type"
    default_message = "Mentoring service type is not bookable."


class InvalidParticipants(ServiceError):
    code = "invalid_participants"
    default_message = "Participants are only allowed for group sessions."


class CapacityExceeded(ServiceError):
    code = "capacity_exceeded"
    default_message = "The mentoring service is fully booked."


class DuplicateParticipant(ServiceError):
    code = "duplicate_participant"
    default_message = "Duplicate user in participant_ids."


class InvalidUser(ServiceError):
    code = "invalid_user"
    default_message = "One or more user ids are invalid."


class AlreadyUsed(ServiceError):
    code = "already_used"
    default_message = "Referral usage has already been used."


class MissingDate(ServiceError):
    code = "missing_date"
    default_message = "booking_date is required for this service type."


class InvalidDate(ServiceError):
    code = "invalid_date"
    default_message = "Invalid booking_date format. Use yyyy-mm-dd."


class Immutable(ServiceError):
    code = "immutable"
    default_message = "This record can no longer be changed."


class InvalidStatus(ServiceError):
    code = "invalid_status"
    default_message = "Invalid status."


class InsufficientBalance(ServiceError):
    code = "insufficient_balance"
    default_message = "Insufficient commission balance."


class InvalidSignature(ServiceError):
    code = "invalid_signature"
    default_message = "Invalid signature."


class Conflict(ServiceError):
    """A concurrent write won the race; the caller may retry the operation."""

    status_code = 409
    code = "conflict"
    default_message = "The request conflicted with a concurrent update. Please retry."


class RateLimited(ServiceError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many updates."


class GatewayError(ServiceError):
    status_code = 502
    code = "gateway_error"
    default_message = "Failed to create payment."


class GenerationExhausted(ServiceError):
    status_code = 503
    code = "generation_exhausted"
    default_message = "Failed to generate a unique identifier. Please retry."


class IntegrityViolation(ServiceError):
    """Internal consistency check failed; indicates a bug, never retried."""

    status_code = 500
    code = "integrity_violation"
    default_message = "Internal consistency check failed."
