"""
Error taxonomy

Every error code returned by a use case belongs to exactly one kind. The API
layer maps kinds to HTTP statuses; the webhook endpoint uses them to decide
between "do not retry" (4xx) and "retry" (5xx).
"""

from enum import Enum


class ErrorKind(str, Enum):
    validation = "validation"
    permission_denied = "permission_denied"
    not_found = "not_found"
    conflict = "conflict"
    expired = "expired"
    signature_invalid = "signature_invalid"
    configuration = "configuration"
    transient = "transient"


ERROR_KINDS = {
    # Validation
    "INVALID_EMAIL": ErrorKind.validation,
    "INVALID_ROLE": ErrorKind.validation,
    "INVALID_INVITE_ID": ErrorKind.validation,
    "INVALID_ORGANIZATION_ID": ErrorKind.validation,
    "INVALID_NOTIFICATION_KIND": ErrorKind.validation,
    "MALFORMED_EVENT": ErrorKind.validation,
    # Permission
    "INSUFFICIENT_ROLE": ErrorKind.permission_denied,
    "EMAIL_MISMATCH": ErrorKind.permission_denied,
    # Not found (missing and cross-tenant look the same)
    "INVITE_NOT_FOUND": ErrorKind.not_found,
    "SUBSCRIPTION_NOT_FOUND": ErrorKind.not_found,
    # Conflict
    "INVITE_ALREADY_ACCEPTED": ErrorKind.conflict,
    "INVITE_ALREADY_PROCESSED": ErrorKind.conflict,
    "ALREADY_MEMBER": ErrorKind.conflict,
    "CONCURRENT_UPDATE": ErrorKind.conflict,
    # Expired
    "INVITE_EXPIRED": ErrorKind.expired,
    # Webhook trust boundary
    "SIGNATURE_INVALID": ErrorKind.signature_invalid,
    "WEBHOOK_SECRET_NOT_CONFIGURED": ErrorKind.configuration,
    # Store and ordering, retried by the caller
    "STORE_UNAVAILABLE": ErrorKind.transient,
    "SUBSCRIPTION_NOT_READY": ErrorKind.transient,
}


def kind_of(code: str) -> ErrorKind:
    """Kind for an error code; unknown codes are treated as transient (5xx)"""
    return ERROR_KINDS.get(code, ErrorKind.transient)
