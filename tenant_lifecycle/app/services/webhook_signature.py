"""
Webhook signature verification

Delegates to the Stripe SDK. The header has the form
``t=<unix seconds>,v1=<hex hmac>[,v1=...]`` and the signature covers
``"<t>." + raw body``, so the body must be passed through exactly as received.
"""

from typing import Optional

import stripe


class WebhookConfigurationError(Exception):
    """No webhook secret configured - server misconfiguration"""


def clean_secret(secret: Optional[str]) -> str:
    """Trim incidental whitespace (trailing newline from env files, etc.)"""
    return (secret or "").strip()


def verify_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    tolerance_seconds: int = 300,
) -> None:
    """
    Fail closed unless ``signature_header`` carries a valid signature of
    ``raw_body`` made with ``secret``.

    Timestamps older than ``tolerance_seconds`` (wall clock) are rejected;
    0 disables the check.

    Raises:
        WebhookConfigurationError: secret missing or blank
        stripe.SignatureVerificationError: header missing/malformed, stale, or mismatching
    """
    key = clean_secret(secret)
    if not key:
        raise WebhookConfigurationError("Webhook secret is not configured")

    if not signature_header or not signature_header.strip():
        raise stripe.SignatureVerificationError("Missing signature header", signature_header)

    try:
        payload = raw_body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise stripe.SignatureVerificationError(
            "Body is not valid UTF-8", signature_header
        ) from exc

    stripe.WebhookSignature.verify_header(
        payload, signature_header.strip(), key, tolerance=tolerance_seconds or None
    )
