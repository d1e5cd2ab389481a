"""
Billing Webhook Route

Authentication is the HMAC signature over the raw body, not a user JWT.
Status codes drive the provider's retry policy: 2xx acknowledges, 4xx means
"do not retry", 5xx means "retry later".
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from tenant_lifecycle.app.services.clock import Clock
from tenant_lifecycle.app.services.unit_of_work import UnitOfWork
from tenant_lifecycle.app.use_cases.billing import ProcessWebhookUseCase
from tenant_lifecycle.depends import get_clock, get_config, get_unit_of_work
from tenant_lifecycle.domain.errors import ErrorKind, kind_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

CLIENT_KINDS = (ErrorKind.signature_invalid, ErrorKind.validation)


@router.post("/billing", status_code=status.HTTP_200_OK)
async def billing_webhook(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
    config=Depends(get_config),
):
    """
    Billing Webhook

    Responses:
        - 200 OK: {received, event_id, event_type, outcome}
        - 400 Bad Request: SIGNATURE_INVALID, MALFORMED_EVENT
        - 500 Internal Server Error: WEBHOOK_SECRET_NOT_CONFIGURED, SUBSCRIPTION_NOT_READY,
          store failures
    """
    # Signature covers the exact bytes received
    raw_body = await request.body()
    signature_header = request.headers.get(config.WEBHOOK_SIGNATURE_HEADER)

    use_case = ProcessWebhookUseCase(
        uow,
        clock,
        secret=config.WEBHOOK_SECRET,
        tolerance_seconds=config.WEBHOOK_TOLERANCE_SECONDS,
        trial_length=timedelta(days=config.TRIAL_LENGTH_DAYS),
    )
    result = await use_case.execute(raw_body, signature_header)

    if result.is_ok():
        return result.value

    error = result.error
    if kind_of(error.code) in CLIENT_KINDS:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": error.code, "details": (error.details or {}).get("reason")},
        )

    logger.error(f"Webhook processing failed: {error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": error.code},
    )
