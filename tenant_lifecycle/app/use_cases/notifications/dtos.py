"""
Notification Use Case DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel

from tenant_lifecycle.app.use_cases.billing.dtos import TrialStatus


class NotificationsResponse(BaseModel):
    """Banners to render for the organization, with the trial projection behind them"""

    show_trial_countdown: bool
    show_trial_expired: bool
    show_conversion_success: bool
    trial: TrialStatus


class DismissNotificationResponse(BaseModel):
    kind: str
    dismissed_at: str


class ConversionSuccessResponse(BaseModel):
    show_conversion_success: bool
