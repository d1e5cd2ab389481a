"""
Notification Use Cases

Trial banner visibility and dismissals.
"""

from .conversion_success_use_cases import (
    DismissConversionSuccessUseCase,
    ShowConversionSuccessUseCase,
)
from .dismiss_notification_use_case import DismissNotificationUseCase
from .dtos import ConversionSuccessResponse, DismissNotificationResponse, NotificationsResponse
from .get_notifications_use_case import GetNotificationsUseCase

__all__ = [
    "GetNotificationsUseCase",
    "DismissNotificationUseCase",
    "ShowConversionSuccessUseCase",
    "DismissConversionSuccessUseCase",
    "NotificationsResponse",
    "DismissNotificationResponse",
    "ConversionSuccessResponse",
]
