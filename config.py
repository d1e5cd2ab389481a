import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    DB_ECHO = bool(data.get("DB_ECHO", False))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Invites
    INVITE_TTL_DAYS = int(data.get("INVITE_TTL_DAYS", 7))
    INVITE_POLL_INTERVAL_SECONDS = int(data.get("INVITE_POLL_INTERVAL_SECONDS", 30))
    INVITE_POLL_JITTER_SECONDS = int(data.get("INVITE_POLL_JITTER_SECONDS", 5))
    EXPIRED_INVITE_RETENTION_DAYS = int(data.get("EXPIRED_INVITE_RETENTION_DAYS", 30))

    # Billing / trial
    TRIAL_LENGTH_DAYS = int(data.get("TRIAL_LENGTH_DAYS", 14))
    TRIAL_ENDING_WARNING_DAYS = int(data.get("TRIAL_ENDING_WARNING_DAYS", 2))
    NOTIFICATION_DISMISS_HOURS = int(data.get("NOTIFICATION_DISMISS_HOURS", 24))

    # Webhooks - no default secret, unsigned deliveries are always rejected
    WEBHOOK_SECRET = data.get("WEBHOOK_SECRET", os.environ.get("WEBHOOK_SECRET", ""))
    WEBHOOK_SIGNATURE_HEADER = data.get("WEBHOOK_SIGNATURE_HEADER", "Stripe-Signature")
    WEBHOOK_TOLERANCE_SECONDS = int(data.get("WEBHOOK_TOLERANCE_SECONDS", 300))
