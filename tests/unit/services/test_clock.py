from datetime import UTC, datetime, timedelta
from uuid import uuid4

from tenant_lifecycle.app.services.clock import SystemClock
from tenant_lifecycle.domain.base import utc_now
from tenant_lifecycle.domain.entities import AuditAction, AuditEvent, Subscription


def test_utc_now_is_naive_utc():
    now = utc_now()

    assert now.tzinfo is None
    assert abs(datetime.now(UTC).replace(tzinfo=None) - now) < timedelta(seconds=5)


def test_system_clock_matches_entity_timestamps():
    before = SystemClock().now()
    subscription = Subscription(organization_id=uuid4(), external_customer_ref="cus_x")
    audit = AuditEvent(action=AuditAction.invites_expired, affected_count=0)
    after = SystemClock().now()

    assert before.tzinfo is None
    assert before <= subscription.created_at <= after
    assert before <= audit.created_at <= after
