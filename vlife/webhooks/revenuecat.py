"""RevenueCat webhook endpoints.

RevenueCat posts subscription lifecycle events; each one is mirrored into the
subscriptions table (one row per user). app_user_id is the V-Life user id.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Header, Request
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from vlife.config.settings import settings
from vlife.core.errors import UnauthorizedError, ValidationFailedError
from vlife.db.models import Subscription
from vlife.db.session import get_session

router = APIRouter(prefix="/api/webhooks/revenuecat", tags=["webhooks", "revenuecat"])

ANONYMOUS_PREFIX = "$RCAnonymousID"

ACTIVE_EVENTS = {"INITIAL_PURCHASE", "RENEWAL", "UNCANCELLATION", "PRODUCT_CHANGE"}
CANCELLED_EVENTS = {"CANCELLATION", "EXPIRATION"}


class RevenueCatEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    id: str | None = None
    app_user_id: str | None = None
    product_id: str = ""
    environment: str | None = None
    expiration_at_ms: int | None = None
    price: float | None = None
    price_in_purchased_currency: float | None = None


class RevenueCatWebhookPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    api_version: str | None = None
    event: RevenueCatEvent


def plan_from_product_id(product_id: str) -> str:
    """Map a store product id to a plan tier."""
    if "elite" in product_id:
        return "elite"
    if "pro" in product_id:
        return "pro"
    return "free"


def status_from_event_type(event_type: str) -> str:
    """Map a RevenueCat event type to a subscription status."""
    if event_type in ACTIVE_EVENTS:
        return "active"
    if event_type in CANCELLED_EVENTS:
        return "cancelled"
    if event_type == "BILLING_ISSUE":
        return "past_due"
    return "active"


def _next_billing_date(expiration_at_ms: int | None) -> datetime | None:
    if not expiration_at_ms:
        return None
    return datetime.fromtimestamp(expiration_at_ms / 1000, tz=timezone.utc)


def upsert_subscription(session: Session, user_id: str, event: RevenueCatEvent) -> Subscription:
    """Create or update the user's subscription row from one event."""
    plan = plan_from_product_id(event.product_id)
    status = status_from_event_type(event.type)
    # Expired subscriptions fall back to the free tier regardless of product
    if event.type == "EXPIRATION":
        plan = "free"

    subscription = session.execute(select(Subscription).where(Subscription.user_id == user_id)).scalar_one_or_none()
    if subscription is None:
        subscription = Subscription(user_id=user_id)
        session.add(subscription)

    subscription.plan = plan
    subscription.status = status
    subscription.billing_cycle = "monthly"
    subscription.price = event.price_in_purchased_currency or event.price or 0.0
    subscription.next_billing_date = _next_billing_date(event.expiration_at_ms)
    subscription.updated_at = datetime.now(timezone.utc)
    session.flush()

    logger.info(
        "[REVENUECAT] Updated subscription",
        user_id=user_id,
        plan=plan,
        status=status,
        price=subscription.price,
        event_type=event.type,
    )
    return subscription


@router.post("")
async def revenuecat_webhook(request: Request, authorization: str | None = Header(default=None)):
    """Handle a RevenueCat webhook event.

    Raises:
        UnauthorizedError: Authorization header does not match REVENUECAT_WEBHOOK_AUTH
        ValidationFailedError: Payload is not a RevenueCat event
    """
    if settings.revenuecat_webhook_auth and authorization != settings.revenuecat_webhook_auth:
        logger.error("[REVENUECAT] Invalid webhook authorization")
        raise UnauthorizedError("Unauthorized")

    try:
        payload = RevenueCatWebhookPayload.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.warning(f"[REVENUECAT] Invalid webhook payload: {e}")
        raise ValidationFailedError("Invalid webhook payload") from e

    event = payload.event
    logger.info(
        "[REVENUECAT] Received event",
        event_type=event.type,
        app_user_id=event.app_user_id,
        product_id=event.product_id,
        environment=event.environment,
    )

    user_id = event.app_user_id
    if not user_id or user_id.startswith(ANONYMOUS_PREFIX):
        logger.info("[REVENUECAT] Skipping anonymous user event")
        return {"received": True, "skipped": True}

    with get_session() as session:
        upsert_subscription(session, user_id, event)

    return {"received": True, "processed": True}


@router.get("")
def revenuecat_webhook_check():
    """Some senders probe the endpoint with a GET before posting."""
    return {"status": "ok", "service": "revenuecat-webhook"}
