# preference_center/customerio/translator.py
"""
Conversions between Customer.io's subscription-preference shapes and the
simplified model the preferences form works with.
"""

from typing import Any, Dict, Optional

from preference_center.api.schemas import (
    DEFAULT_SUBTITLE,
    DEFAULT_TITLE,
    Customer,
    Header,
    Preferences,
    PreferencesView,
    Topic,
    UpdateRequest,
)

TOPIC_KEY_PREFIX = "topic_"
SUBSCRIPTION_PREFERENCES_TRAIT = "cio_subscription_preferences"


class MalformedVendorResponse(ValueError):
    """The vendor answered successfully but without the expected structure."""


def topic_key(topic_id: int) -> str:
    return f"{TOPIC_KEY_PREFIX}{topic_id}"


def to_preferences_view(payload: Dict[str, Any], customer_id: Optional[str] = None) -> PreferencesView:
    customer = payload.get("customer") if isinstance(payload, dict) else None
    if not isinstance(customer, dict):
        raise MalformedVendorResponse("Subscription preferences response has no customer block")

    identifiers = customer.get("identifiers") or {}
    header = customer.get("header") or {}
    raw_id = customer.get("id")

    return PreferencesView(
        customer=Customer(
            id=str(raw_id) if raw_id is not None else (customer_id or ""),
            email=identifiers.get("email"),
            globally_unsubscribed=bool(customer.get("unsubscribed", False)),
        ),
        preferences=Preferences(
            header=Header(
                title=header.get("title") or DEFAULT_TITLE,
                subtitle=header.get("subtitle") or DEFAULT_SUBTITLE,
            ),
            topics=[
                Topic(
                    id=topic["id"],
                    name=topic.get("name", ""),
                    description=topic.get("description"),
                    subscribed=bool(topic.get("subscribed", False)),
                )
                for topic in customer.get("topics") or []
            ],
        ),
    )


def to_identify_payload(customer_id: str, update: UpdateRequest) -> Dict[str, Any]:
    topics = {topic_key(topic.id): topic.subscribed for topic in update.topics}
    traits: Dict[str, Any] = {SUBSCRIPTION_PREFERENCES_TRAIT: {"topics": topics}}
    # The global flag is only ever set here, never cleared.
    if update.globally_unsubscribed:
        traits["unsubscribed"] = True
    return {"userId": customer_id, "traits": traits}
