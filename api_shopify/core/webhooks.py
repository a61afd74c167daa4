"""
Webhook subscription reconciliation.

The desired topics are compared with the subscriptions which already exist on
the remote shop: existing ones are updated, missing ones are created, so that
running the subscription twice never creates duplicates.

Only one app instance can receive the webhooks of a topic for a shop, so
several instances subscribing with different addresses overwrite each other.
Two concurrent `sync` calls with overlapping topics for the same shop race,
the remote platform keeps at most one subscription per topic.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Protocol

from .. import config
from .exceptions import ConfigurationError, RemoteApiError
from .pool import gather_bounded

logger = logging.getLogger(__name__)

TOPICS = [
    "carts/create",
    "carts/update",
    "checkouts/create",
    "checkouts/delete",
    "checkouts/update",
    "collections/create",
    "collections/delete",
    "collections/update",
    "collection_listings/add",
    "collection_listings/remove",
    "collection_listings/update",
    "customers/create",
    "customers/delete",
    "customers/disable",
    "customers/enable",
    "customers/update",
    "customer_groups/create",
    "customer_groups/delete",
    "customer_groups/update",
    "draft_orders/create",
    "draft_orders/delete",
    "draft_orders/update",
    "fulfillments/create",
    "fulfillments/update",
    "fulfillment_events/create",
    "fulfillment_events/delete",
    "orders/cancelled",
    "orders/create",
    "orders/delete",
    "orders/fulfilled",
    "orders/paid",
    "orders/partially_fulfilled",
    "orders/updated",
    "order_transactions/create",
    "products/create",
    "products/delete",
    "products/update",
    "product_listings/add",
    "product_listings/remove",
    "product_listings/update",
    "refunds/create",
    "app/uninstalled",
    "shop/update",
    "themes/create",
    "themes/delete",
    "themes/publish",
    "themes/update",
]

# these need the sales channel capability, they are reported but never subscribed
SALES_CHANNEL_NAMESPACES = ("collection_listings", "product_listings")


class WebhookResource(Protocol):
    async def list(self, params: dict | None = None) -> list[dict]: ...

    async def create(self, params: dict) -> dict: ...

    async def update(self, id, params: dict) -> dict: ...


@dataclass(frozen=True)
class WebhookDescriptor:
    topic: str
    address: str
    format: str = "json"
    id: Any = None

    def params(self) -> dict:
        params = {"topic": self.topic, "address": self.address, "format": self.format}
        if self.id is not None:
            params["id"] = self.id
        return params


@dataclass(frozen=True)
class ReconciliationItem:
    descriptor: WebhookDescriptor
    needs_update: bool
    requires_unsupported_capability: bool

    @property
    def topic(self) -> str:
        return self.descriptor.topic


@dataclass(frozen=True)
class Outcome:
    topic: str

    @property
    def status(self) -> str:
        return type(self).__name__.lower()

    def as_dict(self) -> dict:
        return {"topic": self.topic, "status": self.status}


@dataclass(frozen=True)
class Skipped(Outcome):
    pass


@dataclass(frozen=True)
class Created(Outcome):
    id: Any = None

    def as_dict(self) -> dict:
        return super().as_dict() | {"id": self.id}


@dataclass(frozen=True)
class Updated(Outcome):
    id: Any = None

    def as_dict(self) -> dict:
        return super().as_dict() | {"id": self.id}


@dataclass(frozen=True)
class Failed(Outcome):
    error: Exception | None = None

    def as_dict(self) -> dict:
        return super().as_dict() | {"error": str(self.error)}


def callback_address(address: str, app_name: str, topic: str) -> str:
    return f"{address}/webhook/{app_name}/{topic}"


def requires_sales_channel(topic: str) -> bool:
    return topic.split("/")[0] in SALES_CHANNEL_NAMESPACES


def diff_webhooks(
    topics: list[str], existing: list[dict], app_name: str, address: str
) -> list[ReconciliationItem]:
    """Classify each desired topic as create, update or skip, in input order."""
    items = []
    for topic in topics:
        descriptor = WebhookDescriptor(
            topic=topic, address=callback_address(address, app_name, topic)
        )
        matches = [webhook for webhook in existing if webhook.get("topic") == topic]
        if len(matches) > 1:
            logger.warning(
                f"{len(matches)} existing webhooks for topic {topic}, using the last one"
            )
        if matches:
            descriptor = replace(descriptor, id=matches[-1]["id"])
        items.append(
            ReconciliationItem(
                descriptor=descriptor,
                needs_update=bool(matches),
                requires_unsupported_capability=requires_sales_channel(topic),
            )
        )
    return items


class WebhookSyncExecutor:
    """Applies reconciliation items to the remote, one failure never stops the others."""

    def __init__(self, webhooks: WebhookResource, limit: int | None = None):
        self.webhooks = webhooks
        self.limit = limit or config.CONCURRENCY_LIMIT

    async def sync(self, items: list[ReconciliationItem]) -> list[Outcome]:
        return await gather_bounded(
            [lambda item=item: self._apply(item) for item in items], self.limit
        )

    async def _apply(self, item: ReconciliationItem) -> Outcome:
        descriptor = item.descriptor
        if item.requires_unsupported_capability:
            logger.debug(f"ignore webhook because it needs the sales channel: {item.topic}")
            return Skipped(item.topic)
        try:
            if item.needs_update:
                logger.debug(f"update webhook: {item.topic}")
                webhook = await self.webhooks.update(descriptor.id, descriptor.params())
                return Updated(item.topic, id=webhook.get("id", descriptor.id))
            logger.debug(f"create webhook: {item.topic}")
            webhook = await self.webhooks.create(descriptor.params())
            return Created(item.topic, id=webhook.get("id"))
        except RemoteApiError as e:
            action = "update" if item.needs_update else "create"
            logger.error(f"error on {action} webhook {item.topic}: {e}")
            return Failed(item.topic, error=e)


@dataclass
class WebhookOptions:
    app_name: str | None = None
    address: str | None = None
    topics: list[str] = field(default_factory=list)
    disabled: bool = False
    limit: int | None = None

    @classmethod
    def from_config(cls, **kwargs) -> "WebhookOptions":
        options = {
            "app_name": config.APP_NAME,
            "address": config.WEBHOOK_ADDRESS,
            "topics": list(config.WEBHOOK_TOPICS or []),
            "disabled": bool(config.DISABLE_WEBHOOKS_SUBSCRIPTION),
            "limit": config.CONCURRENCY_LIMIT,
        }
        options.update(kwargs)
        return cls(**options)


@dataclass(frozen=True)
class Shop:
    name: str
    client: Any


async def reconcile_shop(shop: Shop, options: WebhookOptions) -> list[Outcome]:
    topics = options.topics or TOPICS
    try:
        existing = await shop.client.webhook.list()
    except RemoteApiError as e:
        logger.error(f"unable to list webhooks of {shop.name}: {e}")
        return [
            Skipped(topic) if requires_sales_channel(topic) else Failed(topic, error=e)
            for topic in topics
        ]
    items = diff_webhooks(topics, existing, options.app_name, options.address)
    return await WebhookSyncExecutor(shop.client.webhook, options.limit).sync(items)


async def subscribe(options: WebhookOptions, shops: list[Shop]) -> dict[str, list[Outcome]]:
    """
    Subscribe the webhooks of `options.topics` (all known topics when empty)
    for every shop, shops being reconciled concurrently.

    Returns the outcomes of each shop, keyed by shop name. Remote failures
    never raise, they are reported as `Failed` outcomes.
    """
    if options.disabled:
        logger.info("webhook subscription disabled")
        return {}
    if not options.app_name:
        raise ConfigurationError("app name string is required")
    if not options.address:
        raise ConfigurationError("address string is required")
    unknown = [topic for topic in options.topics if topic not in TOPICS]
    if unknown:
        raise ConfigurationError(f"unknown webhook topics: {', '.join(unknown)}")

    logger.info(f"subscribe webhooks for {len(shops)} shop(s)")
    results = await gather_bounded(
        [lambda shop=shop: reconcile_shop(shop, options) for shop in shops],
        options.limit or config.CONCURRENCY_LIMIT,
    )
    return {shop.name: outcomes for shop, outcomes in zip(shops, results)}
