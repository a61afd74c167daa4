"""
Reception of the webhooks sent by the remote platform.

Handlers are registered per topic on a `WebhookController`; topics without a
handler fall back to the default handler, which only logs the delivery.
"""

import base64
import hashlib
import hmac
import logging
from typing import Any, Awaitable, Callable

from .webhooks import TOPICS

logger = logging.getLogger(__name__)

WebhookHandler = Callable[[str, str | None, Any], Awaitable[Any]]


class WebhookVerificationError(Exception):
    """Webhook signature verification failed"""


def verify_hmac(body: bytes, hmac_header: str | None, secret: str) -> None:
    """Check the base64 HMAC-SHA256 signature the platform sends along each webhook."""
    if not hmac_header:
        raise WebhookVerificationError("Missing HMAC header")
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    if not hmac.compare_digest(
        base64.b64encode(digest), hmac_header.encode("utf-8", "surrogateescape")
    ):
        raise WebhookVerificationError("Invalid HMAC signature")


async def log_webhook(topic: str, shop_domain: str | None, payload: Any) -> None:
    logger.info(f"webhook {topic} received from {shop_domain}")


class WebhookController:
    def __init__(self, default: WebhookHandler = log_webhook):
        self.handlers: dict[str, WebhookHandler] = {}
        self.default = default

    def on(self, topic: str) -> Callable[[WebhookHandler], WebhookHandler]:
        """Register a handler for a topic, usable as a decorator."""
        if topic not in TOPICS:
            raise ValueError(f"unknown webhook topic: {topic}")

        def decorator(func: WebhookHandler) -> WebhookHandler:
            self.handlers[topic] = func
            return func

        return decorator

    async def dispatch(self, topic: str, shop_domain: str | None, payload: Any) -> Any:
        handler = self.handlers.get(topic, self.default)
        return await handler(topic, shop_domain, payload)
