"""
Webhook-related request handlers.
"""

import json
import logging

from aiohttp import web

from api_shopify import config
from api_shopify.core.exceptions import ConfigurationError, handle_exception
from api_shopify.core.receiver import WebhookVerificationError, verify_hmac
from api_shopify.core.webhooks import TOPICS, Shop, WebhookOptions, subscribe

from .resource_handlers import _get_client

logger = logging.getLogger(__name__)


async def handle_subscribe(request):
    """Handle the subscription of the webhooks of one shop.

    The body may hold a `topics` list, the configured topics are used otherwise.
    """
    client = _get_client(request)
    try:
        body = await request.json() if request.can_read_body else {}
    except ValueError:
        raise web.HTTPBadRequest(text="Body is not valid JSON")
    overrides = {}
    if isinstance(body, dict) and body.get("topics"):
        overrides["topics"] = body["topics"]
    options = WebhookOptions.from_config(**overrides)
    try:
        results = await subscribe(options, [Shop(client.shop_name, client)])
    except ConfigurationError as e:
        handle_exception(400, "Invalid webhook configuration", str(e), client.shop_name)
    if options.disabled:
        return web.json_response({"status": "webhook subscription disabled", "outcomes": []})
    outcomes = results[client.shop_name]
    return web.json_response(
        {
            "status": "partial" if any(o.status == "failed" for o in outcomes) else "ok",
            "outcomes": [outcome.as_dict() for outcome in outcomes],
        }
    )


async def handle_webhook(request):
    """Handle a webhook delivered by the remote platform."""
    topic = f"{request.match_info['resource']}/{request.match_info['action']}"
    if request.match_info["app_name"] != config.APP_NAME or topic not in TOPICS:
        raise web.HTTPNotFound()
    body = await request.read()
    if config.SHOPIFY_API_SECRET:
        try:
            verify_hmac(body, request.headers.get("X-Shopify-Hmac-Sha256"), config.SHOPIFY_API_SECRET)
        except WebhookVerificationError as e:
            logger.warning(f"webhook {topic} rejected: {e}")
            raise web.HTTPUnauthorized(text=str(e))
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        raise web.HTTPBadRequest(text="Webhook body is not valid JSON")
    await request.app["webhook_controller"].dispatch(
        topic, request.headers.get("X-Shopify-Shop-Domain"), payload
    )
    return web.json_response({"topic": topic, "status": "received"})
