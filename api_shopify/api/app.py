"""
Main API application factory.

This module creates the aiohttp application with all routes and middleware.
"""

import logging
import os
from datetime import datetime, timezone

import aiohttp_cors
import sentry_sdk
from aiohttp import ClientSession, web
from aiohttp_swagger import setup_swagger

from api_shopify import config
from api_shopify.core.catalog import CATALOG
from api_shopify.core.health import check_health
from api_shopify.core.receiver import WebhookController
from api_shopify.core.registry import OperationRegistry
from api_shopify.core.sentry import get_sentry_kwargs
from api_shopify.core.swagger import build_swagger_dict
from api_shopify.core.version import get_app_version

from .routes.resources import routes as resource_routes

logger = logging.getLogger(__name__)

sentry_sdk.init(**get_sentry_kwargs())


async def health_handler(request):
    """Handle health check requests."""
    return await check_health(request)


async def app_factory(
    catalog: dict | None = None, webhook_controller: WebhookController | None = None
):
    """Create and configure the aiohttp application."""

    async def on_startup(app):
        app["csession"] = ClientSession()
        app["start_time"] = datetime.now(timezone.utc)
        app["app_version"] = await get_app_version()

    async def on_cleanup(app):
        await app["csession"].close()

    app = web.Application()
    app["registry"] = OperationRegistry.from_catalog(catalog or CATALOG)
    app["webhook_controller"] = webhook_controller or WebhookController()

    # Add all routes
    app.add_routes(resource_routes)

    # Add health route
    app.router.add_get("/health/", health_handler)

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    # Setup CORS
    cors = aiohttp_cors.setup(
        app,
        defaults={
            "*": aiohttp_cors.ResourceOptions(
                allow_credentials=True, expose_headers="*", allow_headers="*"
            )
        },
    )
    for route in list(app.router.routes()):
        cors.add(route)

    # Setup Swagger documentation
    setup_swagger(
        app,
        swagger_url=config.DOC_PATH,
        ui_version=3,
        swagger_info=build_swagger_dict(app["registry"]),
    )

    logger.info(f"{len(app['registry'])} remote operations served")
    return app


def run():
    """Run the application."""
    logging.basicConfig(level=logging.INFO)
    web.run_app(app_factory(), path=os.environ.get("SHOPIFY_PROXY_APP_SOCKET_PATH"))
