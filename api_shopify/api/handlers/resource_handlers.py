"""
Resource-related request handlers.
"""

import logging

from aiohttp import web

from api_shopify import config
from api_shopify.core.binder import parse_json_object
from api_shopify.core.bulk import delete_all, update_all
from api_shopify.core.catalog import AGGREGATED_RESOURCES
from api_shopify.core.client import ShopifyClient
from api_shopify.core.exceptions import (
    QueryException,
    RemoteApiError,
    ValidationError,
    handle_exception,
    handle_remote_error,
)
from api_shopify.core.pagination import PaginatedAggregator
from api_shopify.core.swagger import build_swagger_file
from api_shopify.core.url import url_for

logger = logging.getLogger(__name__)


def _get_client(request) -> ShopifyClient:
    """Get a ShopifyClient for the shop of the request, using the shared session."""
    shop = request.match_info["shop"]
    access_token = request.headers.get("X-Shopify-Access-Token")
    if not access_token:
        raise QueryException(401, None, "Unauthorized", "Shopify Token not set")
    return ShopifyClient(request.app["csession"], shop, access_token)


def _get_json_list(request, key: str) -> list:
    payload = parse_json_object(request.query.get("json"))
    if not isinstance(payload.get(key), list):
        raise QueryException(
            400, None, "Invalid query string", f"{key} property required and needs to be an array"
        )
    return payload[key]


async def handle_definitions(request):
    """Handle the description of the operations served by the generic route."""
    shop = request.match_info["shop"]
    definitions = request.app["registry"].describe()
    for resource, methods in definitions.items():
        for method, definition in methods.items():
            definition["url"] = url_for(
                request, "operation", shop=shop, resource=resource, method=method, _external=True
            )
    return web.json_response({"api": definitions, "scopes": config.SCOPES})


async def handle_swagger(request):
    return web.Response(body=build_swagger_file(request.app["registry"]))


async def handle_shop_test(request):
    """Handle the check that the token of the shop works."""
    client = _get_client(request)
    try:
        shop = await client.get_shop()
    except RemoteApiError as e:
        handle_remote_error(e, client.shop_name)
    return web.json_response(shop)


async def handle_list_all(request):
    """Handle the aggregation of a whole resource collection."""
    resource = request.match_info["resource"]
    if resource not in AGGREGATED_RESOURCES:
        raise web.HTTPNotFound()
    client = _get_client(request)
    try:
        items = await PaginatedAggregator().aggregate(client.resource(resource))
    except RemoteApiError as e:
        handle_remote_error(e, client.shop_name)
    return web.json_response(items)


async def handle_metafield_delete_all(request):
    client = _get_client(request)
    ids = _get_json_list(request, "ids")
    try:
        results = await delete_all(client, ids)
    except RemoteApiError as e:
        handle_remote_error(e, client.shop_name)
    return web.json_response(results)


async def handle_metafield_update_all(request):
    client = _get_client(request)
    metafields = _get_json_list(request, "metafields")
    if not all(isinstance(metafield, dict) and "id" in metafield for metafield in metafields):
        raise QueryException(
            400, None, "Invalid query string", "every metafield needs an id property"
        )
    try:
        results = await update_all(client, metafields)
    except RemoteApiError as e:
        handle_remote_error(e, client.shop_name)
    return web.json_response(results)


async def handle_operation(request):
    """Handle a generic call, the arguments are bound from the json query string."""
    resource = request.match_info["resource"]
    method = request.match_info["method"]
    operation = request.app["registry"].get(resource, method)
    if operation is None:
        raise web.HTTPNotFound()
    client = _get_client(request)
    logger.debug(f"resource: {resource}, method: {method}")
    try:
        result = await operation.call(client, request.query.get("json"))
    except ValidationError as e:
        handle_exception(400, "Invalid arguments", str(e), client.shop_name)
    except RemoteApiError as e:
        handle_remote_error(e, client.shop_name)
    return web.json_response(result)
