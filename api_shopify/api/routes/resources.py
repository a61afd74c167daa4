"""
Route definitions.

The specific shop routes are declared before the generic operation route,
aiohttp matches them in declaration order.
"""

from aiohttp import web

from ..handlers import (
    handle_definitions,
    handle_list_all,
    handle_metafield_delete_all,
    handle_metafield_update_all,
    handle_operation,
    handle_shop_test,
    handle_subscribe,
    handle_swagger,
    handle_webhook,
)

routes = web.RouteTableDef()


@routes.get(r"/api/{shop}/definitions/", name="definitions")
async def definitions(request):
    """Get the operations served by the generic route."""
    return await handle_definitions(request)


@routes.get(r"/api/swagger/", name="swagger")
async def swagger(request):
    """Get the OpenAPI documentation of the operations."""
    return await handle_swagger(request)


@routes.get(r"/api/{shop}/test/", name="test")
async def shop_test(request):
    """Check that the shop token works."""
    return await handle_shop_test(request)


@routes.get(r"/api/{shop}/metafield/deleteAll/", name="metafield_delete_all")
async def metafield_delete_all(request):
    return await handle_metafield_delete_all(request)


@routes.get(r"/api/{shop}/metafield/updateAll/", name="metafield_update_all")
async def metafield_update_all(request):
    return await handle_metafield_update_all(request)


@routes.get(r"/api/{shop}/{resource}/listAll/", name="list_all")
async def list_all(request):
    """Get all items of a resource at once without pagination."""
    return await handle_list_all(request)


@routes.post(r"/api/{shop}/webhooks/subscribe/", name="subscribe")
async def subscribe(request):
    """Subscribe the webhooks of a shop."""
    return await handle_subscribe(request)


@routes.get(r"/api/{shop}/{resource}/{method}/", name="operation")
async def operation(request):
    """Call a remote operation with the arguments of the json query string."""
    return await handle_operation(request)


@routes.post(r"/webhook/{app_name}/{resource}/{action}", name="webhook")
async def webhook(request):
    """Receive a webhook."""
    return await handle_webhook(request)
