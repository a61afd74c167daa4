import base64
import hashlib
import hmac
import json

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from api_shopify import config
from api_shopify.app import app_factory
from api_shopify.core.receiver import WebhookController
from api_shopify.core.url import external_url

from .conftest import BASE_URL, SHOP, WEBHOOK_ADDRESS, remote_url

pytestmark = pytest.mark.asyncio


async def test_health(fake_client):
    res = await fake_client.get("/health/")
    assert res.status == 200
    body = await res.json()
    assert body["status"] == "ok"
    assert body["operations"] > 0


async def test_definitions(fake_client):
    res = await fake_client.get(f"/api/{SHOP}/definitions/")
    assert res.status == 200
    body = await res.json()
    assert body["scopes"] == config.SCOPES
    update = body["api"]["product"]["update"]
    assert update["args"] == ["id", "params"]
    assert update["url"] == external_url(f"/api/{SHOP}/product/update/")


async def test_swagger(fake_client):
    res = await fake_client.get("/api/swagger/")
    assert res.status == 200
    assert "/api/{shop}/product/listAll/" in await res.text()


async def test_missing_token(fake_client):
    res = await fake_client.get(f"/api/{SHOP}/product/listAll/")
    assert res.status == 401
    body = await res.json()
    assert body["errors"][0]["detail"] == "Shopify Token not set"


async def test_shop_test(fake_client, rmock, headers):
    rmock.get(remote_url("shop"), payload={"shop": {"name": "Test shop"}})
    res = await fake_client.get(f"/api/{SHOP}/test/", headers=headers)
    assert res.status == 200
    assert await res.json() == {"name": "Test shop"}


async def test_list_all(fake_client, rmock, headers):
    config.override(PAGE_SIZE=2)
    rmock.get(remote_url("products/count"), payload={"count": 5})
    for page, ids in [(1, [1, 2]), (2, [3, 4]), (3, [5])]:
        rmock.get(
            f"{BASE_URL}/products.json?limit=2&page={page}",
            payload={"products": [{"id": i} for i in ids]},
        )
    res = await fake_client.get(f"/api/{SHOP}/product/listAll/", headers=headers)
    assert res.status == 200
    assert await res.json() == [{"id": i} for i in range(1, 6)]


async def test_list_all_page_failure(fake_client, rmock, headers):
    config.override(PAGE_SIZE=2)
    rmock.get(remote_url("products/count"), payload={"count": 3})
    rmock.get(f"{BASE_URL}/products.json?limit=2&page=1", payload={"products": [{"id": 1}]})
    rmock.get(f"{BASE_URL}/products.json?limit=2&page=2", status=500, payload={"errors": "oops"})
    res = await fake_client.get(f"/api/{SHOP}/product/listAll/", headers=headers)
    assert res.status == 502
    body = await res.json()
    assert body["errors"][0]["title"] == "Remote API error"


async def test_list_all_unknown_resource(fake_client, headers):
    res = await fake_client.get(f"/api/{SHOP}/theme/listAll/", headers=headers)
    assert res.status == 404


async def test_operation(fake_client, rmock, headers):
    rmock.get(remote_url("products/42"), payload={"product": {"id": 42, "title": "Hat"}})
    query = json.dumps({"params": {"fields": "id,title"}, "id": 42})
    res = await fake_client.get(
        f"/api/{SHOP}/product/get/", params={"json": query}, headers=headers
    )
    assert res.status == 200
    assert await res.json() == {"id": 42, "title": "Hat"}


async def test_operation_without_arguments(fake_client, rmock, headers):
    rmock.get(remote_url("orders/count"), payload={"count": 12})
    res = await fake_client.get(f"/api/{SHOP}/order/count/", headers=headers)
    assert res.status == 200
    assert await res.json() == 12


async def test_operation_missing_required_argument(fake_client, rmock, headers):
    query = json.dumps({"params": {"title": "x"}})
    res = await fake_client.get(
        f"/api/{SHOP}/product/update/", params={"json": query}, headers=headers
    )
    assert res.status == 400
    body = await res.json()
    assert body["errors"][0]["detail"] == "Arg id is required!"
    assert rmock.requests == {}


async def test_operation_non_object_params(fake_client, rmock, headers):
    res = await fake_client.get(
        f"/api/{SHOP}/product/list/", params={"json": '{"params": [1]}'}, headers=headers
    )
    assert res.status == 400
    body = await res.json()
    assert body["errors"][0]["detail"] == "Arg params needs to be an object!"
    assert rmock.requests == {}


async def test_operation_unknown(fake_client, headers):
    res = await fake_client.get(f"/api/{SHOP}/product/explode/", headers=headers)
    assert res.status == 404


async def test_operation_remote_client_error(fake_client, rmock, headers):
    rmock.get(remote_url("products/1"), status=404, payload={"errors": "Not Found"})
    res = await fake_client.get(
        f"/api/{SHOP}/product/get/", params={"json": '{"id": 1}'}, headers=headers
    )
    assert res.status == 404
    body = await res.json()
    assert body["errors"][0]["detail"] == "Not Found"


async def test_metafield_delete_all(fake_client, rmock, headers):
    rmock.delete(remote_url("metafields/1"), payload={})
    rmock.delete(remote_url("metafields/2"), payload={})
    res = await fake_client.get(
        f"/api/{SHOP}/metafield/deleteAll/", params={"json": '{"ids": [1, 2]}'}, headers=headers
    )
    assert res.status == 200
    assert await res.json() == [{}, {}]


@pytest.mark.parametrize(
    "route,query",
    [
        ("deleteAll", '{"ids": 1}'),
        ("deleteAll", "not json"),
        ("updateAll", '{"metafields": [{"value": "no id"}]}'),
        ("updateAll", "{}"),
    ],
)
async def test_metafield_bulk_invalid_query(fake_client, headers, route, query):
    res = await fake_client.get(
        f"/api/{SHOP}/metafield/{route}/", params={"json": query}, headers=headers
    )
    assert res.status == 400


async def test_subscribe(fake_client, rmock, headers):
    rmock.get(
        remote_url("webhooks"),
        payload={"webhooks": [{"id": 5, "topic": "orders/create"}]},
    )
    rmock.put(remote_url("webhooks/5"), payload={"webhook": {"id": 5}})
    rmock.post(remote_url("webhooks"), status=429, payload={"errors": "Too many requests"})
    res = await fake_client.post(
        f"/api/{SHOP}/webhooks/subscribe/",
        json={"topics": ["orders/create", "orders/paid", "product_listings/add"]},
        headers=headers,
    )
    assert res.status == 200
    body = await res.json()
    assert body["status"] == "partial"
    assert [(o["topic"], o["status"]) for o in body["outcomes"]] == [
        ("orders/create", "updated"),
        ("orders/paid", "failed"),
        ("product_listings/add", "skipped"),
    ]
    put_calls = [
        call for (method, _), calls in rmock.requests.items() if method == "PUT" for call in calls
    ]
    assert put_calls[0].kwargs["json"]["webhook"]["address"] == (
        f"{WEBHOOK_ADDRESS}/webhook/{config.APP_NAME}/orders/create"
    )


async def test_subscribe_disabled(fake_client, rmock, headers):
    config.override(DISABLE_WEBHOOKS_SUBSCRIPTION=True)
    res = await fake_client.post(f"/api/{SHOP}/webhooks/subscribe/", headers=headers)
    assert res.status == 200
    assert (await res.json())["outcomes"] == []
    assert rmock.requests == {}


async def test_subscribe_without_address(fake_client, rmock, headers):
    config.override(WEBHOOK_ADDRESS="")
    res = await fake_client.post(f"/api/{SHOP}/webhooks/subscribe/", headers=headers)
    assert res.status == 400
    assert rmock.requests == {}


@pytest.fixture
def received():
    return []


@pytest_asyncio.fixture
async def receiving_client(received):
    controller = WebhookController()

    @controller.on("orders/create")
    async def on_order(topic, shop_domain, payload):
        received.append((topic, shop_domain, payload))

    app = await app_factory(webhook_controller=controller)
    async with TestClient(TestServer(app)) as client:
        yield client


async def test_receive_webhook(receiving_client, received):
    res = await receiving_client.post(
        f"/webhook/{config.APP_NAME}/orders/create",
        json={"id": 1},
        headers={"X-Shopify-Shop-Domain": "test-shop.myshopify.com"},
    )
    assert res.status == 200
    assert await res.json() == {"topic": "orders/create", "status": "received"}
    assert received == [("orders/create", "test-shop.myshopify.com", {"id": 1})]


@pytest.mark.parametrize(
    "path",
    [
        "/webhook/other-app/orders/create",
        "/webhook/{app}/orders/unknown",
    ],
)
async def test_receive_webhook_not_found(receiving_client, path):
    res = await receiving_client.post(path.format(app=config.APP_NAME), json={})
    assert res.status == 404


async def test_receive_webhook_hmac(receiving_client, received):
    config.override(SHOPIFY_API_SECRET="secret")
    body = b'{"id": 2}'
    signature = base64.b64encode(hmac.new(b"secret", body, hashlib.sha256).digest()).decode()
    url = f"/webhook/{config.APP_NAME}/orders/create"

    res = await receiving_client.post(url, data=body, headers={"X-Shopify-Hmac-Sha256": "bad"})
    assert res.status == 401
    res = await receiving_client.post(url, data=body)
    assert res.status == 401
    res = await receiving_client.post(url, data=body, headers={"X-Shopify-Hmac-Sha256": signature})
    assert res.status == 200
    assert received[-1][2] == {"id": 2}


async def test_receive_webhook_non_ascii_hmac(receiving_client, received):
    config.override(SHOPIFY_API_SECRET="secret")
    res = await receiving_client.post(
        f"/webhook/{config.APP_NAME}/orders/create",
        data=b'{"id": 3}',
        headers={"X-Shopify-Hmac-Sha256": "cafÃ©"},
    )
    assert res.status == 401
    assert received == []
