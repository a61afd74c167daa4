import asyncio
import re

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer
from aioresponses import aioresponses

from api_shopify import config
from api_shopify.app import app_factory
from api_shopify.core.exceptions import RemoteApiError

SHOP = "test-shop"
TOKEN = "shpat_test"
SHOPIFY_ENDPOINT = "https://{shop}.example.com/admin/api/{version}"
BASE_URL = "https://test-shop.example.com/admin/api/2024-10"
WEBHOOK_ADDRESS = "https://hooks.example.com"


def remote_url(path: str) -> re.Pattern:
    """Match a remote admin API path, whatever the query string."""
    return re.compile(rf"^{re.escape(BASE_URL)}/{re.escape(path)}\.json(\?.*)?$")


class FakeResource:
    """In-memory resource handle with a deterministic content per page."""

    def __init__(self, total: int, delays: dict | None = None, fail_page=None):
        self.total = total
        self.delays = delays or {}
        self.fail_page = fail_page
        self.calls = []

    async def count(self) -> int:
        return self.total

    async def list(self, params: dict | None = None) -> list[dict]:
        page = params["page"]
        self.calls.append(params)
        await asyncio.sleep(self.delays.get(page, 0))
        if page == self.fail_page:
            raise RemoteApiError(f"page {page} failed", status=500)
        start = (page - 1) * params["limit"]
        stop = min(start + params["limit"], self.total)
        return [{"id": i} for i in range(start, stop)]


@pytest.fixture(autouse=True)
def setup():
    config.override(
        SHOPIFY_ENDPOINT=SHOPIFY_ENDPOINT,
        WEBHOOK_ADDRESS=WEBHOOK_ADDRESS,
        WEBHOOK_TOPICS=[],
        DISABLE_WEBHOOKS_SUBSCRIPTION=False,
        SHOPIFY_API_SECRET="",
        PAGE_SIZE=250,
        CONCURRENCY_LIMIT=10,
    )


@pytest.fixture
def rmock():
    # passthrough for local requests (aiohttp TestServer)
    with aioresponses(passthrough=["http://127.0.0.1"]) as m:
        yield m


@pytest_asyncio.fixture
async def fake_client():
    app = await app_factory()
    async with TestClient(TestServer(app)) as client:
        yield client


@pytest.fixture
def headers():
    return {"X-Shopify-Access-Token": TOKEN}
