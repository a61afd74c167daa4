"""
Remote admin API client.

This module wraps the remote REST admin API behind one handle per resource
kind. Every failure, HTTP or network, is raised as `RemoteApiError`.
"""

import asyncio
import logging
from dataclasses import dataclass

import aiohttp
from aiohttp import ClientSession

from .. import config
from .exceptions import RemoteApiError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceKind:
    """How a resource kind is laid out on the remote API."""

    name: str
    path: str
    singular: str
    plural: str


RESOURCE_KINDS = {
    kind.name: kind
    for kind in [
        ResourceKind("product", "products", "product", "products"),
        ResourceKind("customer", "customers", "customer", "customers"),
        ResourceKind("order", "orders", "order", "orders"),
        ResourceKind("draft_order", "draft_orders", "draft_order", "draft_orders"),
        ResourceKind("smart_collection", "smart_collections", "smart_collection", "smart_collections"),
        ResourceKind("custom_collection", "custom_collections", "custom_collection", "custom_collections"),
        ResourceKind("metafield", "metafields", "metafield", "metafields"),
        ResourceKind("webhook", "webhooks", "webhook", "webhooks"),
        ResourceKind("theme", "themes", "theme", "themes"),
    ]
}


class ResourceHandle:
    """Calls for one resource kind of one shop."""

    def __init__(self, client: "ShopifyClient", kind: ResourceKind):
        self.client = client
        self.kind = kind

    async def count(self, params: dict | None = None) -> int:
        record = await self.client.request("GET", f"{self.kind.path}/count", params=params)
        return self.client.unwrap(record, "count", int)

    async def list(self, params: dict | None = None) -> list[dict]:
        record = await self.client.request("GET", self.kind.path, params=params)
        return self.client.unwrap(record, self.kind.plural, list)

    async def get(self, id, params: dict | None = None) -> dict:
        record = await self.client.request("GET", f"{self.kind.path}/{id}", params=params)
        return self.client.unwrap(record, self.kind.singular, dict)

    async def create(self, params: dict) -> dict:
        record = await self.client.request(
            "POST", self.kind.path, json={self.kind.singular: params}
        )
        return self.client.unwrap(record, self.kind.singular, dict)

    async def update(self, id, params: dict) -> dict:
        record = await self.client.request(
            "PUT", f"{self.kind.path}/{id}", json={self.kind.singular: params}
        )
        return self.client.unwrap(record, self.kind.singular, dict)

    async def delete(self, id) -> dict:
        return await self.client.request("DELETE", f"{self.kind.path}/{id}")


class ShopifyClient:
    """
    Admin API client for one shop, sharing the application's ClientSession.

    Usage:
        client = ShopifyClient(session, "my-shop", "shpat_xxxxx")
        count = await client.resource("product").count()
    """

    def __init__(self, session: ClientSession, shop_name: str, access_token: str):
        self.session = session
        self.shop_name = shop_name
        self.access_token = access_token
        self.base_url = config.SHOPIFY_ENDPOINT.format(
            shop=shop_name, version=config.SHOPIFY_API_VERSION
        ).rstrip("/")

    def resource(self, name: str) -> ResourceHandle:
        if name not in RESOURCE_KINDS:
            raise KeyError(f"Unknown resource kind: {name}")
        return ResourceHandle(self, RESOURCE_KINDS[name])

    @property
    def webhook(self) -> ResourceHandle:
        return self.resource("webhook")

    @property
    def metafield(self) -> ResourceHandle:
        return self.resource("metafield")

    async def get_shop(self) -> dict:
        record = await self.request("GET", "shop")
        return self.unwrap(record, "shop", dict)

    def unwrap(self, record, key: str, expected: type):
        """Get the value the admin API wraps under `key`, a malformed body is a remote failure."""
        if not isinstance(record, dict) or not isinstance(record.get(key), expected):
            raise RemoteApiError(
                f"unexpected response from {self.shop_name}: no {key} {expected.__name__}",
                detail=record,
            )
        return record[key]

    async def request(
        self, method: str, path: str, params: dict | None = None, json: dict | None = None
    ) -> dict:
        if params is not None and not isinstance(params, dict):
            raise ValidationError("params", "Arg params needs to be an object!")
        url = f"{self.base_url}/{path}.json"
        headers = {"X-Shopify-Access-Token": self.access_token, "Accept": "application/json"}
        logger.debug(f"{method} {url} params={params}")
        try:
            async with self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT),
            ) as res:
                if not res.ok:
                    detail = await self._error_detail(res)
                    raise RemoteApiError(
                        f"{method} {path} failed with status {res.status} on {self.shop_name}",
                        status=res.status,
                        detail=detail,
                    )
                if res.status == 204:
                    return {}
                try:
                    return await res.json()
                except ValueError as e:
                    raise RemoteApiError(
                        f"{method} {path} returned an invalid body on {self.shop_name}",
                        status=res.status,
                        detail=str(e),
                    ) from e
        except aiohttp.ClientError as e:
            raise RemoteApiError(f"{method} {path} failed on {self.shop_name}: {e}") from e
        except asyncio.TimeoutError as e:
            raise RemoteApiError(f"{method} {path} timed out on {self.shop_name}") from e

    @staticmethod
    async def _error_detail(res: aiohttp.ClientResponse):
        try:
            record = await res.json(content_type=None)
        except ValueError:
            return await res.text()
        # the admin API wraps its messages in an "errors" key
        if isinstance(record, dict) and "errors" in record:
            return record["errors"]
        return record
