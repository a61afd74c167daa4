"""
Bulk metafield operations, one remote call per metafield.

Unlike the webhook sync, any failure fails the whole call.
"""

from .. import config
from .client import ShopifyClient
from .pool import gather_bounded

METAFIELD_UPDATE_FIELDS = ["id", "value", "value_type"]


async def delete_all(client: ShopifyClient, ids: list, limit: int | None = None) -> list:
    return await gather_bounded(
        [lambda id=id: client.metafield.delete(id) for id in ids],
        limit or config.CONCURRENCY_LIMIT,
    )


async def update_all(client: ShopifyClient, metafields: list[dict], limit: int | None = None) -> list:
    def _update(metafield: dict):
        params = {key: metafield.get(key) for key in METAFIELD_UPDATE_FIELDS}
        return client.metafield.update(metafield["id"], params)

    return await gather_bounded(
        [lambda metafield=metafield: _update(metafield) for metafield in metafields],
        limit or config.CONCURRENCY_LIMIT,
    )
