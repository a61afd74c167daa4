"""
Request handlers for the API module.
"""

from .resource_handlers import (
    handle_definitions,
    handle_list_all,
    handle_metafield_delete_all,
    handle_metafield_update_all,
    handle_operation,
    handle_shop_test,
    handle_swagger,
)
from .webhook_handlers import handle_subscribe, handle_webhook

__all__ = [
    "handle_definitions",
    "handle_swagger",
    "handle_shop_test",
    "handle_list_all",
    "handle_metafield_delete_all",
    "handle_metafield_update_all",
    "handle_operation",
    "handle_subscribe",
    "handle_webhook",
]
