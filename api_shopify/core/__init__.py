"""
Core module for api_shopify.

This module contains the core logic separated from the API layer: the remote
client, the pagination aggregator, the webhook reconciliation and the
argument binder.
"""

from .binder import Argument, bind_arguments
from .client import ShopifyClient
from .exceptions import (
    ConfigurationError,
    QueryException,
    RemoteApiError,
    ValidationError,
    handle_exception,
)
from .pagination import PaginatedAggregator
from .registry import OperationRegistry
from .webhooks import WebhookOptions, WebhookSyncExecutor, diff_webhooks, subscribe

__all__ = [
    "Argument",
    "bind_arguments",
    "ShopifyClient",
    "PaginatedAggregator",
    "OperationRegistry",
    "WebhookOptions",
    "WebhookSyncExecutor",
    "diff_webhooks",
    "subscribe",
    "ConfigurationError",
    "QueryException",
    "RemoteApiError",
    "ValidationError",
    "handle_exception",
]
