"""
Registry of the remote operations callable through the generic route.

It is built once at startup from the operation catalog, so the argument
binder and the dispatcher share one validated source of truth.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from .binder import Argument, ArgumentSpec, bind_arguments
from .client import RESOURCE_KINDS, ResourceHandle, ShopifyClient
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

OPERATION_METHODS = ["list", "count", "get", "create", "update", "delete"]


@dataclass(frozen=True)
class Operation:
    resource: str
    method: str
    spec: ArgumentSpec
    handler: Callable[..., Awaitable[Any]]

    @property
    def id(self) -> str:
        return f"{self.resource}.{self.method}"

    async def invoke(self, client: ShopifyClient, args: list) -> Any:
        return await self.handler(client.resource(self.resource), *args)

    async def call(self, client: ShopifyClient, json_text: str | None) -> Any:
        """Bind the JSON query string, then forward the arguments positionally."""
        return await self.invoke(client, bind_arguments(json_text, self.spec))

    def describe(self) -> dict:
        return {
            "args": [arg.name for arg in self.spec],
            "parsedArgs": [
                {"name": arg.name, "isOptional": arg.is_optional} for arg in self.spec
            ],
        }


class OperationRegistry:
    def __init__(self, operations: list[Operation]):
        self.operations = {operation.id: operation for operation in operations}

    @classmethod
    def from_catalog(cls, catalog: dict) -> "OperationRegistry":
        operations = []
        for resource, methods in catalog.items():
            if resource not in RESOURCE_KINDS:
                raise ConfigurationError(f"unknown resource in catalog: {resource}")
            for method, args in methods.items():
                if method not in OPERATION_METHODS:
                    raise ConfigurationError(f"unknown method in catalog: {resource}.{method}")
                spec = tuple(Argument(name, is_optional) for name, is_optional in args)
                operations.append(
                    Operation(resource, method, spec, getattr(ResourceHandle, method))
                )
        logger.debug(f"{len(operations)} operations registered")
        return cls(operations)

    def get(self, resource: str, method: str) -> Operation | None:
        return self.operations.get(f"{resource}.{method}")

    def __iter__(self):
        return iter(self.operations.values())

    def __len__(self):
        return len(self.operations)

    def describe(self) -> dict:
        definitions: dict = {}
        for operation in self:
            definitions.setdefault(operation.resource, {})[operation.method] = operation.describe()
        return definitions
