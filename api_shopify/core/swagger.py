import json

import yaml

from api_shopify.core.catalog import AGGREGATED_RESOURCES
from api_shopify.core.registry import Operation, OperationRegistry

SHOP_PARAMETER = {
    "name": "shop",
    "in": "path",
    "description": "Shop name, ie `my-shop` for my-shop.myshopify.com",
    "required": True,
    "schema": {"type": "string"},
}

TOKEN_PARAMETER = {
    "name": "X-Shopify-Access-Token",
    "in": "header",
    "description": "Admin API access token of the shop",
    "required": True,
    "schema": {"type": "string"},
}

ERROR_RESPONSES = {
    "400": {"description": "Invalid arguments"},
    "401": {"description": "Shopify Token not set"},
    "502": {"description": "Remote API error"},
}


def json_query_parameter(operation: Operation) -> dict:
    example = {arg.name: "..." for arg in operation.spec if not arg.is_optional}
    arguments = ", ".join(
        f"{arg.name}{' (optional)' if arg.is_optional else ''}" for arg in operation.spec
    )
    return {
        "name": "json",
        "in": "query",
        "description": f"JSON object with the arguments: {arguments or 'none'}",
        "required": any(not arg.is_optional for arg in operation.spec),
        "schema": {"type": "string"},
        "example": json.dumps(example),
    }


def operation_path(operation: Operation) -> dict:
    return {
        "get": {
            "summary": f"Call {operation.method} on {operation.resource}",
            "operationId": f"{operation.resource}_{operation.method}",
            "tags": [operation.resource],
            "parameters": [SHOP_PARAMETER, TOKEN_PARAMETER, json_query_parameter(operation)],
            "responses": {"200": {"description": "successful operation"}} | ERROR_RESPONSES,
        }
    }


def list_all_path(resource: str) -> dict:
    return {
        "get": {
            "summary": f"Get all {resource} items at once without pagination",
            "operationId": f"{resource}_listAll",
            "tags": [resource],
            "parameters": [SHOP_PARAMETER, TOKEN_PARAMETER],
            "responses": {
                "200": {
                    "description": "successful operation",
                    "content": {"application/json": {"schema": {"type": "array"}}},
                }
            }
            | ERROR_RESPONSES,
        }
    }


def build_swagger_dict(registry: OperationRegistry) -> dict:
    paths = {}
    for resource in AGGREGATED_RESOURCES:
        paths[f"/api/{{shop}}/{resource}/listAll/"] = list_all_path(resource)
    for operation in registry:
        paths[f"/api/{{shop}}/{operation.resource}/{operation.method}/"] = operation_path(
            operation
        )
    return {
        "openapi": "3.0.3",
        "info": {
            "title": "Shopify admin API",
            "description": "Call the admin REST API of a shop through a JSON query string.",
            "version": "1.0.0",
        },
        "paths": paths,
    }


def build_swagger_file(registry: OperationRegistry) -> str:
    return yaml.dump(build_swagger_dict(registry), allow_unicode=True)
