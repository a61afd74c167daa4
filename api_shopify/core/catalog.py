"""
Default catalog of the remote operations served by the generic route.

Each resource maps its methods to their positional arguments, in call order,
as (name, is_optional) pairs.
"""

READ_METHODS = {
    "list": [("params", True)],
    "count": [("params", True)],
    "get": [("id", False), ("params", True)],
}

WRITE_METHODS = {
    "create": [("params", False)],
    "update": [("id", False), ("params", False)],
    "delete": [("id", False)],
}

CATALOG = {
    "product": READ_METHODS | WRITE_METHODS,
    "customer": READ_METHODS | WRITE_METHODS,
    "order": READ_METHODS | {"update": WRITE_METHODS["update"], "delete": WRITE_METHODS["delete"]},
    "draft_order": READ_METHODS | WRITE_METHODS,
    "smart_collection": READ_METHODS | WRITE_METHODS,
    "custom_collection": READ_METHODS | WRITE_METHODS,
    "metafield": READ_METHODS | WRITE_METHODS,
    "webhook": READ_METHODS | WRITE_METHODS,
    "theme": {
        "list": [("params", True)],
        "get": [("id", False), ("params", True)],
    },
}

# resources served by the listAll aggregation route
AGGREGATED_RESOURCES = ["product", "customer", "smart_collection", "custom_collection"]
