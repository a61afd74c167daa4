"""
Exception handling for the core module.

The core raises plain exceptions (configuration, validation and remote
failures). The API layer turns them into JSON error responses with
`handle_exception`, which also reports them to Sentry.
"""

import json

import sentry_sdk
from aiohttp import web


class ConfigurationError(Exception):
    """A required setup option is missing"""


class ValidationError(Exception):
    """A required argument is missing from a JSON query payload, or has the wrong type"""

    def __init__(self, arg_name: str, message: str | None = None) -> None:
        self.arg_name = arg_name
        super().__init__(message or f"Arg {arg_name} is required!")


class RemoteApiError(Exception):
    """A call to the remote admin API failed"""

    def __init__(self, message: str, status: int | None = None, detail=None) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


class QueryException(web.HTTPException):
    """Re-raise an exception from the remote API as aiohttp exception"""

    def __init__(self, status, error_code, title, detail) -> None:
        self.status_code = status
        error_body = {"errors": [{"code": error_code, "title": title, "detail": detail}]}
        super().__init__(content_type="application/json", text=json.dumps(error_body))


def handle_exception(status: int, title: str, detail: str | dict, shop: str | None = None):
    """Handle exceptions with Sentry integration."""
    event_id = None
    e = Exception(detail)
    if sentry_sdk.get_client().is_active():
        with sentry_sdk.new_scope() as scope:
            sentry_tags: dict = {
                "status": status,
                "title": title,
                "detail": detail,
            }
            if shop:
                sentry_tags["shop"] = shop
            scope.set_tags(sentry_tags)
            event_id = sentry_sdk.capture_exception(e)
    raise QueryException(status, event_id, title, detail)


def handle_remote_error(error: RemoteApiError, shop: str | None = None):
    """Map a remote failure to a client error when the remote blamed the request."""
    status = error.status if error.status and 400 <= error.status < 500 else 502
    detail = error.detail if error.detail is not None else str(error)
    handle_exception(status, "Remote API error", detail, shop)
