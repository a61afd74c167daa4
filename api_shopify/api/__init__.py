"""
API module for api_shopify.

This module contains the API layer that handles HTTP requests and responses.
It uses the core module for the remote calls and exposes REST endpoints.
"""

from .app import app_factory

__all__ = ["app_factory"]
