"""Mini README: HTTP interface for the ledger engine.

Exports the FastAPI application factory that exposes ledger mutations and
aggregate queries as JSON endpoints.
"""

from .web_app import create_application

__all__ = ["create_application"]
