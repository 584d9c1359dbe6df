from staffhub.client.base import APIResponse, BackendClient, raise_for_backend_error
from staffhub.client.query import QueryBuilder
from staffhub.client.auth import AuthClient

__all__ = ["APIResponse", "AuthClient", "BackendClient", "QueryBuilder", "raise_for_backend_error"]
