"""
Hosted backend client.

A single configured handle to the hosted database/identity platform
(PostgREST-style table API + GoTrue-style auth API). Constructed explicitly
at startup and injected into repositories and services; it holds no state
beyond its URL, key and HTTP connection pool.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

import httpx

from staffhub.core.exceptions import (
    AlreadyExistsError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

KeyRole = Literal["anon", "service"]
Params = Union[Dict[str, Any], List[Tuple[str, Any]]]

# Backend error codes that carry a meaning of their own
NOT_FOUND_CODES = {"PGRST116", "user_not_found"}
CONFLICT_CODES = {"23505", "user_already_exists", "email_exists"}
BAD_CREDENTIALS_CODES = {"invalid_credentials", "invalid_grant"}


@dataclass
class APIResponse:
    """Result of a backend call: rows (or object) plus exact count when requested."""
    data: Any = None
    count: Optional[int] = None


def _error_payload(response: httpx.Response) -> Tuple[str, Optional[str]]:
    """Extract (message, code) from a PostgREST or GoTrue error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None

    if not isinstance(body, dict):
        return str(body), None

    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or response.reason_phrase
    )
    # The identity API puts the HTTP status in "code" and the reason in "error_code"
    code = body.get("error_code")
    if code is None and isinstance(body.get("code"), str):
        code = body["code"]
    if code is None and isinstance(body.get("error"), str):
        code = body["error"]
    return str(message), str(code) if code is not None else None


def raise_for_backend_error(response: httpx.Response, service: str = "Backend") -> None:
    """Translate a non-2xx backend response into the StaffHub error taxonomy."""
    if response.is_success:
        return

    message, code = _error_payload(response)
    status = response.status_code

    if status >= 500:
        raise UpstreamUnavailableError(service, message, upstream_status=status)
    if code in NOT_FOUND_CODES or status == 404:
        raise NotFoundError("Row")
    if code in CONFLICT_CODES or status == 409:
        raise AlreadyExistsError("Record")
    if code in BAD_CREDENTIALS_CODES or status == 401:
        raise UnauthorizedError(message)
    if status == 403:
        raise ForbiddenError(message)
    raise ValidationError(message)


class BackendClient:
    """
    Pass-through handle to the hosted backend.

    Use `table()` for queries and mutations, `rpc()` for remote procedures
    and `auth` for the identity API.
    """

    def __init__(
        self,
        url: str,
        key: str,
        role: KeyRole = "anon",
        timeout: float = 10.0,
        client_info: str = "staffhub-api",
        http_client: Optional[httpx.AsyncClient] = None,
        access_token: Optional[str] = None,
    ):
        self.url = (url or "").rstrip("/")
        self.key = key or ""
        self.role = role
        self.client_info = client_info
        self._access_token = access_token
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

        # Imported here to avoid a cycle: auth and query builders call back into us
        from staffhub.client.auth import AuthClient
        self.auth = AuthClient(self)

    @classmethod
    def from_settings(
        cls,
        settings,
        role: KeyRole = "anon",
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "BackendClient":
        """Build a client from Settings using the public or the elevated key."""
        key = settings.SUPABASE_SERVICE_ROLE_KEY if role == "service" else settings.SUPABASE_ANON_KEY
        return cls(
            url=settings.SUPABASE_URL,
            key=key,
            role=role,
            timeout=settings.SUPABASE_TIMEOUT_SECONDS,
            client_info=f"staffhub-api/{settings.APP_VERSION}",
            http_client=http_client,
        )

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)

    @property
    def is_service_role(self) -> bool:
        return self.role == "service"

    def with_token(self, access_token: str) -> "BackendClient":
        """Same connection pool, but table queries run as the signed-in user."""
        return BackendClient(
            url=self.url,
            key=self.key,
            role=self.role,
            client_info=self.client_info,
            http_client=self._http,
            access_token=access_token,
        )

    def headers(self, bearer: Optional[str] = None) -> Dict[str, str]:
        token = bearer or self._access_token or self.key
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {token}",
            "X-Client-Info": self.client_info,
        }

    def table(self, name: str):
        """Start a query against a backend table."""
        from staffhub.client.query import QueryBuilder
        return QueryBuilder(self, name)

    async def rpc(self, function: str, params: Optional[Dict[str, Any]] = None) -> APIResponse:
        """Call a remote procedure exposed by the backend."""
        response = await self.request("POST", f"/rest/v1/rpc/{function}", json=params or {})
        data = response.json() if response.content else None
        return APIResponse(data=data)

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Params] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        bearer: Optional[str] = None,
        service: str = "Backend",
    ) -> httpx.Response:
        """Issue a call and map failures onto the error taxonomy."""
        if not self.configured:
            raise UpstreamUnavailableError(service, "backend URL or key is not configured")

        merged = self.headers(bearer)
        if headers:
            merged.update(headers)

        logger.debug(f"{method} {path}")
        try:
            response = await self._http.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                headers=merged,
            )
        except httpx.TimeoutException:
            logger.warning(f"{service} timeout on {method} {path}")
            raise UpstreamUnavailableError(service, "request timed out")
        except httpx.HTTPError as e:
            logger.warning(f"{service} unreachable on {method} {path}: {e}")
            raise UpstreamUnavailableError(service, str(e))

        if response.status_code >= 500:
            logger.warning(f"{service} returned {response.status_code} on {method} {path}")
        elif not response.is_success:
            logger.debug(f"{service} returned {response.status_code} on {method} {path}")
        raise_for_backend_error(response, service)
        return response

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
