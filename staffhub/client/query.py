"""
Query builder for the backend's table API (PostgREST wire format).
"""
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from staffhub.client.base import APIResponse, BackendClient
from staffhub.core.exceptions import NotFoundError

OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"

_CONTENT_RANGE = re.compile(r"^(?:\d+-\d+|\*)/(\d+|\*)$")


def format_value(value: Any) -> str:
    """Render a Python value the way the table API expects it in a filter."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return str(value)


def parse_content_range(header: Optional[str]) -> Optional[int]:
    """Total row count from a `Content-Range: 0-24/3573` header."""
    if not header:
        return None
    match = _CONTENT_RANGE.match(header.strip())
    if not match or match.group(1) == "*":
        return None
    return int(match.group(1))


def _clean_columns(columns: str) -> str:
    return re.sub(r"\s+", "", columns)


class QueryBuilder:
    """
    Chainable query against one table.

        rows = await client.table("employees").select("*").eq("company_id", cid).execute()
    """

    def __init__(self, client: BackendClient, table: str):
        self._client = client
        self._table = table
        self._method = "GET"
        self._params: List[Tuple[str, str]] = []
        self._order: List[str] = []
        self._headers: Dict[str, str] = {}
        self._prefer: List[str] = []
        self._json: Any = None
        self._maybe_single = False

    # Verbs
    def select(self, columns: str = "*", count: Optional[str] = None, head: bool = False) -> "QueryBuilder":
        self._params.append(("select", _clean_columns(columns)))
        if count:
            self._prefer.append(f"count={count}")
        if head:
            self._method = "HEAD"
        return self

    def insert(self, rows: Any, returning: bool = True) -> "QueryBuilder":
        self._method = "POST"
        self._json = rows
        self._prefer.append("return=representation" if returning else "return=minimal")
        return self

    def upsert(self, rows: Any, on_conflict: Optional[str] = None) -> "QueryBuilder":
        self._method = "POST"
        self._json = rows
        self._prefer.extend(["resolution=merge-duplicates", "return=representation"])
        if on_conflict:
            self._params.append(("on_conflict", on_conflict))
        return self

    def update(self, values: Dict[str, Any]) -> "QueryBuilder":
        self._method = "PATCH"
        self._json = values
        self._prefer.append("return=representation")
        return self

    def delete(self) -> "QueryBuilder":
        self._method = "DELETE"
        self._prefer.append("return=representation")
        return self

    # Filters
    def _filter(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        self._params.append((column, f"{operator}.{format_value(value)}"))
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "QueryBuilder":
        return self._filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        return self._filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "QueryBuilder":
        return self._filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "QueryBuilder":
        return self._filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "QueryBuilder":
        return self._filter(column, "lte", value)

    def like(self, column: str, pattern: str) -> "QueryBuilder":
        return self._filter(column, "like", pattern)

    def ilike(self, column: str, pattern: str) -> "QueryBuilder":
        return self._filter(column, "ilike", pattern)

    def in_(self, column: str, values: Iterable[Any]) -> "QueryBuilder":
        joined = ",".join(format_value(v) for v in values)
        self._params.append((column, f"in.({joined})"))
        return self

    def is_(self, column: str, value: Optional[bool]) -> "QueryBuilder":
        return self._filter(column, "is", value)

    # Modifiers
    def order(self, column: str, desc: bool = False) -> "QueryBuilder":
        self._order.append(f"{column}.{'desc' if desc else 'asc'}")
        return self

    def limit(self, count: int) -> "QueryBuilder":
        self._params.append(("limit", str(count)))
        return self

    def range(self, start: int, end: int) -> "QueryBuilder":
        """Inclusive row window, as in `range(0, 19)` for the first 20 rows."""
        self._params.append(("offset", str(start)))
        self._params.append(("limit", str(end - start + 1)))
        return self

    def single(self) -> "QueryBuilder":
        """Expect exactly one row; zero rows raise NotFoundError."""
        self._headers["Accept"] = OBJECT_MEDIA_TYPE
        return self

    def maybe_single(self) -> "QueryBuilder":
        """Expect at most one row; zero rows yield `data=None`."""
        self._maybe_single = True
        return self.single()

    async def execute(self) -> APIResponse:
        params = list(self._params)
        if self._order:
            params.append(("order", ",".join(self._order)))

        headers = dict(self._headers)
        if self._prefer:
            headers["Prefer"] = ",".join(self._prefer)

        try:
            response = await self._client.request(
                self._method,
                f"/rest/v1/{self._table}",
                params=params,
                json=self._json,
                headers=headers,
                service=f"Table '{self._table}'",
            )
        except NotFoundError:
            if self._maybe_single:
                return APIResponse(data=None, count=None)
            raise

        count = parse_content_range(response.headers.get("content-range"))
        if self._method == "HEAD" or not response.content:
            return APIResponse(data=None, count=count)
        return APIResponse(data=response.json(), count=count)
