"""
Test configuration and fixtures.

Provides:
- An in-memory stand-in for the hosted backend (table API + identity API)
  served to the app through httpx.MockTransport
- Seeded companies, employees and communication logs
- HTTPX AsyncClients against the app, anonymous, signed-in and admin
"""
import json
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from staffhub.config import Settings
from staffhub.main import create_app

BACKEND_URL = "https://test.supabase.co"
ANON_KEY = "anon-key"
SERVICE_KEY = "service-key"
OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"


def _fmt(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _split_columns(select: str) -> List[str]:
    parts, depth, current = [], 0, ""
    for ch in select:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        current += ch
    if current:
        parts.append(current)
    return parts


def iso(dt: datetime) -> str:
    return dt.isoformat()


class FakeBackend:
    """
    Enough of the hosted platform's wire behaviour for the app:
    filters, embeds, exact counts, single-object reads, and password auth.
    """

    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.users: Dict[str, dict] = {}
        self.sessions: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []
        self.autoconfirm = True
        self.fail_with: Optional[int] = None
        # Rows returned per read, like the platform's max_rows setting
        self.max_rows = 1000

    # -- seeding helpers -------------------------------------------------

    def insert(self, table: str, **row) -> dict:
        row.setdefault("id", str(uuid.uuid4()))
        self.tables.setdefault(table, []).append(row)
        return row

    def add_user(
        self,
        email: str,
        password: str = "secret123",
        role: str = "user",
        full_name: Optional[str] = None,
        confirmed: bool = True
    ) -> dict:
        user = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": password,
            "email_confirmed_at": iso(datetime.now(timezone.utc)) if confirmed else None,
            "app_metadata": {"role": role},
            "user_metadata": {"full_name": full_name} if full_name else {},
            "banned_until": None,
            "created_at": iso(datetime.now(timezone.utc)),
        }
        self.users[user["id"]] = user
        return user

    def issue_session(self, user: dict) -> dict:
        access = f"at-{uuid.uuid4().hex}"
        refresh = f"rt-{uuid.uuid4().hex}"
        self.sessions[access] = user["id"]
        self.refresh_tokens[refresh] = user["id"]
        return {
            "access_token": access,
            "refresh_token": refresh,
            "token_type": "bearer",
            "expires_in": 3600,
            "user": self._public(user),
        }

    def rows(self, table: str) -> List[dict]:
        return self.tables.get(table, [])

    def requests_to(self, path_fragment: str) -> List[httpx.Request]:
        return [r for r in self.requests if path_fragment in r.url.path]

    # -- transport ---------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"message": "backend exploded"})
        if request.headers.get("apikey") not in (ANON_KEY, SERVICE_KEY):
            return httpx.Response(401, json={"message": "Invalid API key"})

        path = request.url.path
        if path.startswith("/rest/v1/"):
            return self._table_request(request, path[len("/rest/v1/"):])
        if path.startswith("/auth/v1/"):
            return self._auth_request(request, path[len("/auth/v1"):])
        return httpx.Response(404, json={"message": "no route"})

    # -- table API ---------------------------------------------------------

    def _match(self, row: dict, column: str, expr: str) -> bool:
        op, _, raw = expr.partition(".")
        value = row.get(column)
        if op == "in":
            return _fmt(value) in raw.strip("()").split(",")
        if op in ("eq", "is"):
            return _fmt(value) == raw
        if op == "neq":
            return _fmt(value) != raw
        if value is None:
            return False
        if op in ("like", "ilike"):
            pattern = "^" + ".*".join(re.escape(p) for p in raw.split("*")) + "$"
            return re.match(pattern, str(value), re.IGNORECASE if op == "ilike" else 0) is not None
        left, right = _fmt(value), raw
        if op == "gt":
            return left > right
        if op == "gte":
            return left >= right
        if op == "lt":
            return left < right
        if op == "lte":
            return left <= right
        raise AssertionError(f"unsupported operator {op}")

    def _project(self, row: dict, select: str) -> dict:
        out: Dict[str, Any] = {}
        for part in _split_columns(select):
            if "(" in part:
                head, cols = part.split("(", 1)
                columns = cols.rstrip(")").split(",")
                alias, _, fk = head.partition(":")
                related = next(
                    (r for r in self.rows(alias) if _fmt(r.get("id")) == _fmt(row.get(fk or alias))),
                    None,
                )
                out[alias] = {c: related.get(c) for c in columns} if related else None
            elif part == "*":
                out.update(row)
            else:
                out[part] = row.get(part)
        return out

    def _sort(self, rows: List[dict], order: str) -> List[dict]:
        for spec in reversed(order.split(",")):
            column, _, direction = spec.partition(".")
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, _fmt(r.get(column))),
                reverse=direction == "desc",
            )
        return rows

    def _table_request(self, request: httpx.Request, table: str) -> httpx.Response:
        if table not in self.tables:
            return httpx.Response(404, json={
                "code": "PGRST205",
                "message": f"Could not find the table 'public.{table}' in the schema cache",
            })
        rows = self.tables[table]

        select, order, limit, offset = "*", None, None, 0
        filters = []
        for key, value in request.url.params.multi_items():
            if key == "select":
                select = value
            elif key == "order":
                order = value
            elif key == "limit":
                limit = int(value)
            elif key == "offset":
                offset = int(value)
            elif key != "on_conflict":
                filters.append((key, value))

        prefer = request.headers.get("prefer", "")
        status = 200
        if request.method == "POST":
            body = json.loads(request.content)
            matched = []
            for row in body if isinstance(body, list) else [body]:
                row = dict(row)
                row.setdefault("id", str(uuid.uuid4()))
                if any(_fmt(r.get("id")) == _fmt(row["id"]) for r in rows):
                    return httpx.Response(409, json={
                        "code": "23505",
                        "message": "duplicate key value violates unique constraint",
                    })
                rows.append(row)
                matched.append(row)
            status = 201
        else:
            matched = [r for r in rows if all(self._match(r, k, v) for k, v in filters)]
            if request.method == "PATCH":
                values = json.loads(request.content)
                for row in matched:
                    row.update(values)
            elif request.method == "DELETE":
                self.tables[table] = [r for r in rows if not any(r is m for m in matched)]

        if order:
            matched = self._sort(matched, order)
        total = len(matched)
        cap = self.max_rows if limit is None else min(limit, self.max_rows)
        window = matched[offset:offset + cap]

        headers = {}
        if "count=exact" in prefer:
            headers["content-range"] = (
                f"{offset}-{offset + len(window) - 1}/{total}" if window else f"*/{total}"
            )
        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        if request.method != "GET" and "return=representation" not in prefer:
            return httpx.Response(204, headers=headers)

        body = [self._project(r, select) for r in window]
        if request.headers.get("accept") == OBJECT_MEDIA_TYPE:
            if len(body) != 1:
                return httpx.Response(406, json={
                    "code": "PGRST116",
                    "message": "JSON object requested, multiple (or no) rows returned",
                })
            return httpx.Response(status, json=body[0], headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    # -- identity API ------------------------------------------------------

    @staticmethod
    def _public(user: dict) -> dict:
        return {k: v for k, v in user.items() if k != "password"}

    def _user_by_email(self, email: str) -> Optional[dict]:
        return next((u for u in self.users.values() if u["email"] == email), None)

    def _auth_request(self, request: httpx.Request, path: str) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        bearer = request.headers.get("authorization", "").removeprefix("Bearer ")

        if path == "/signup":
            if self._user_by_email(body["email"]):
                return httpx.Response(422, json={
                    "code": 422,
                    "error_code": "user_already_exists",
                    "msg": "User already registered",
                })
            user = self.add_user(
                body["email"],
                body["password"],
                full_name=(body.get("data") or {}).get("full_name"),
                confirmed=self.autoconfirm,
            )
            if self.autoconfirm:
                return httpx.Response(200, json=self.issue_session(user))
            return httpx.Response(200, json=self._public(user))

        if path == "/token":
            grant = request.url.params.get("grant_type")
            user = None
            if grant == "password":
                user = self._user_by_email(body.get("email"))
                if user and user["password"] != body.get("password"):
                    user = None
            elif grant == "refresh_token":
                user_id = self.refresh_tokens.pop(body.get("refresh_token"), None)
                user = self.users.get(user_id) if user_id else None
            if not user:
                return httpx.Response(400, json={
                    "error": "invalid_grant",
                    "error_description": "Invalid login credentials",
                })
            return httpx.Response(200, json=self.issue_session(user))

        if path == "/logout":
            self.sessions.pop(bearer, None)
            return httpx.Response(204)

        if path == "/recover":
            return httpx.Response(200, json={})

        if path == "/user":
            user = self.users.get(self.sessions.get(bearer, ""))
            if not user:
                return httpx.Response(401, json={"code": 401, "msg": "invalid JWT: unable to parse or verify signature"})
            if request.method == "PUT":
                if "password" in body:
                    user["password"] = body["password"]
            return httpx.Response(200, json=self._public(user))

        if path.startswith("/admin/users"):
            if bearer != SERVICE_KEY:
                return httpx.Response(403, json={"code": "not_admin", "msg": "User not allowed"})
            user_id = path[len("/admin/users/"):] if path.startswith("/admin/users/") else None
            if not user_id:
                users = [self._public(u) for u in self.users.values()]
                return httpx.Response(200, json={"users": users, "aud": "authenticated"})

            user = self.users.get(user_id)
            if not user:
                return httpx.Response(404, json={"code": "user_not_found", "msg": "User not found"})
            if request.method == "DELETE":
                del self.users[user_id]
                return httpx.Response(200, json={})
            if request.method == "PUT":
                for key in ("email", "password"):
                    if key in body:
                        user[key] = body[key]
                if body.get("email_confirm"):
                    user["email_confirmed_at"] = iso(datetime.now(timezone.utc))
                for key in ("user_metadata", "app_metadata"):
                    if key in body:
                        user[key] = {**user[key], **body[key]}
                if "ban_duration" in body:
                    user["banned_until"] = None if body["ban_duration"] == "none" else "2999-01-01T00:00:00Z"
            return httpx.Response(200, json=self._public(user))

        return httpx.Response(404, json={"message": "no route"})


# =============================================================================
# Seed data
# =============================================================================

NOW = datetime.now(timezone.utc)


def seed(backend: FakeBackend) -> Dict[str, dict]:
    """
    Three companies, four employees and their message history.

    Copec: 9 read + 1 sent (ratio 0.9), one scheduled, one draft
    Falabella: 4 read + 6 sent (ratio 0.4)
    """
    for table in ("companies", "employees", "communication_logs", "message_analysis",
                  "users", "user_credentials", "folders"):
        backend.tables.setdefault(table, [])

    copec = backend.insert(
        "companies", name="Copec", industry="Energía", status="active",
        fallback_config={"order": ["WhatsApp", "Telegram", "SMS", "Email"]},
        created_at=iso(NOW - timedelta(days=400)),
    )
    falabella = backend.insert(
        "companies", name="Falabella", industry="Retail", status="active",
        fallback_config={"order": ["Email", "SMS"]},
        created_at=iso(NOW - timedelta(days=300)),
    )
    andes = backend.insert(
        "companies", name="Andes Minería", industry="Minería", status="inactive",
        fallback_config=None,
        created_at=iso(NOW - timedelta(days=200)),
    )

    ana = backend.insert(
        "employees", company_id=copec["id"], first_name="Ana", last_name="Pérez",
        email="ana.perez@copec.cl", phone="+56911111111", whatsapp_enabled=True,
        department="Ventas", position="Ejecutiva", region="Metropolitana", is_active=True,
        created_at=iso(NOW - timedelta(days=5)),
    )
    bruno = backend.insert(
        "employees", company_id=copec["id"], first_name="Bruno", last_name="Soto",
        email="bruno.soto@copec.cl", phone="+56922222222", whatsapp_enabled=False,
        sms_enabled=False, telegram_username="@bsoto", telegram_enabled=True,
        email_enabled=True, department="Operaciones", region="Biobío", is_active=True,
        created_at=iso(NOW - timedelta(days=60)),
    )
    carla = backend.insert(
        "employees", company_id=falabella["id"], first_name="Carla", last_name="Díaz",
        email="carla.diaz@falabella.cl", phone="+56933333333", mailing_list=True,
        department="Ventas", region="Valparaíso", is_active=True,
        created_at=iso(NOW - timedelta(days=90)),
    )
    diego = backend.insert(
        "employees", company_id=falabella["id"], first_name="Diego", last_name="Rojas",
        email=None, phone=None, department="Bodega", is_active=False,
        created_at=iso(NOW - timedelta(days=100)),
    )

    def log(company, employee, status, days_ago, **extra):
        return backend.insert(
            "communication_logs", company_id=company["id"], employee_id=employee["id"],
            channel="WhatsApp", message="Hola", status=status,
            created_at=iso(NOW - timedelta(days=days_ago)), **extra
        )

    for i in range(9):
        log(copec, ana, "read", 10 + i)
    sent_log = log(copec, ana, "sent", 2)
    log(copec, ana, "scheduled", 1, scheduled_at=iso(NOW + timedelta(days=3)))
    log(copec, ana, "draft", 1)
    for i in range(4):
        log(falabella, carla, "read", 20 + i)
    for i in range(6):
        log(falabella, carla, "sent", 30 + i)

    backend.insert("folders", name="Contratos")
    backend.insert("folders", name="Liquidaciones")

    return {
        "copec": copec, "falabella": falabella, "andes": andes,
        "ana": ana, "bruno": bruno, "carla": carla, "diego": diego,
        "sent_log": sent_log,
    }


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DEV_MODE=True,
        SUPABASE_URL=BACKEND_URL,
        SUPABASE_ANON_KEY=ANON_KEY,
        SUPABASE_SERVICE_ROLE_KEY=SERVICE_KEY,
        SUPABASE_JWT_SECRET="",
        FRONTEND_URL="https://staffhub.example",
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def data(backend: FakeBackend) -> Dict[str, dict]:
    return seed(backend)


@pytest.fixture
def http_client(backend: FakeBackend) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def app(settings: Settings, http_client: httpx.AsyncClient):
    return create_app(settings, http_client=http_client)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_session(backend: FakeBackend) -> dict:
    user = backend.add_user("rrhh@empresa.cl", "secret123", full_name="Camila Rojas")
    return backend.issue_session(user)


@pytest.fixture
def admin_session(backend: FakeBackend) -> dict:
    user = backend.add_user("admin@empresa.cl", "admin1234", role="admin")
    return backend.issue_session(user)


@pytest.fixture
async def authed_client(app, user_session: dict):
    headers = {"Authorization": f"Bearer {user_session['access_token']}"}
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test", headers=headers) as ac:
        yield ac


@pytest.fixture
async def admin_client(app, admin_session: dict):
    headers = {"Authorization": f"Bearer {admin_session['access_token']}"}
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test", headers=headers) as ac:
        yield ac
