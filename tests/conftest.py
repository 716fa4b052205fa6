"""
Pytest configuration and fixtures for backend tests.

The datastore is an in-memory stand-in for the Supabase client that
understands the query-builder calls the services make, including embedded
selects such as "*, addresses(*, countries(*))".
"""

import itertools
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from backoffice.main import app
from backoffice.database.supabase_client import get_supabase, get_service_supabase
from backoffice.modules.auth.service import clear_auth_cache
from backoffice.modules.functions.client import FunctionsClient, get_functions_client

ADMIN_ID = "admin-user"
OPERATOR_ID = "operator-user"

# (table, embedded table) -> foreign key column on the first table
MANY_TO_ONE = {
    ("operators", "addresses"): "address_id",
    ("field_operators", "addresses"): "address_id",
    ("service_providers", "addresses"): "address_id",
    ("stores", "addresses"): "address_id",
    ("stores", "store_categories"): "category_id",
    ("addresses", "countries"): "country_id",
    ("service_provider_types", "service_types"): "service_type_id",
    ("service_provider_working_areas", "working_areas"): "working_area_id",
    ("service_types", "subcategories"): "subcategory_id",
    ("subcategories", "categories"): "category_id",
}

# (table, embedded table) -> foreign key column on the embedded table
ONE_TO_MANY = {
    ("service_providers", "service_provider_types"): "provider_id",
    ("service_providers", "service_provider_working_areas"): "provider_id",
}

_EMBED = re.compile(r"^(?:(\w+):)?(\w+)\((.*)\)$", re.DOTALL)


def _split_columns(columns):
    parts, depth, current = [], 0, ""
    for char in columns:
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.row_limit = None
        self.row_offset = 0
        self.single_row = False
        self.with_count = False

    def select(self, columns="*", count=None):
        self.columns = columns
        self.with_count = count is not None
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, lambda v, value=value: v == value, value))
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append((column, lambda v, values=values: v in values, values))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def offset(self, count):
        self.row_offset = count
        return self

    def maybe_single(self):
        self.single_row = True
        return self

    single = maybe_single

    def _matches(self, row):
        return all(check(row.get(column)) for column, check, _ in self.filters)

    def execute(self):
        self.db.log.append((self.operation, self.table, {c: v for c, _, v in self.filters}))
        failure = self.db.failures.get((self.operation, self.table))
        if failure is not None:
            raise failure
        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.add_row(self.table, item) for item in items]
            return FakeResponse([dict(row) for row in inserted])

        matched = [row for row in rows if self._matches(row)]
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matched])
        if self.operation == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResponse([dict(row) for row in matched])

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(
                matched,
                key=lambda row: (row.get(column) is None, row.get(column) or ""),
                reverse=desc,
            )
        count = len(matched) if self.with_count else None
        matched = matched[self.row_offset:]
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        data = [self.db.project(self.table, row, self.columns) for row in matched]
        if self.single_row:
            return FakeResponse(data[0] if data else None, count)
        return FakeResponse(data, count)


class FakeRpc:
    def __init__(self, db, name, params):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        self.db.log.append(("rpc", self.name, dict(self.params)))
        if self.name == "assign_role":
            user_id, role = self.params["target_user_id"], self.params["role_name"]
            existing = [
                r for r in self.db.tables.setdefault("user_roles", [])
                if r["user_id"] == user_id and r["role"] == role
            ]
            if not existing:
                self.db.add_row("user_roles", {"user_id": user_id, "role": role, "assigned_by": None})
        return FakeResponse(None)


class FakeAuthAdmin:
    def __init__(self, db):
        self.db = db
        self.users = {}

    def create_user(self, attributes):
        self.db.log.append(("create_user", "auth", {"email": attributes["email"]}))
        if self.db.failures.get(("create_user", "auth")) is not None:
            raise self.db.failures[("create_user", "auth")]
        if any(u.email == attributes["email"] for u in self.users.values()):
            raise Exception("A user with this email address has already been registered")
        user = SimpleNamespace(
            id=str(uuid.uuid4()), email=attributes["email"], user_metadata={}, app_metadata={}
        )
        self.users[user.id] = user
        return SimpleNamespace(user=user)

    def delete_user(self, user_id):
        self.db.log.append(("delete_user", "auth", {"id": user_id}))
        self.users.pop(user_id, None)

    def list_users(self):
        return list(self.users.values())


class FakeAuth:
    def __init__(self, db):
        self.admin = FakeAuthAdmin(db)
        self.tokens = {}
        self.credentials = {}

    def add_session(self, token, user_id, email, app_metadata=None, password=None):
        user = SimpleNamespace(id=user_id, email=email, user_metadata={}, app_metadata=app_metadata or {})
        self.tokens[token] = user
        self.admin.users[user_id] = user
        if password:
            self.credentials[email] = (password, token)
        return user

    def get_user(self, jwt=None):
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def sign_in_with_password(self, credentials):
        password, token = self.credentials.get(credentials["email"], (None, None))
        if password is None or password != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(user=self.tokens[token], session=SimpleNamespace(access_token=token))

    def sign_out(self):
        return None


class FakeBucket:
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self.objects = {}

    def upload(self, path, file, file_options=None):
        if self.db.failures.get(("upload", self.name)) is not None:
            raise self.db.failures[("upload", self.name)]
        self.objects[path] = (file, (file_options or {}).get("content-type"))
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.objects.pop(path, None)
        return []


class FakeStorage:
    def __init__(self, db):
        self.db = db
        self.buckets = {}

    def from_(self, name):
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(self.db, name)
        return self.buckets[name]


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.log = []
        self.failures = {}
        self.auth = FakeAuth(self)
        self.storage = FakeStorage(self)
        self._clock = itertools.count()

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        return FakeRpc(self, name, params)

    def fail(self, operation, table, error=None):
        """Make every later `operation` on `table` raise."""
        self.failures[(operation, table)] = error or Exception(f"{operation} on {table} failed")

    def add_row(self, table, row):
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        created = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._clock))
        row.setdefault("created_at", created.isoformat())
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table, **filters):
        return [
            dict(row) for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]

    def operations(self, *names):
        return [(op, table) for op, table, _ in self.log if not names or op in names]

    def project(self, table, row, columns):
        out = {}
        for token in _split_columns(columns):
            if token == "*":
                out.update(row)
                continue
            embed = _EMBED.match(token)
            if not embed:
                out[token] = row.get(token)
                continue
            alias, target, inner = embed.groups()
            alias = alias or target
            if (table, target) in MANY_TO_ONE:
                key = row.get(MANY_TO_ONE[(table, target)])
                found = [r for r in self.tables.get(target, []) if key is not None and r["id"] == key]
                out[alias] = self.project(target, found[0], inner) if found else None
            elif (table, target) in ONE_TO_MANY:
                column = ONE_TO_MANY[(table, target)]
                out[alias] = [
                    self.project(target, r, inner)
                    for r in self.tables.get(target, []) if r.get(column) == row.get("id")
                ]
            else:
                raise Exception(f"Could not find a relationship between '{table}' and '{target}'")
        return out


@pytest.fixture(autouse=True)
def reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def fake_supabase():
    """Fresh in-memory datastore with an admin, an operator and a role-less user."""
    fake = FakeSupabase()
    fake.auth.add_session(
        "admin-token", ADMIN_ID, "admin@example.com", {"user_role": "admin"}, password="admin-pass"
    )
    fake.auth.add_session("operator-token", OPERATOR_ID, "operator@example.com", {"user_role": "operator"})
    fake.auth.add_session("nobody-token", "nobody-user", "nobody@example.com")
    return fake


@pytest.fixture
def override_datastore(fake_supabase):
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    yield fake_supabase
    app.dependency_overrides.clear()


@pytest.fixture
def functions_client(override_datastore):
    """Functions client that reaches /functions/v1 of the app in-process."""
    functions = FunctionsClient(base_url="http://testserver/functions/v1", http_client=TestClient(app))
    app.dependency_overrides[get_functions_client] = lambda: functions
    return functions


@pytest.fixture
def client(functions_client):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def operator_headers():
    return {"Authorization": "Bearer operator-token"}


@pytest.fixture
def nobody_headers():
    return {"Authorization": "Bearer nobody-token"}


@pytest.fixture
def country(fake_supabase):
    return fake_supabase.add_row("countries", {"name": "Israel", "code": "IL", "phone_code": "+972"})


@pytest.fixture
def taxonomy(fake_supabase):
    """Two categories, each with one subcategory and one service type."""
    home = fake_supabase.add_row("categories", {"name": "Home"})
    auto = fake_supabase.add_row("categories", {"name": "Auto"})
    plumbing = fake_supabase.add_row("subcategories", {"name": "Plumbing", "category_id": home["id"]})
    repair = fake_supabase.add_row("subcategories", {"name": "Repair", "category_id": auto["id"]})
    leak = fake_supabase.add_row("service_types", {"name": "Leak fix", "subcategory_id": plumbing["id"]})
    tyres = fake_supabase.add_row("service_types", {"name": "Tyre change", "subcategory_id": repair["id"]})
    return SimpleNamespace(
        home=home, auto=auto, plumbing=plumbing, repair=repair, leak=leak, tyres=tyres
    )
