"""
In-memory stand-in for the supabase Client.

Supports the subset of the postgrest query builder the services use
(select/insert/upsert, eq, ilike, order, range, limit, exact counts, one level of
embedded children) plus auth.get_user. Individual table operations can be
made to fail to exercise error paths.
"""

from __future__ import annotations

import copy
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

EMBED_RE = re.compile(r"(\w+)\(([^)]*)\)")

# child table -> foreign key column pointing at the parent row id
RELATIONS = {"pages": "funnel_id"}

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]
    count: Optional[int] = None


@dataclass
class FakeUser:
    id: str
    email: Optional[str]


@dataclass
class FakeUserResponse:
    user: Optional[FakeUser]


class FakeAuth:
    def __init__(self) -> None:
        self.users: Dict[str, FakeUser] = {}
        self.error: Optional[Exception] = None
        self.calls = 0

    def add_user(self, token: str, user_id: str, email: Optional[str]) -> FakeUser:
        user = FakeUser(id=user_id, email=email)
        self.users[token] = user
        return user

    def get_user(self, jwt: Optional[str] = None) -> FakeUserResponse:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return FakeUserResponse(user=self.users.get(jwt))


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.count_mode: Optional[str] = None
        self.payload: Any = None
        self.on_conflict = "id"
        self.filters: List[Tuple[str, Any]] = []
        self.patterns: List[Tuple[str, "re.Pattern[str]"]] = []
        self.order_by: List[Tuple[str, bool]] = []
        self.row_range: Optional[Tuple[int, int]] = None
        self.row_limit: Optional[int] = None

    def select(self, *columns: str, count: Optional[str] = None) -> "FakeQuery":
        self.columns = ",".join(columns) or "*"
        self.count_mode = count
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self.op = "insert"
        self.payload = payload
        return self

    def upsert(self, payload: Any, on_conflict: str = "id", ignore_duplicates: bool = False) -> "FakeQuery":
        self.op = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        regex = "".join(
            ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
        )
        self.patterns.append((column, re.compile(regex, re.IGNORECASE | re.DOTALL)))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.row_range = (start, end)
        return self

    def limit(self, size: int) -> "FakeQuery":
        self.row_limit = size
        return self

    def execute(self) -> FakeResponse:
        failure = self.db.failures.get((self.table_name, self.op))
        if failure is not None:
            raise failure
        if self.op == "insert":
            return FakeResponse(data=[self.db.insert_row(self.table_name, row) for row in _as_list(self.payload)])
        if self.op == "upsert":
            return FakeResponse(data=[self.db.upsert_row(self.table_name, row, self.on_conflict) for row in _as_list(self.payload)])
        return self._select()

    def _select(self) -> FakeResponse:
        rows = [
            r for r in self.db.tables.get(self.table_name, [])
            if all(r.get(col) == value for col, value in self.filters)
            and all(p.fullmatch(str(r.get(col, ""))) for col, p in self.patterns)
        ]
        for column, desc in reversed(self.order_by):
            rows = sorted(rows, key=lambda r: r.get(column), reverse=desc)
        total = len(rows)
        if self.row_range is not None:
            start, end = self.row_range
            rows = rows[start:end + 1]
        if self.row_limit is not None:
            rows = rows[:self.row_limit]
        result = [self._embed(copy.deepcopy(r)) for r in rows]
        return FakeResponse(data=result, count=total if self.count_mode == "exact" else None)

    def _embed(self, row: Dict[str, Any]) -> Dict[str, Any]:
        for child, cols in EMBED_RE.findall(self.columns):
            fk = RELATIONS[child]
            wanted = [c.strip() for c in cols.split(",") if c.strip()]
            row[child] = [
                {c: r.get(c) for c in wanted}
                for r in self.db.tables.get(child, [])
                if r.get(fk) == row["id"]
            ]
        return row


def _as_list(payload: Any) -> List[Dict[str, Any]]:
    return payload if isinstance(payload, list) else [payload]


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self.auth = FakeAuth()
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail_on(self, table: str, op: str, error: Optional[Exception] = None) -> None:
        self.failures[(table, op)] = error or RuntimeError(f"simulated {op} failure on {table}")

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    def _now(self) -> str:
        self._clock += 1
        return (BASE_TIME + timedelta(seconds=self._clock)).isoformat()

    def insert_row(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        stored = {"id": str(uuid.uuid4()), "created_at": self._now(), **row}
        stored.setdefault("updated_at", stored["created_at"])
        self.tables.setdefault(table, []).append(stored)
        return copy.deepcopy(stored)

    def upsert_row(self, table: str, row: Dict[str, Any], key: str) -> Dict[str, Any]:
        for existing in self.tables.get(table, []):
            if existing.get(key) == row.get(key):
                existing.update(row)
                existing["updated_at"] = self._now()
                return copy.deepcopy(existing)
        return self.insert_row(table, row)

    def seed(self, table: str, **row: Any) -> Dict[str, Any]:
        return self.insert_row(table, row)


def auth_headers(token: str = "token-alice") -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
