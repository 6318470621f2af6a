"""Shared fixtures: an in-memory backing store and an in-memory Redis."""

import re
import uuid
from typing import Any, Dict, List, Optional

import fakeredis
import pytest

from flowershop.cache import cache
from flowershop.db.client import Op
from flowershop.db.exceptions import BackingStoreError, NotFoundError

EMBED = re.compile(r"(\w+)\(")

# Embedded relation -> column on the parent row holding its id
EMBED_COLUMNS = {"flowers": "flower_id", "colors": "color_id", "tags": "tag_id"}


class InMemorySupabase:
    """
    Test double for SupabaseClient keeping tables in dictionaries.

    Supports the subset of PostgREST the repository uses: equality and
    in.(...) filters, one-level embedded relations, order, limit and
    single-row reads. Every call is recorded in `queries`.
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.queries: List[tuple] = []
        self.fail_on: Optional[str] = None

    def count(self, operation: Optional[str] = None, table: Optional[str] = None) -> int:
        return sum(
            1
            for op, name in self.queries
            if (operation is None or op == operation) and (table is None or name == table)
        )

    def _matches(self, row: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        for column, value in (filters or {}).items():
            if isinstance(value, Op):
                if value.operator != "in":
                    raise NotImplementedError(value.operator)
                allowed = value.operand.strip("()").split(",")
                if str(row.get(column)) not in allowed:
                    return False
            elif row.get(column) != value:
                return False
        return True

    def _record(self, operation: str, table: str) -> None:
        self.queries.append((operation, table))
        if self.fail_on == table:
            raise BackingStoreError(f"{table} unavailable")

    async def select(
        self,
        table: str,
        select: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
        single: bool = False,
    ) -> Any:
        self._record("select", table)
        rows = [dict(r) for r in self.tables.get(table, []) if self._matches(r, filters)]

        for relation in EMBED.findall(select):
            column = EMBED_COLUMNS[relation]
            related = {r["id"]: r for r in self.tables.get(relation, [])}
            for row in rows:
                row[relation] = related.get(row.get(column))

        if order:
            column, _, direction = order.partition(".")
            rows.sort(key=lambda r: r.get(column) or 0, reverse=direction == "desc")
        if limit is not None:
            rows = rows[:limit]

        if single:
            if len(rows) != 1:
                raise NotFoundError(table, "requested")
            return rows[0]
        return rows

    async def insert(self, table: str, rows: List[Dict[str, Any]], single: bool = False) -> Any:
        self._record("insert", table)
        stored = []
        for row in rows:
            row = {"id": str(uuid.uuid4()), **row}
            self.tables.setdefault(table, []).append(row)
            stored.append(dict(row))
        return stored[0] if single else stored

    async def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Dict[str, Any],
        single: bool = False,
    ) -> Any:
        self._record("update", table)
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        if single:
            if len(updated) != 1:
                raise NotFoundError(table, "requested")
            return updated[0]
        return updated

    async def delete(self, table: str, filters: Dict[str, Any]) -> None:
        self._record("delete", table)
        self.tables[table] = [
            r for r in self.tables.get(table, []) if not self._matches(r, filters)
        ]


def catalog_tables() -> Dict[str, List[Dict[str, Any]]]:
    """A small catalog: two categories, three bouquets, two flowers, two tags."""
    return {
        "categories": [
            {"id": "c1", "name": "Roses"},
            {"id": "c2", "name": "Tulips"},
        ],
        "bouquets": [
            {"id": "b1", "name": "Amber", "price": 40.0, "category_id": "c1", "featured": True, "in_stock": True},
            {"id": "b2", "name": "Blush", "price": 55.0, "category_id": "c1", "featured": False, "in_stock": True},
            {"id": "b3", "name": "Crimson", "price": 70.0, "category_id": "c2", "featured": True, "in_stock": False},
        ],
        "flowers": [
            {"id": "f1", "name": "Rose", "price": 2.5},
            {"id": "f2", "name": "Tulip", "price": 1.5},
        ],
        "bouquet_flowers": [
            {"id": "bf1", "bouquet_id": "b1", "flower_id": "f1", "quantity": 12},
            {"id": "bf2", "bouquet_id": "b2", "flower_id": "f1", "quantity": 6},
            {"id": "bf3", "bouquet_id": "b2", "flower_id": "f2", "quantity": 6},
            {"id": "bf4", "bouquet_id": "b3", "flower_id": "f2", "quantity": 20},
        ],
        "bouquet_media": [
            {"id": "m1", "bouquet_id": "b1", "file_url": "https://cdn.test/m1.jpg", "display_order": 0, "is_thumbnail": False},
            {"id": "m2", "bouquet_id": "b1", "file_url": "https://cdn.test/m2.jpg", "display_order": 1, "is_thumbnail": True},
        ],
        "colors": [{"id": "red", "name": "Red"}],
        "flower_colors": [{"id": "fc1", "flower_id": "f1", "color_id": "red"}],
        "tags": [
            {"id": "t1", "name": "Romantic"},
            {"id": "t2", "name": "Birthday"},
        ],
        "bouquet_tags": [{"id": "bt1", "bouquet_id": "b1", "tag_id": "t1"}],
        "profiles": [
            {"id": "admin-user", "role": "admin"},
            {"id": "plain-user", "role": "customer"},
        ],
    }


@pytest.fixture
def store():
    """In-memory backing store seeded with a small catalog."""
    return InMemorySupabase(catalog_tables())


@pytest.fixture
def fake_redis():
    """Bind the process-wide cache connection to an in-memory Redis."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    previous = cache.client
    cache.client = client
    yield client
    cache.client = previous
