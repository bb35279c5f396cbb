"""
Document-collection layer on top of Postgres JSONB.

Each collection is a table of `(id, seq, doc)` rows:
- `id` is an opaque string handed to clients as `_id`
- `seq` preserves insertion order ("natural" order)
- `doc` holds the record fields as JSONB

Filters are expressed as predicate objects (`Equals`, `Contains`, `AnyOf`)
and compiled to SQL here, so no caller-supplied text is ever spliced into a
statement. Field names come from code and are checked against `_FIELD_PATH`.
"""

from __future__ import annotations

import json
import re
import uuid
from dataclasses import dataclass
from typing import Any, Union

from .db import Database

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
_FIELD_PATH = re.compile(r"^[a-z_][a-z0-9_]*(\.[a-z_][a-z0-9_]*)*$")

ID_FIELD = "_id"


@dataclass(frozen=True)
class Equals:
    field: str
    value: str


@dataclass(frozen=True)
class Contains:
    """Case-insensitive literal substring match."""

    field: str
    text: str


@dataclass(frozen=True)
class AnyOf:
    clauses: tuple["Predicate", ...]


Predicate = Union[Equals, Contains, AnyOf]


@dataclass(frozen=True)
class Sort:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Query:
    where: tuple[Predicate, ...] = ()
    sort: Sort | None = None
    skip: int = 0
    limit: int | None = None


@dataclass(frozen=True)
class InsertResult:
    inserted_id: str

    def as_response(self) -> dict[str, Any]:
        return {"acknowledged": True, "insertedId": self.inserted_id}


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int

    def as_response(self) -> dict[str, Any]:
        return {
            "acknowledged": True,
            "matchedCount": self.matched_count,
            "modifiedCount": self.modified_count,
        }


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int

    def as_response(self) -> dict[str, Any]:
        return {"acknowledged": True, "deletedCount": self.deleted_count}


def _json_arg(value: dict[str, Any]) -> str:
    """
    asyncpg does not automatically encode Python dicts for json/jsonb parameters.
    We pass JSON as a string and cast to jsonb in SQL.
    """
    return json.dumps(value, ensure_ascii=True)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def field_expr(field: str) -> str:
    """
    SQL text expression for a (possibly dotted) document field.

    `buyer.email` -> doc #>> '{buyer,email}'
    """
    if not _FIELD_PATH.match(field):
        raise ValueError(f"Invalid document field path: {field!r}")
    return "(doc #>> '{" + ",".join(field.split(".")) + "}')"


def _compile_predicate(predicate: Predicate, args: list[Any]) -> str:
    if isinstance(predicate, Equals):
        args.append(predicate.value)
        return f"{field_expr(predicate.field)} = ${len(args)}"
    if isinstance(predicate, Contains):
        args.append("%" + _escape_like(predicate.text) + "%")
        return f"{field_expr(predicate.field)} ILIKE ${len(args)}"
    if isinstance(predicate, AnyOf):
        if not predicate.clauses:
            return "FALSE"
        parts = [_compile_predicate(clause, args) for clause in predicate.clauses]
        return "(" + " OR ".join(parts) + ")"
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def compile_where(where: tuple[Predicate, ...], args: list[Any] | None = None) -> tuple[str, list[Any]]:
    """
    Compile AND-ed predicates into a WHERE body and its positional arguments.

    `args` may already hold earlier parameters; numbering continues after them.
    """
    args = [] if args is None else args
    if not where:
        return "TRUE", args
    parts = [_compile_predicate(predicate, args) for predicate in where]
    return " AND ".join(parts), args


def compile_order(sort: Sort | None) -> str:
    if sort is None:
        return "seq ASC"
    direction = "DESC" if sort.descending else "ASC"
    return f"{field_expr(sort.field)} {direction} NULLS LAST, seq ASC"


def _row_to_document(row: dict[str, Any]) -> dict[str, Any]:
    doc = row["doc"]
    if isinstance(doc, str):
        doc = json.loads(doc)
    return {ID_FIELD: row["id"], **doc}


class DocumentCollection:
    def __init__(self, database: Database, name: str) -> None:
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid collection name: {name!r}")
        self._database = database
        self.name = name

    async def ensure_table(self) -> None:
        await self._database.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
              id text PRIMARY KEY,
              seq bigserial NOT NULL,
              doc jsonb NOT NULL DEFAULT '{{}}'::jsonb,
              created_at timestamptz NOT NULL DEFAULT now()
            )
            """
        )

    async def find(self, query: Query = Query()) -> list[dict[str, Any]]:
        where_sql, args = compile_where(query.where)
        args.append(max(0, query.skip))
        offset_param = len(args)
        args.append(query.limit)
        limit_param = len(args)
        rows = await self._database.fetch_all(
            f"""
            SELECT id, doc
            FROM {self.name}
            WHERE {where_sql}
            ORDER BY {compile_order(query.sort)}
            OFFSET ${offset_param}
            LIMIT ${limit_param}
            """,
            *args,
        )
        return [_row_to_document(row) for row in rows]

    async def find_one(self, doc_id: str) -> dict[str, Any] | None:
        row = await self._database.fetch_one(
            f"""
            SELECT id, doc
            FROM {self.name}
            WHERE id = $1
            """,
            doc_id,
        )
        return _row_to_document(row) if row is not None else None

    async def count(self, where: tuple[Predicate, ...] = ()) -> int:
        where_sql, args = compile_where(where)
        value = await self._database.fetch_value(
            f"""
            SELECT count(*)
            FROM {self.name}
            WHERE {where_sql}
            """,
            *args,
        )
        return int(value or 0)

    async def insert_one(self, document: dict[str, Any]) -> InsertResult:
        doc_id = uuid.uuid4().hex
        body = {k: v for k, v in document.items() if k != ID_FIELD}
        await self._database.execute(
            f"""
            INSERT INTO {self.name} (id, doc)
            VALUES ($1, $2::jsonb)
            """,
            doc_id,
            _json_arg(body),
        )
        return InsertResult(inserted_id=doc_id)

    async def update_one(self, doc_id: str, fields: dict[str, Any]) -> UpdateResult:
        """
        Shallow-merge `fields` into the stored document (top-level keys replace).
        """
        body = {k: v for k, v in fields.items() if k != ID_FIELD}
        row = await self._database.fetch_one(
            f"""
            WITH target AS (
                SELECT id, doc
                FROM {self.name}
                WHERE id = $1
                FOR UPDATE
            ),
            updated AS (
                UPDATE {self.name} AS c
                SET doc = c.doc || $2::jsonb
                FROM target t
                WHERE c.id = t.id
                  AND t.doc IS DISTINCT FROM (t.doc || $2::jsonb)
                RETURNING c.id
            )
            SELECT
              (SELECT count(*) FROM target) AS matched,
              (SELECT count(*) FROM updated) AS modified
            """,
            doc_id,
            _json_arg(body),
        )
        if row is None:
            return UpdateResult(matched_count=0, modified_count=0)
        return UpdateResult(matched_count=int(row["matched"]), modified_count=int(row["modified"]))

    async def delete_one(self, doc_id: str) -> DeleteResult:
        value = await self._database.fetch_value(
            f"""
            WITH deleted AS (
                DELETE FROM {self.name}
                WHERE id = $1
                RETURNING id
            )
            SELECT count(*) FROM deleted
            """,
            doc_id,
        )
        return DeleteResult(deleted_count=int(value or 0))
