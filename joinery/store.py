# joinery/store.py
"""Table-scoped client for the hosted relational store.

Every read and write in the application goes through the single
``StoreClient`` created by the app factory.  The client speaks in table names
and column names (``store.table('customer').select().order('company_name')``)
and hands back plain dict rows, so nothing above this module touches ORM
instances or sessions.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from datetime import date, datetime

import sqlalchemy as sa
from flask import current_app
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from joinery.errors import (
    FOREIGN_KEY_VIOLATION,
    NO_ROWS,
    NOT_NULL_VIOLATION,
    UNIQUE_VIOLATION,
    StoreError,
    StoreUnavailableError,
)
from joinery.models import TABLES, new_id

logger = logging.getLogger(__name__)

UNKNOWN_COLUMN = 'PGRST204'
UNKNOWN_TABLE = '42P01'
UNKNOWN_RELATION = 'PGRST200'
INVALID_DATETIME = '22007'

_SQLITE_CODES = [
    (re.compile(r'FOREIGN KEY constraint failed'), FOREIGN_KEY_VIOLATION),
    (re.compile(r'UNIQUE constraint failed'), UNIQUE_VIOLATION),
    (re.compile(r'NOT NULL constraint failed'), NOT_NULL_VIOLATION),
]


@event.listens_for(Engine, 'connect')
def _apply_pragmas(dbapi_conn, _record):
    """SQLite leaves foreign keys unenforced unless asked per connection."""
    if isinstance(dbapi_conn, sqlite3.Connection):
        cursor = dbapi_conn.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def get_store() -> StoreClient | None:
    """Return the configured store handle, or ``None`` in empty-result mode."""
    return current_app.extensions.get('store')


def require_store() -> StoreClient:
    store = get_store()
    if store is None:
        raise StoreUnavailableError()
    return store


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    code = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
    if code:
        return code
    text = str(orig)
    for pattern, mapped in _SQLITE_CODES:
        if pattern.search(text):
            return mapped
    return None


def _parse_embeds(paths) -> dict:
    """Turn ``('supplier', 'hinge.supplier')`` into a nested dict tree."""
    tree: dict = {}
    for path in paths:
        node = tree
        for part in path.split('.'):
            part = part.strip()
            if not part or part == '*':
                continue
            node = node.setdefault(part, {})
    return tree


def _serialize(obj, tree: dict) -> dict:
    row = obj.to_dict()
    for name, subtree in tree.items():
        related = getattr(obj, name)
        row[name] = _serialize(related, subtree) if related is not None else None
    return row


class TableQuery:
    """Builder for a single statement against one table."""

    def __init__(self, store: StoreClient, table: str) -> None:
        model = TABLES.get(table)
        if model is None:
            raise StoreError(f'relation "{table}" does not exist', code=UNKNOWN_TABLE)
        self._store = store
        self._table = table
        self._model = model
        self._action = 'select'
        self._rows: list[dict] = []
        self._values: dict = {}
        self._embeds: dict = {}
        self._filters: list = []
        self._orderings: list = []

    # -- statement kind -----------------------------------------------------

    def select(self, *embeds: str) -> TableQuery:
        """Choose relations to embed; on writes this asks for the row back."""
        self._embeds = _parse_embeds(embeds)
        return self

    def insert(self, values) -> TableQuery:
        self._action = 'insert'
        rows = values if isinstance(values, list) else [values]
        self._rows = [self._coerce(dict(r)) for r in rows]
        return self

    def update(self, values: dict) -> TableQuery:
        self._action = 'update'
        self._values = self._coerce(dict(values))
        self._values.pop('id', None)
        return self

    def delete(self) -> TableQuery:
        self._action = 'delete'
        return self

    # -- predicates ---------------------------------------------------------

    def eq(self, column: str, value) -> TableQuery:
        col = self._column(column)
        self._filters.append(col.is_(None) if value is None else col == value)
        return self

    def in_(self, column: str, values) -> TableQuery:
        self._filters.append(self._column(column).in_(list(values)))
        return self

    def order(self, column: str, desc: bool = False, nulls_last: bool = False) -> TableQuery:
        expr = self._column(column)
        expr = expr.desc() if desc else expr.asc()
        if nulls_last:
            expr = expr.nulls_last()
        self._orderings.append(expr)
        return self

    # -- terminals ----------------------------------------------------------

    def execute(self) -> list[dict]:
        try:
            return getattr(self, f'_run_{self._action}')()
        except StoreError:
            self._store.session.rollback()
            raise
        except IntegrityError as exc:
            self._store.session.rollback()
            raise self._store.report(self._table, StoreError(
                str(exc.orig), code=_sqlstate(exc), details=self._action,
            ))
        except DBAPIError as exc:
            self._store.session.rollback()
            raise self._store.report(self._table, StoreError(
                str(exc.orig), code=_sqlstate(exc), details=self._action,
            ))
        except SQLAlchemyError as exc:
            self._store.session.rollback()
            raise self._store.report(self._table, StoreError(str(exc), details=self._action))

    def single(self) -> dict:
        rows = self.execute()
        if len(rows) != 1:
            raise StoreError(
                'JSON object requested, multiple (or no) rows returned',
                code=NO_ROWS,
                details=f'The result contains {len(rows)} rows',
            )
        return rows[0]

    def maybe_single(self) -> dict | None:
        try:
            return self.single()
        except StoreError as exc:
            if exc.code == NO_ROWS:
                return None
            raise

    # -- internals ----------------------------------------------------------

    def _column(self, name: str):
        col = self._model.__table__.columns.get(name)
        if col is None:
            raise StoreError(
                f"Could not find the '{name}' column of '{self._table}'",
                code=UNKNOWN_COLUMN,
            )
        return getattr(self._model, col.key)

    def _coerce(self, values: dict) -> dict:
        for name, value in list(values.items()):
            col = self._model.__table__.columns.get(name)
            if col is None:
                raise StoreError(
                    f"Could not find the '{name}' column of '{self._table}'",
                    code=UNKNOWN_COLUMN,
                )
            if not isinstance(value, str):
                continue
            try:
                if isinstance(col.type, sa.DateTime):
                    values[name] = datetime.fromisoformat(value)
                elif isinstance(col.type, sa.Date):
                    values[name] = date.fromisoformat(value[:10])
            except ValueError:
                raise StoreError(
                    f'invalid input syntax for type date: "{value}"',
                    code=INVALID_DATETIME,
                )
        return values

    def _loader_options(self):
        def build(model, tree):
            opts = []
            relationships = sa.inspect(model).relationships
            for name, subtree in tree.items():
                if name not in relationships:
                    raise StoreError(
                        f"Could not find a relationship between '{model.__tablename__}' and '{name}'",
                        code=UNKNOWN_RELATION,
                    )
                opt = selectinload(getattr(model, name))
                children = build(relationships[name].mapper.class_, subtree)
                if children:
                    opt = opt.options(*children)
                opts.append(opt)
            return opts

        return build(self._model, self._embeds)

    def _select_ids(self) -> list[str]:
        stmt = sa.select(self._model.id).where(*self._filters)
        return list(self._store.session.scalars(stmt))

    def _fetch(self, where, order=None) -> list[dict]:
        stmt = sa.select(self._model).where(*where).options(*self._loader_options())
        if order:
            stmt = stmt.order_by(*order)
        rows = self._store.session.scalars(stmt).all()
        return [_serialize(r, self._embeds) for r in rows]

    def _run_select(self) -> list[dict]:
        return self._fetch(self._filters, self._orderings)

    def _run_insert(self) -> list[dict]:
        session = self._store.session
        for row in self._rows:
            row.setdefault('id', new_id())
        ids = [row['id'] for row in self._rows]
        if ids:
            session.execute(sa.insert(self._model), self._rows)
        session.commit()
        by_id = {r['id']: r for r in self._fetch([self._model.id.in_(ids)])}
        return [by_id[i] for i in ids if i in by_id]

    def _run_update(self) -> list[dict]:
        session = self._store.session
        ids = self._select_ids()
        if ids and self._values:
            session.execute(
                sa.update(self._model)
                .where(self._model.id.in_(ids))
                .values(**self._values)
                .execution_options(synchronize_session=False)
            )
        session.commit()
        return self._fetch([self._model.id.in_(ids)], self._orderings)

    def _run_delete(self) -> list[dict]:
        session = self._store.session
        before = self._fetch(self._filters)
        if before:
            session.execute(
                sa.delete(self._model)
                .where(self._model.id.in_([r['id'] for r in before]))
                .execution_options(synchronize_session=False)
            )
        session.commit()
        return before


class StoreClient:
    """Process-wide handle to the hosted store; stateless between calls."""

    def __init__(self, db) -> None:
        self._db = db

    @property
    def session(self):
        return self._db.session

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    def create_all(self) -> None:
        self._db.create_all()

    def report(self, table: str, error: StoreError) -> StoreError:
        logger.error(
            'Store error on %s: code=%s message=%s details=%s hint=%s',
            table, error.code, error.message, error.details, error.hint,
        )
        return error
