# This file wraps the SQLAlchemy engine behind the sensor repository and the request log.
# Statements are plain `text()` SQL with bound parameters; table names are interpolated only
# after passing the identifier check below.
# Reads use a pooled connection; every write runs in its own short transaction.

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

Params = Mapping[str, Any] | None


class DatabaseClient:
    """SQL access shared by the sensor store, readiness probe, and request log."""

    def __init__(self, *, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, pool_pre_ping=True)
        self._request_log_ready: bool | None = None

    @contextmanager
    def _read(self, query: str, params: Params) -> Iterator[CursorResult[Any]]:
        with self._engine.connect() as connection:
            yield connection.execute(text(query), dict(params or {}))

    def can_connect(self) -> bool:
        try:
            with self._read("SELECT 1", None) as result:
                result.scalar_one()
        except SQLAlchemyError:
            return False
        return True

    def table_exists(self, table_name: str) -> bool:
        return inspect(self._engine).has_table(self.validate_identifier(table_name))

    def fetch_all(self, query: str, params: Params = None) -> list[dict[str, Any]]:
        with self._read(query, params) as result:
            return [dict(row) for row in result.mappings()]

    def fetch_one(self, query: str, params: Params = None) -> dict[str, Any] | None:
        with self._read(query, params) as result:
            row = result.mappings().first()
        return None if row is None else dict(row)

    def fetch_scalar(self, query: str, params: Params = None) -> Any:
        with self._read(query, params) as result:
            return result.scalar_one()

    def execute(self, query: str, params: Params = None) -> int:
        """Run one write statement in its own transaction; returns the affected row count."""

        with self._engine.begin() as connection:
            result = connection.execute(text(query), dict(params or {}))
            return int(result.rowcount or 0)

    def log_request(
        self,
        *,
        table_name: str,
        request_id: str,
        path: str,
        method: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        table = self.validate_identifier(table_name)
        # Skipped until the log table shows up; the check repeats while it is missing.
        if not self._request_log_ready:
            self._request_log_ready = self.table_exists(table)
            if not self._request_log_ready:
                return

        self.execute(
            f"INSERT INTO {table} (request_id, path, method, status_code, duration_ms, created_at) "
            "VALUES (:request_id, :path, :method, :status_code, :duration_ms, CURRENT_TIMESTAMP)",
            {
                "request_id": request_id,
                "path": path,
                "method": method,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 3),
            },
        )

    @staticmethod
    def validate_identifier(identifier: str) -> str:
        if not _IDENTIFIER_RE.match(identifier):
            raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        return identifier
