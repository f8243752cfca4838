"""Create the database and apply ``database/schema.sql``."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_DEFAULT_DATABASE = "timetrack_db"

# Quoted strings and comments are consumed whole so a ';' inside them never ends a statement.
_SQL_TOKEN = re.compile(
    r"""
      '(?:[^'\\]|\\.)*'
    | "(?:[^"\\]|\\.)*"
    | (?P<comment>--[^\n]*)
    | (?P<end>;)
    | [^'";-]+
    | .
    """,
    re.VERBOSE | re.DOTALL,
)

_DATABASE_DIRECTIVE = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def _target(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", _DEFAULT_DATABASE)),
    )


def _server_connection(target: DBConfig, *, select_database: bool = True):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if select_database:
        params["database"] = target.database
    return mysql.connector.connect(**params)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Yield the statements of a SQL script, without ``--`` comments."""
    parts: list[str] = []
    for match in _SQL_TOKEN.finditer(sql):
        if match.group("comment"):
            continue
        if match.group("end"):
            statement = "".join(parts).strip()
            parts = []
            if statement:
                yield statement
            continue
        parts.append(match.group(0))

    statement = "".join(parts).strip()
    if statement:
        yield statement


def schema_statements(sql: str) -> list[str]:
    """Statements to run inside the configured database.

    ``CREATE DATABASE`` and ``USE`` lines are dropped so the same file works for
    any database name (dev, test, prod).
    """
    return [stmt for stmt in iter_sql_statements(sql) if not _DATABASE_DIRECTIVE.match(stmt)]


def ensure_database_exists(db_config: dict) -> None:
    target = _target(db_config)
    conn = _server_connection(target, select_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = _server_connection(_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements from %s", len(statements), schema_path)


def list_tables(db_config: dict) -> list[str]:
    conn = _server_connection(_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
