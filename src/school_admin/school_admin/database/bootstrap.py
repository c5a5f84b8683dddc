"""Schema and seed helpers used at startup and by scripts/."""
from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

LOGGER = logging.getLogger(__name__)

DEMO_ACCOUNTS = (
    ("Admin Demo", "admin@school.test", "admin123", "admin"),
    ("Teacher Demo", "teacher@school.test", "teacher123", "teacher"),
    ("Student Demo", "student@school.test", "student123", "student"),
    ("Parent Demo", "parent@school.test", "parent123", "parent"),
)


def _connection(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterator[str]:
    # Split on ';' outside of quoted strings. Good enough for our own .sql files.
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with closing(_connection(db_config).connect()) as conn:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(_connection(db_config).connect(with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    LOGGER.info("Applied %s statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    LOGGER.info("Applied %s seed statements from %s", count, seed_path)


def ensure_demo_accounts(db_config: dict) -> None:
    """Create or reset the demo logins with known passwords."""

    with closing(_connection(db_config).connect()) as conn:
        cur = conn.cursor(dictionary=True)
        for display_name, email, password, role in DEMO_ACCOUNTS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE users SET display_name=%s, password_hash=%s, role=%s, is_active=1 WHERE email=%s",
                    (display_name, password_hash, role, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (display_name, email, password_hash, role)
                    VALUES (%s, %s, %s, %s)
                    """,
                    (display_name, email, password_hash, role),
                )
        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    with closing(_connection(db_config).connect()) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
