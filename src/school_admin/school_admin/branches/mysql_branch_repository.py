from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Branch
from .repository import BranchRepository


class MySQLBranchRepository(BranchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT branch_id, name FROM branches ORDER BY name")
            rows = fetchall(cur)
            return [Branch(branch_id=int(r["branch_id"]), name=r["name"]) for r in rows]

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT branch_id, name FROM branches WHERE branch_id=%s", (int(branch_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Branch(branch_id=int(r["branch_id"]), name=r["name"])

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO branches(name) VALUES(%s)", (name,))
            return int(cur.lastrowid)

    def rename(self, branch_id: int, *, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE branches SET name=%s WHERE branch_id=%s", (name, int(branch_id)))
            return cur.rowcount > 0

    def delete_by_id(self, branch_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM branches WHERE branch_id=%s", (int(branch_id),))
            return cur.rowcount > 0
