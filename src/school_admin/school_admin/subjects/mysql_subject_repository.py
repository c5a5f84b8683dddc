from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Subject
from .repository import SubjectRepository


def _row_to_subject(r: dict) -> Subject:
    return Subject(subject_id=int(r["subject_id"]), name=r["name"], description=r.get("description"))


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, name, description FROM subjects ORDER BY name")
            return [_row_to_subject(r) for r in fetchall(cur)]

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, name, description FROM subjects WHERE subject_id=%s",
                (int(subject_id),),
            )
            r = fetchone(cur)
            return _row_to_subject(r) if r else None

    def names_for(self, subject_ids: Iterable[int]) -> dict[int, str]:
        placeholders, params = in_clause(int(i) for i in subject_ids)
        if not params:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT subject_id, name FROM subjects WHERE subject_id IN ({placeholders})",
                params,
            )
            return {int(r["subject_id"]): r["name"] for r in fetchall(cur)}

    def create(self, *, name: str, description: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO subjects(name, description) VALUES(%s,%s)", (name, description))
            return int(cur.lastrowid)

    def update(self, subject_id: int, *, name: str, description: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE subjects SET name=%s, description=%s WHERE subject_id=%s",
                (name, description, int(subject_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (int(subject_id),))
            return cur.rowcount > 0
