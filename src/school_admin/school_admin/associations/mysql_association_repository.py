from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Relation
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .repository import AssociationRepository


@dataclass(frozen=True)
class JoinTable:
    table: str
    owner_col: str
    target_col: str
    target_table: str
    target_pk: str


JOIN_TABLES: dict[Relation, JoinTable] = {
    Relation.BRANCHES: JoinTable("branches_users", "user_id", "branch_id", "branches", "branch_id"),
    Relation.PROGRAMS: JoinTable("programs_users", "user_id", "program_id", "programs", "program_id"),
    Relation.SUBJECTS: JoinTable("users_subjects", "user_id", "subject_id", "subjects", "subject_id"),
    # family_links stores parent_id -> child_id once; each side reads it from its end.
    Relation.PARENTS: JoinTable("family_links", "child_id", "parent_id", "users", "user_id"),
    Relation.CHILDREN: JoinTable("family_links", "parent_id", "child_id", "users", "user_id"),
}


def _locked_targets(cur, jt: JoinTable, owner_id: int) -> set[int]:
    # locking read: concurrent inserts for this owner wait until we commit
    cur.execute(
        f"SELECT {jt.target_col} AS target_id FROM {jt.table} WHERE {jt.owner_col}=%s FOR UPDATE",
        (owner_id,),
    )
    return {int(r["target_id"]) for r in fetchall(cur)}


def _insert_new(cur, jt: JoinTable, owner_id: int, target_ids: Sequence[int]) -> list[int]:
    """Insert links one by one; a row that already exists is skipped.

    Only duplicate keys are skipped. Foreign key failures (a target deleted
    meanwhile) propagate and roll the transaction back.
    """

    inserted: list[int] = []
    for target_id in target_ids:
        try:
            cur.execute(
                f"INSERT INTO {jt.table}({jt.owner_col}, {jt.target_col}) VALUES(%s,%s)",
                (owner_id, int(target_id)),
            )
        except mysql.connector.IntegrityError as exc:
            if exc.errno != errorcode.ER_DUP_ENTRY:
                raise
            continue
        inserted.append(int(target_id))
    return inserted


def _delete_except(cur, jt: JoinTable, owner_id: int, keep_ids: Sequence[int]) -> None:
    placeholders, params = in_clause(int(i) for i in keep_ids)
    if not params:
        cur.execute(f"DELETE FROM {jt.table} WHERE {jt.owner_col}=%s", (owner_id,))
        return
    cur.execute(
        f"DELETE FROM {jt.table} WHERE {jt.owner_col}=%s AND {jt.target_col} NOT IN ({placeholders})",
        (owner_id,) + params,
    )


def _delete(cur, jt: JoinTable, owner_id: int, target_ids: Sequence[int]) -> int:
    placeholders, params = in_clause(int(i) for i in target_ids)
    if not params:
        return 0
    cur.execute(
        f"DELETE FROM {jt.table} WHERE {jt.owner_col}=%s AND {jt.target_col} IN ({placeholders})",
        (owner_id,) + params,
    )
    return int(cur.rowcount)


class MySQLAssociationRepository(AssociationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_targets(self, *, relation: Relation, owner_id: int) -> set[int]:
        jt = JOIN_TABLES[relation]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {jt.target_col} AS target_id FROM {jt.table} WHERE {jt.owner_col}=%s",
                (int(owner_id),),
            )
            return {int(r["target_id"]) for r in fetchall(cur)}

    def existing_targets(self, *, relation: Relation, target_ids: Iterable[int]) -> set[int]:
        jt = JOIN_TABLES[relation]
        placeholders, params = in_clause(int(i) for i in target_ids)
        if not params:
            return set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {jt.target_pk} AS target_id FROM {jt.target_table} WHERE {jt.target_pk} IN ({placeholders})",
                params,
            )
            return {int(r["target_id"]) for r in fetchall(cur)}

    def replace(
        self,
        *,
        relation: Relation,
        owner_id: int,
        target_ids: Sequence[int],
    ) -> tuple[list[int], list[int]]:
        jt = JOIN_TABLES[relation]
        wanted = [int(i) for i in target_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            persisted = _locked_targets(cur, jt, int(owner_id))
            detached = sorted(persisted - set(wanted))
            if detached:
                _delete_except(cur, jt, int(owner_id), wanted)
            attached = _insert_new(cur, jt, int(owner_id), [i for i in wanted if i not in persisted])
            return attached, detached

    def attach(self, *, relation: Relation, owner_id: int, target_ids: Sequence[int]) -> list[int]:
        jt = JOIN_TABLES[relation]
        with db_cursor(self._conn_factory) as (_, cur):
            persisted = _locked_targets(cur, jt, int(owner_id))
            return _insert_new(cur, jt, int(owner_id), [int(i) for i in target_ids if int(i) not in persisted])

    def detach(self, *, relation: Relation, owner_id: int, target_ids: Sequence[int]) -> int:
        jt = JOIN_TABLES[relation]
        with db_cursor(self._conn_factory) as (_, cur):
            return _delete(cur, jt, int(owner_id), target_ids)
