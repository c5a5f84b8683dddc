from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ComposedPeriods, Composition, Period, PeriodSubject, Program
from .repository import ProgramRepository


def _row_to_program(r: dict) -> Program:
    return Program(
        program_id=int(r["program_id"]),
        name=r["name"],
        branch_id=r.get("branch_id"),
        description=r.get("description"),
        created_at=r.get("created_at"),
    )


def _write_composition(cur, program_id: int, composition: Composition) -> ComposedPeriods:
    periods: list[Period] = []
    attachments: list[PeriodSubject] = []

    for draft in composition.periods:
        cur.execute(
            "INSERT INTO periods(program_id, name, ordr, description) VALUES(%s,%s,%s,%s)",
            (program_id, draft.name, draft.ordr, draft.description),
        )
        period = Period(
            period_id=int(cur.lastrowid),
            program_id=program_id,
            name=draft.name,
            ordr=draft.ordr,
            description=draft.description,
        )
        periods.append(period)

        for attachment in draft.subjects:
            cur.execute(
                """
                INSERT INTO periods_subjects(period_id, subject_id, program_id, ordr)
                VALUES(%s,%s,%s,%s)
                """,
                (period.period_id, attachment.subject_id, program_id, attachment.ordr),
            )
            attachments.append(
                PeriodSubject(
                    period_id=period.period_id,
                    subject_id=attachment.subject_id,
                    program_id=program_id,
                    ordr=attachment.ordr,
                )
            )

    return ComposedPeriods(periods=tuple(periods), attachments=tuple(attachments))


def _clear_periods(cur, program_id: int) -> None:
    cur.execute("DELETE FROM periods_subjects WHERE program_id=%s", (program_id,))
    cur.execute("DELETE FROM periods WHERE program_id=%s", (program_id,))


class MySQLProgramRepository(ProgramRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, program_id: int) -> Optional[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT program_id, name, branch_id, description, created_at
                FROM programs
                WHERE program_id=%s
                """,
                (int(program_id),),
            )
            r = fetchone(cur)
            return _row_to_program(r) if r else None

    def list_page(self, *, limit: int, offset: int = 0) -> Sequence[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT program_id, name, branch_id, description, created_at
                FROM programs
                ORDER BY created_at ASC, program_id ASC
                LIMIT %s OFFSET %s
                """,
                (int(limit), int(offset)),
            )
            return [_row_to_program(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM programs")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_all(self) -> Sequence[Program]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT program_id, name, branch_id, description, created_at FROM programs ORDER BY name")
            return [_row_to_program(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        branch_id: Optional[int],
        description: Optional[str],
        composition: Composition,
    ) -> tuple[int, ComposedPeriods]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO programs(name, branch_id, description) VALUES(%s,%s,%s)",
                (name, branch_id, description),
            )
            program_id = int(cur.lastrowid)
            return program_id, _write_composition(cur, program_id, composition)

    def update(
        self,
        program_id: int,
        *,
        name: str,
        branch_id: Optional[int],
        description: Optional[str],
        composition: Composition,
    ) -> ComposedPeriods:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE programs SET name=%s, branch_id=%s, description=%s WHERE program_id=%s",
                (name, branch_id, description, int(program_id)),
            )
            _clear_periods(cur, int(program_id))
            return _write_composition(cur, int(program_id), composition)

    def replace_periods(self, program_id: int, composition: Composition) -> ComposedPeriods:
        with db_cursor(self._conn_factory) as (_, cur):
            _clear_periods(cur, int(program_id))
            return _write_composition(cur, int(program_id), composition)

    def list_periods(self, program_id: int) -> Sequence[Period]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT period_id, program_id, name, ordr, description
                FROM periods
                WHERE program_id=%s
                ORDER BY ordr ASC
                """,
                (int(program_id),),
            )
            return [
                Period(
                    period_id=int(r["period_id"]),
                    program_id=int(r["program_id"]),
                    name=r["name"],
                    ordr=int(r["ordr"]),
                    description=r.get("description"),
                )
                for r in fetchall(cur)
            ]

    def list_attachments(self, program_id: int) -> Sequence[PeriodSubject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT period_id, subject_id, program_id, ordr
                FROM periods_subjects
                WHERE program_id=%s
                ORDER BY ordr ASC
                """,
                (int(program_id),),
            )
            return [
                PeriodSubject(
                    period_id=int(r["period_id"]),
                    subject_id=int(r["subject_id"]),
                    program_id=int(r["program_id"]),
                    ordr=int(r["ordr"]),
                )
                for r in fetchall(cur)
            ]

    def delete_by_id(self, program_id: int) -> bool:
        # periods and periods_subjects go with it (ON DELETE CASCADE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM programs WHERE program_id=%s", (int(program_id),))
            return cur.rowcount > 0
