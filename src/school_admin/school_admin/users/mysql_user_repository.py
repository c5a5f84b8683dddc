from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import GradeEntry, StudentSubject, User, UserFilters
from .repository import UserRepository

USER_COLUMNS = (
    "user_id",
    "display_name",
    "email",
    "password_hash",
    "role",
    "phone",
    "address",
    "profile_picture",
    "is_active",
    "created_at",
)
_SELECT = ", ".join(USER_COLUMNS)
_SELECT_U = ", ".join("u." + c for c in USER_COLUMNS)

# Columns the service may write; anything else in `fields` is ignored.
WRITABLE_COLUMNS = (
    "display_name",
    "email",
    "password_hash",
    "role",
    "phone",
    "address",
    "profile_picture",
)


def _row_to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        display_name=r["display_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        phone=r.get("phone"),
        address=r.get("address"),
        profile_picture=r.get("profile_picture"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


def _writable(fields: dict) -> dict:
    out = {}
    for key in WRITABLE_COLUMNS:
        if key in fields:
            value = fields[key]
            out[key] = value.value if isinstance(value, Role) else value
    return out


def _where(filters: UserFilters) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []

    if filters.query:
        clauses.append("(u.display_name LIKE %s OR u.email LIKE %s)")
        like = f"%{filters.query}%"
        params.extend([like, like])
    if filters.role is not None:
        clauses.append("u.role=%s")
        params.append(filters.role.value)
    if filters.branch_id is not None:
        clauses.append("EXISTS (SELECT 1 FROM branches_users bu WHERE bu.user_id=u.user_id AND bu.branch_id=%s)")
        params.append(int(filters.branch_id))

    return " AND ".join(clauses), params


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SELECT} FROM users WHERE email=%s", (email,))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def create_user(self, *, fields: dict) -> int:
        values = _writable(fields)
        columns = ", ".join(values)
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO users({columns}, is_active) VALUES({placeholders}, 1)",
                tuple(values.values()),
            )
            return int(cur.lastrowid)

    def update_user(self, user_id: int, *, fields: dict) -> bool:
        values = _writable(fields)
        if not values:
            return True
        assignments = ", ".join(f"{col}=%s" for col in values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                tuple(values.values()) + (int(user_id),),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def search(
        self,
        filters: UserFilters,
        *,
        limit: int,
        offset: int = 0,
        newest_first: bool = False,
    ) -> Sequence[User]:
        where, params = _where(filters)
        direction = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SELECT_U}
                FROM users u
                WHERE {where}
                ORDER BY u.created_at {direction}, u.user_id {direction}
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def count(self, filters: UserFilters) -> int:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM users u WHERE {where}", tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_subject_pivot(self, user_id: int) -> Sequence[StudentSubject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, subject_id, program_id, status
                FROM users_subjects
                WHERE user_id=%s
                ORDER BY subject_id
                """,
                (int(user_id),),
            )
            return [
                StudentSubject(
                    user_id=int(r["user_id"]),
                    subject_id=int(r["subject_id"]),
                    program_id=r.get("program_id"),
                    status=r.get("status"),
                )
                for r in fetchall(cur)
            ]

    def list_grades(self, user_id: int) -> Sequence[GradeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, subject_id, grade_id, score
                FROM users_grades
                WHERE user_id=%s
                ORDER BY subject_id, grade_id
                """,
                (int(user_id),),
            )
            return [
                GradeEntry(
                    user_id=int(r["user_id"]),
                    subject_id=int(r["subject_id"]),
                    grade_id=int(r["grade_id"]),
                    score=r.get("score"),
                )
                for r in fetchall(cur)
            ]
