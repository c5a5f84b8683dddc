from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles. ADMIN and MANAGER form the staff class."""

    ADMIN = "admin"
    MANAGER = "manager"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"

    @property
    def is_staff(self) -> bool:
        return self in {Role.ADMIN, Role.MANAGER}


class SyncMode(str, Enum):
    """How a submitted id set is reconciled with the stored one."""

    REPLACE = "replace"
    ADDITIVE = "additive"


class Relation(str, Enum):
    """Many-to-many relations a user owns.

    PARENTS and CHILDREN are the two sides of the same family_links table.
    """

    BRANCHES = "branches"
    PROGRAMS = "programs"
    SUBJECTS = "subjects"
    PARENTS = "parents"
    CHILDREN = "children"


class PeriodRecordType(str, Enum):
    PERIOD = "period"
    SUBJECT = "subject"
