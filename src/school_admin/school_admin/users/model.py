from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a person with a login (staff, teacher, student or parent).

    Plain data only; persistence lives in the repositories.
    """

    user_id: int
    display_name: str
    email: str
    password_hash: str
    role: Role
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_picture: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER


@dataclass(frozen=True)
class UserFilters:
    query: Optional[str] = None
    role: Optional[Role] = None
    branch_id: Optional[int] = None


@dataclass(frozen=True)
class StudentSubject:
    """Row of users_subjects for a student."""

    user_id: int
    subject_id: int
    program_id: Optional[int] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class GradeEntry:
    user_id: int
    subject_id: int
    grade_id: int
    score: Optional[Decimal] = None
