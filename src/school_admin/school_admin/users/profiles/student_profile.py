from __future__ import annotations

from typing import Iterable

from ...core.lookups import Lookup
from ..model import GradeEntry, User
from ..repository import UserRepository
from .base import ProfileStrategy


def group_grades(entries: Iterable[GradeEntry]) -> dict[int, list[GradeEntry]]:
    """Group grade entries by subject, each group sorted by grade_id."""

    grouped: dict[int, list[GradeEntry]] = {}
    for entry in sorted(entries, key=lambda e: (e.subject_id, e.grade_id)):
        grouped.setdefault(entry.subject_id, []).append(entry)
    return grouped


class StudentProfile(ProfileStrategy):
    def __init__(self, users: UserRepository, subjects: Lookup):
        self._users = users
        self._subjects = subjects

    def extra_data(self, user: User) -> dict:
        return {
            "subjects": self._subjects.options(),
            "user_subjects_pivot": list(self._users.list_subject_pivot(user.user_id)),
            "student_grades": group_grades(self._users.list_grades(user.user_id)),
        }
