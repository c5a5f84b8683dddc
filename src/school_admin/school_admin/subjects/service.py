from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from ..core.lookups import Lookup, invalidate
from .model import Subject
from .repository import SubjectRepository


class SubjectService:
    def __init__(self, subjects: SubjectRepository, lookup: Optional[Lookup] = None):
        self._subjects = subjects
        self._lookup = lookup

    def list_all(self) -> Sequence[Subject]:
        return self._subjects.list_all()

    def get(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def create(self, *, name: str, description: str = "") -> int:
        name = require_non_empty(name, "Subject name")
        subject_id = self._subjects.create(name=name, description=(description or "").strip() or None)
        invalidate(self._lookup)
        return subject_id

    def update(self, subject_id: int, *, name: str, description: str = "") -> None:
        name = require_non_empty(name, "Subject name")
        self.get(subject_id)
        self._subjects.update(int(subject_id), name=name, description=(description or "").strip() or None)
        invalidate(self._lookup)

    def delete(self, subject_id: int) -> None:
        if not self._subjects.delete_by_id(int(subject_id)):
            raise NotFoundError("Subject not found")
        invalidate(self._lookup)
