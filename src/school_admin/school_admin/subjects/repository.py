from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def list_all(self) -> Sequence[Subject]:
        raise NotImplementedError

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def names_for(self, subject_ids: Iterable[int]) -> dict[int, str]:
        """Map the given ids to subject names; unknown ids are left out."""

        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str] = None) -> int:
        raise NotImplementedError

    def update(self, subject_id: int, *, name: str, description: Optional[str] = None) -> bool:
        raise NotImplementedError

    def delete_by_id(self, subject_id: int) -> bool:
        raise NotImplementedError
