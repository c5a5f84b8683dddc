from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ComposedPeriods, Composition, Period, PeriodSubject, Program


class ProgramRepository(Protocol):
    """Programs own their periods; every write that touches periods is one transaction."""

    def get_by_id(self, program_id: int) -> Optional[Program]:
        raise NotImplementedError

    def list_page(self, *, limit: int, offset: int = 0) -> Sequence[Program]:
        """Oldest first (created_at)."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[Program]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        branch_id: Optional[int],
        description: Optional[str],
        composition: Composition,
    ) -> tuple[int, ComposedPeriods]:
        raise NotImplementedError

    def update(
        self,
        program_id: int,
        *,
        name: str,
        branch_id: Optional[int],
        description: Optional[str],
        composition: Composition,
    ) -> ComposedPeriods:
        raise NotImplementedError

    def replace_periods(self, program_id: int, composition: Composition) -> ComposedPeriods:
        """Drop the program's periods and attachments, then write the composition."""

        raise NotImplementedError

    def list_periods(self, program_id: int) -> Sequence[Period]:
        raise NotImplementedError

    def list_attachments(self, program_id: int) -> Sequence[PeriodSubject]:
        raise NotImplementedError

    def delete_by_id(self, program_id: int) -> bool:
        raise NotImplementedError
