from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import PeriodRecordType


@dataclass(frozen=True)
class Program:
    program_id: int
    name: str
    branch_id: Optional[int] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Period:
    period_id: int
    program_id: int
    name: str
    ordr: int
    description: Optional[str] = None


@dataclass(frozen=True)
class PeriodSubject:
    """Pivot row linking a subject to a period, ordered within the program."""

    period_id: int
    subject_id: int
    program_id: int
    ordr: int


@dataclass(frozen=True)
class PeriodRecord:
    """One entry of the flat list submitted by the program form."""

    kind: PeriodRecordType
    name: Optional[str] = None
    description: Optional[str] = None
    subject_id: Optional[int] = None


@dataclass(frozen=True)
class AttachmentDraft:
    subject_id: int
    ordr: int


@dataclass
class PeriodDraft:
    name: str
    ordr: int
    description: Optional[str] = None
    subjects: list[AttachmentDraft] = field(default_factory=list)


@dataclass(frozen=True)
class Composition:
    """Periods and attachments ready to be written, orders already assigned."""

    periods: tuple[PeriodDraft, ...] = ()

    @property
    def attachment_count(self) -> int:
        return sum(len(p.subjects) for p in self.periods)

    @property
    def subject_ids(self) -> set[int]:
        return {a.subject_id for p in self.periods for a in p.subjects}


@dataclass(frozen=True)
class ComposedPeriods:
    """What the repository persisted for a composition."""

    periods: tuple[Period, ...] = ()
    attachments: tuple[PeriodSubject, ...] = ()
