from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..branches.repository import BranchRepository
from ..common.validators import require_int, require_non_empty
from ..core.constants import PAGE_SIZE
from ..core.exceptions import NotFoundError, ValidationError
from ..core.lookups import Lookup, invalidate
from ..subjects.repository import SubjectRepository
from .composer import compose_periods, parse_period_records
from .model import ComposedPeriods, Composition, Period, PeriodSubject, Program
from .repository import ProgramRepository

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramPage:
    items: Sequence[Program]
    page: int
    pages: int
    total: int


class ProgramService:
    """Program CRUD plus the period composer."""

    def __init__(
        self,
        programs: ProgramRepository,
        subjects: SubjectRepository,
        branches: Optional[BranchRepository] = None,
        *,
        lookup: Optional[Lookup] = None,
    ):
        self._programs = programs
        self._subjects = subjects
        self._branches = branches
        self._lookup = lookup

    def list_page(self, page: int = 1) -> ProgramPage:
        total = self._programs.count()
        pages = max(1, math.ceil(total / PAGE_SIZE))
        page = min(max(1, int(page)), pages)
        items = self._programs.list_page(limit=PAGE_SIZE, offset=(page - 1) * PAGE_SIZE)
        return ProgramPage(items=items, page=page, pages=pages, total=total)

    def get(self, program_id: int) -> Program:
        program = self._programs.get_by_id(int(program_id))
        if not program:
            raise NotFoundError("Program not found")
        return program

    def _build_composition(self, raw_periods: Any) -> Composition:
        composition = compose_periods(parse_period_records(raw_periods))

        wanted = composition.subject_ids
        if wanted:
            known = self._subjects.names_for(wanted)
            missing = sorted(wanted - set(known))
            if missing:
                raise ValidationError("Unknown subject id(s): " + ", ".join(str(i) for i in missing))
        return composition

    def _resolve_branch(self, value: Any) -> Optional[int]:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        branch_id = require_int(value, "Branch")
        if self._branches is not None and not self._branches.get_by_id(branch_id):
            raise ValidationError("Branch does not exist")
        return branch_id

    def create_program(
        self,
        *,
        name: str,
        branch_id: Any = None,
        description: str = "",
        periods: Any = None,
    ) -> tuple[int, ComposedPeriods]:
        name = require_non_empty(name, "Program name")
        resolved_branch = self._resolve_branch(branch_id)
        composition = self._build_composition(periods)

        program_id, composed = self._programs.create(
            name=name,
            branch_id=resolved_branch,
            description=(description or "").strip() or None,
            composition=composition,
        )
        invalidate(self._lookup)
        LOGGER.info(
            "Created program %s with %s periods and %s subject attachments",
            program_id,
            len(composed.periods),
            len(composed.attachments),
        )
        return program_id, composed

    def update_program(
        self,
        program_id: int,
        *,
        name: str = "",
        branch_id: Any = None,
        description: str = "",
        periods: Any = None,
    ) -> ComposedPeriods:
        """Blank fields keep their stored value; missing periods clear the program's periods."""

        program = self.get(program_id)
        resolved_branch = self._resolve_branch(branch_id)
        composition = self._build_composition(periods)

        composed = self._programs.update(
            program.program_id,
            name=(name or "").strip() or program.name,
            branch_id=resolved_branch if resolved_branch is not None else program.branch_id,
            description=(description or "").strip() or program.description,
            composition=composition,
        )
        invalidate(self._lookup)
        LOGGER.info("Updated program %s (%s periods)", program.program_id, len(composed.periods))
        return composed

    def compose_periods(
        self, program_id: int, records: Any
    ) -> tuple[tuple[Period, ...], tuple[PeriodSubject, ...]]:
        """Replace the program's periods with the submitted list, all or nothing."""

        program = self.get(program_id)
        composition = self._build_composition(records)
        composed = self._programs.replace_periods(program.program_id, composition)
        LOGGER.info(
            "Composed %s periods and %s attachments for program %s",
            len(composed.periods),
            len(composed.attachments),
            program.program_id,
        )
        return composed.periods, composed.attachments

    def get_periods(self, program_id: int) -> list[dict]:
        """Ordered periods, each with its ordered subjects as {"id", "name"} items."""

        program = self.get(program_id)
        periods = self._programs.list_periods(program.program_id)
        attachments = self._programs.list_attachments(program.program_id)
        names = self._subjects.names_for({a.subject_id for a in attachments})

        by_period: dict[int, list[dict]] = {}
        for a in sorted(attachments, key=lambda a: a.ordr):
            by_period.setdefault(a.period_id, []).append(
                {"id": a.subject_id, "name": names.get(a.subject_id, ""), "ordr": a.ordr}
            )

        return [
            {
                "id": p.period_id,
                "name": p.name,
                "ordr": p.ordr,
                "description": p.description,
                "subjects": by_period.get(p.period_id, []),
            }
            for p in sorted(periods, key=lambda p: p.ordr)
        ]

    def delete_program(self, program_id: int) -> None:
        if not self._programs.delete_by_id(int(program_id)):
            raise NotFoundError("Program not found")
        invalidate(self._lookup)
        LOGGER.info("Deleted program %s", program_id)
