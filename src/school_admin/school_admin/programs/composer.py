"""Turn the flat period/subject list from the program form into ordered drafts.

The form submits something like::

    [{"type": "period", "name": "Semester 1"},
     {"type": "subject", "id": 4},
     {"type": "subject", "id": 9},
     {"type": "period", "name": "Semester 2"},
     {"type": "subject", "id": 4}]

Subjects belong to the closest period above them. Periods get contiguous
orders from 0; attachments get their own program-wide counter from 0.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Optional

from ..common.validators import require_int
from ..core.enums import PeriodRecordType
from ..core.exceptions import ValidationError
from .model import AttachmentDraft, Composition, PeriodDraft, PeriodRecord


def _parse_record(index: int, item: Any) -> PeriodRecord:
    if not isinstance(item, dict):
        raise ValidationError(f"Period entry #{index + 1} is malformed")

    try:
        kind = PeriodRecordType(item.get("type"))
    except ValueError:
        raise ValidationError(f"Period entry #{index + 1} has unknown type {item.get('type')!r}")

    if kind == PeriodRecordType.PERIOD:
        name = str(item.get("name") or "").strip()
        if not name:
            raise ValidationError(f"Period entry #{index + 1} needs a name")
        description = str(item.get("description") or "").strip() or None
        return PeriodRecord(kind=kind, name=name, description=description)

    subject_id = require_int(item.get("id"), f"Subject in entry #{index + 1}")
    return PeriodRecord(kind=kind, subject_id=subject_id)


def parse_period_records(raw: Any) -> list[PeriodRecord]:
    """Accept the JSON string from the form (or an already decoded list)."""

    if raw is None or raw == "" or raw == []:
        return []

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError("Periods could not be read (invalid JSON)")

    if not isinstance(raw, list):
        raise ValidationError("Periods must be a list")

    return [item if isinstance(item, PeriodRecord) else _parse_record(i, item) for i, item in enumerate(raw)]


def _current_period(periods: list[PeriodDraft]) -> Optional[PeriodDraft]:
    return periods[-1] if periods else None


def compose_periods(records: Iterable[PeriodRecord]) -> Composition:
    periods: list[PeriodDraft] = []
    attachment_order = 0

    for record in records:
        if record.kind == PeriodRecordType.PERIOD:
            periods.append(
                PeriodDraft(name=str(record.name), ordr=len(periods), description=record.description)
            )
            continue

        current = _current_period(periods)
        if current is None:
            raise ValidationError("A subject was listed before any period")

        if any(a.subject_id == record.subject_id for a in current.subjects):
            raise ValidationError(f"Subject {record.subject_id} is listed twice in period {current.name!r}")

        current.subjects.append(AttachmentDraft(subject_id=int(record.subject_id), ordr=attachment_order))
        attachment_order += 1

    return Composition(periods=tuple(periods))
