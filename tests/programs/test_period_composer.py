import json

import pytest

from src.school_admin.school_admin.core.exceptions import ValidationError
from src.school_admin.school_admin.programs.composer import compose_periods, parse_period_records


def _compose(raw):
    return compose_periods(parse_period_records(raw))


def test_period_orders_follow_submission_order():
    composition = _compose(
        [
            {"type": "period", "name": "Semester 1"},
            {"type": "period", "name": "Semester 2"},
            {"type": "period", "name": "Summer"},
        ]
    )

    assert [(p.name, p.ordr) for p in composition.periods] == [
        ("Semester 1", 0),
        ("Semester 2", 1),
        ("Summer", 2),
    ]


def test_subjects_attach_to_closest_period_above():
    composition = _compose(
        json.dumps(
            [
                {"type": "period", "name": "P1"},
                {"type": "subject", "id": 7},
                {"type": "period", "name": "P2"},
                {"type": "subject", "id": 8},
                {"type": "subject", "id": 9},
            ]
        )
    )

    p1, p2 = composition.periods
    assert [(a.subject_id, a.ordr) for a in p1.subjects] == [(7, 0)]
    # attachment order counts across the whole program
    assert [(a.subject_id, a.ordr) for a in p2.subjects] == [(8, 1), (9, 2)]
    assert composition.attachment_count == 3
    assert composition.subject_ids == {7, 8, 9}


def test_same_subject_may_appear_in_different_periods():
    composition = _compose(
        [
            {"type": "period", "name": "P1"},
            {"type": "subject", "id": 4},
            {"type": "period", "name": "P2"},
            {"type": "subject", "id": "4"},
        ]
    )

    assert [a.subject_id for p in composition.periods for a in p.subjects] == [4, 4]


def test_subject_before_any_period_is_rejected():
    with pytest.raises(ValidationError, match="before any period"):
        _compose([{"type": "subject", "id": 4}, {"type": "period", "name": "P1"}])


def test_duplicate_subject_in_one_period_is_rejected():
    with pytest.raises(ValidationError, match="listed twice"):
        _compose(
            [
                {"type": "period", "name": "P1"},
                {"type": "subject", "id": 4},
                {"type": "subject", "id": 4},
            ]
        )


def test_empty_submission_gives_empty_composition():
    assert _compose("").periods == ()
    assert _compose(None).periods == ()
    assert _compose("[]").periods == ()


def test_period_description_is_kept_and_blank_becomes_none():
    composition = _compose(
        [
            {"type": "period", "name": " Year 1 ", "description": "Basics"},
            {"type": "period", "name": "Year 2", "description": "  "},
        ]
    )

    assert composition.periods[0].name == "Year 1"
    assert composition.periods[0].description == "Basics"
    assert composition.periods[1].description is None


@pytest.mark.parametrize(
    "raw, message",
    [
        ("{not json", "invalid JSON"),
        ('{"type": "period"}', "must be a list"),
        (["period"], "malformed"),
        ([{"type": "module", "name": "X"}], "unknown type"),
        ([{"type": "period", "name": "  "}], "needs a name"),
        ([{"type": "period", "name": "P"}, {"type": "subject", "id": "abc"}], "not a valid id"),
        ([{"type": "period", "name": "P"}, {"type": "subject"}], "not a valid id"),
        ([{"type": "period", "name": "P"}, {"type": "subject", "id": 2.9}], "not a valid id"),
    ],
)
def test_malformed_input_is_a_validation_error(raw, message):
    with pytest.raises(ValidationError, match=message):
        _compose(raw)
