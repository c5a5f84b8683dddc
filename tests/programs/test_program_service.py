import pytest

from src.school_admin.school_admin.core.exceptions import NotFoundError, StorageError, ValidationError
from src.school_admin.school_admin.programs.model import Program
from src.school_admin.school_admin.programs.service import ProgramService
from tests.fakes import InMemoryPrograms


class CountingLookup:
    def __init__(self):
        self.invalidations = 0

    def options(self):
        return {}

    def invalidate(self):
        self.invalidations += 1


def _records():
    return [
        {"type": "period", "name": "Semester 1"},
        {"type": "subject", "id": 1},
        {"type": "subject", "id": 2},
        {"type": "period", "name": "Semester 2"},
        {"type": "subject", "id": 3},
    ]


@pytest.fixture
def programs_repo():
    return InMemoryPrograms([Program(program_id=10, name="Science track")])


@pytest.fixture
def service(programs_repo, subjects_repo, branches_repo):
    return ProgramService(programs_repo, subjects_repo, branches_repo)


def test_compose_periods_persists_periods_and_attachments(service, programs_repo):
    periods, attachments = service.compose_periods(10, _records())

    assert [(p.name, p.ordr) for p in periods] == [("Semester 1", 0), ("Semester 2", 1)]
    first, second = periods
    assert [(a.period_id, a.subject_id, a.ordr) for a in attachments] == [
        (first.period_id, 1, 0),
        (first.period_id, 2, 1),
        (second.period_id, 3, 2),
    ]
    assert all(a.program_id == 10 for a in attachments)
    assert programs_repo.list_periods(10) == list(periods)


def test_recompose_replaces_previous_periods(service, programs_repo):
    service.compose_periods(10, _records())
    service.compose_periods(10, [{"type": "period", "name": "Only"}])

    stored = programs_repo.list_periods(10)
    assert [(p.name, p.ordr) for p in stored] == [("Only", 0)]
    assert programs_repo.list_attachments(10) == []


def test_subject_before_period_persists_nothing(service, programs_repo):
    with pytest.raises(ValidationError):
        service.compose_periods(10, [{"type": "subject", "id": 1}, {"type": "period", "name": "P"}])

    assert programs_repo.write_calls == 0
    assert programs_repo.list_periods(10) == []


def test_unknown_subject_is_rejected_before_writing(service, programs_repo):
    with pytest.raises(ValidationError, match="Unknown subject id"):
        service.compose_periods(10, [{"type": "period", "name": "P"}, {"type": "subject", "id": 99}])

    assert programs_repo.write_calls == 0


def test_unknown_program_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.compose_periods(404, _records())


def test_storage_failure_midway_leaves_previous_state(subjects_repo):
    repo = InMemoryPrograms([Program(program_id=10, name="Science track")])
    service = ProgramService(repo, subjects_repo)
    service.compose_periods(10, [{"type": "period", "name": "Existing"}, {"type": "subject", "id": 4}])
    before = (list(repo.list_periods(10)), list(repo.list_attachments(10)))

    repo.fail_at_period = 3
    records = [{"type": "period", "name": f"P{i}"} for i in range(5)]
    with pytest.raises(StorageError):
        service.compose_periods(10, records)

    assert (list(repo.list_periods(10)), list(repo.list_attachments(10))) == before


def test_create_program_composes_and_invalidates_lookup(programs_repo, subjects_repo, branches_repo):
    lookup = CountingLookup()
    service = ProgramService(programs_repo, subjects_repo, branches_repo, lookup=lookup)

    program_id, composed = service.create_program(
        name="  Humanities ", branch_id="2", description="", periods=_records()
    )

    program = programs_repo.get_by_id(program_id)
    assert program.name == "Humanities"
    assert program.branch_id == 2
    assert program.description is None
    assert len(composed.periods) == 2
    assert len(composed.attachments) == 3
    assert lookup.invalidations == 1


def test_create_program_requires_name_and_known_branch(service, programs_repo):
    with pytest.raises(ValidationError, match="Program name is required"):
        service.create_program(name="  ")
    with pytest.raises(ValidationError, match="Branch does not exist"):
        service.create_program(name="X", branch_id=9)
    assert programs_repo.write_calls == 0


def test_update_keeps_blank_fields_and_clears_missing_periods(service, programs_repo):
    service.compose_periods(10, _records())

    service.update_program(10, name="", branch_id="", description="New text", periods=None)

    program = programs_repo.get_by_id(10)
    assert program.name == "Science track"
    assert program.description == "New text"
    assert programs_repo.list_periods(10) == []


def test_get_periods_returns_nested_ordered_structure(service):
    service.compose_periods(10, _records())

    periods = service.get_periods(10)

    assert [p["name"] for p in periods] == ["Semester 1", "Semester 2"]
    assert [p["ordr"] for p in periods] == [0, 1]
    assert periods[0]["subjects"] == [
        {"id": 1, "name": "Mathematics", "ordr": 0},
        {"id": 2, "name": "Physics", "ordr": 1},
    ]
    assert periods[1]["subjects"] == [{"id": 3, "name": "Literature", "ordr": 2}]


def test_delete_program(service, programs_repo):
    service.compose_periods(10, _records())
    service.delete_program(10)

    assert programs_repo.get_by_id(10) is None
    assert programs_repo.list_periods(10) == []
    with pytest.raises(NotFoundError):
        service.delete_program(10)


def test_list_page_clamps_page_number(service):
    page = service.list_page(7)

    assert page.page == 1
    assert page.pages == 1
    assert page.total == 1
    assert [p.program_id for p in page.items] == [10]
