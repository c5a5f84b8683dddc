import pytest

from src.school_admin.school_admin.branches.model import Branch
from src.school_admin.school_admin.subjects.model import Subject
from tests.fakes import InMemoryBranches, InMemorySubjects


@pytest.fixture
def subjects_repo() -> InMemorySubjects:
    return InMemorySubjects(
        [
            Subject(subject_id=1, name="Mathematics"),
            Subject(subject_id=2, name="Physics"),
            Subject(subject_id=3, name="Literature"),
            Subject(subject_id=4, name="History"),
        ]
    )


@pytest.fixture
def branches_repo() -> InMemoryBranches:
    return InMemoryBranches([Branch(branch_id=1, name="Main"), Branch(branch_id=2, name="North")])
