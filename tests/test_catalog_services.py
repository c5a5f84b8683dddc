import pytest

from src.school_admin.school_admin.branches.service import BranchService
from src.school_admin.school_admin.core.exceptions import NotFoundError, ValidationError
from src.school_admin.school_admin.subjects.service import SubjectService


def test_branch_crud(branches_repo):
    service = BranchService(branches_repo)

    branch_id = service.create(name="  South ")
    assert service.get(branch_id).name == "South"

    service.rename(branch_id, name="South Campus")
    assert [b.name for b in service.list_all()] == ["Main", "North", "South Campus"]

    service.delete(branch_id)
    with pytest.raises(NotFoundError):
        service.get(branch_id)


def test_branch_requires_name(branches_repo):
    service = BranchService(branches_repo)

    with pytest.raises(ValidationError, match="Branch name is required"):
        service.create(name="")
    with pytest.raises(ValidationError):
        service.rename(1, name=" ")


def test_branch_unknown_ids(branches_repo):
    service = BranchService(branches_repo)

    with pytest.raises(NotFoundError):
        service.rename(9, name="X")
    with pytest.raises(NotFoundError):
        service.delete(9)


def test_subject_crud(subjects_repo):
    service = SubjectService(subjects_repo)

    subject_id = service.create(name="Chemistry", description=" Lab work ")
    subject = service.get(subject_id)
    assert subject.description == "Lab work"

    service.update(subject_id, name="Chemistry II", description="")
    assert service.get(subject_id).description is None

    service.delete(subject_id)
    with pytest.raises(NotFoundError):
        service.delete(subject_id)


def test_subject_requires_name(subjects_repo):
    with pytest.raises(ValidationError, match="Subject name is required"):
        SubjectService(subjects_repo).create(name="   ")
