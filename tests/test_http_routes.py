from types import SimpleNamespace

import pytest
from flask import Flask

from src.school_admin.school_admin.associations.service import AssociationService
from src.school_admin.school_admin.branches import controller as branches_controller
from src.school_admin.school_admin.branches.service import BranchService
from src.school_admin.school_admin.core.enums import Relation, Role
from src.school_admin.school_admin.programs import controller as programs_controller
from src.school_admin.school_admin.programs.model import Program
from src.school_admin.school_admin.programs.service import ProgramService
from src.school_admin.school_admin.users import controller as users_controller
from src.school_admin.school_admin.users.profiles.factory import ProfileFactory
from src.school_admin.school_admin.users.service import UserService
from tests.fakes import InMemoryAssociations, InMemoryPrograms, InMemoryUsers, make_user


class StaticLookup:
    def options(self):
        return {}


@pytest.fixture
def env(subjects_repo, branches_repo):
    users = InMemoryUsers([make_user(1, Role.STUDENT), make_user(2, Role.PARENT), make_user(3, Role.TEACHER)])
    associations = InMemoryAssociations({"users": {1, 2, 3}, "branches": {1, 2}, "subjects": {1, 2, 3, 4}})
    programs = InMemoryPrograms([Program(program_id=10, name="Science track")])
    lookup = StaticLookup()

    association_service = AssociationService(associations, users)
    container = SimpleNamespace(
        lookups=SimpleNamespace(roles=lookup, branches=lookup, programs=lookup, subjects=lookup),
        user_service=UserService(
            users, association_service, ProfileFactory(users=users, associations=associations, subjects=lookup)
        ),
        program_service=ProgramService(programs, subjects_repo, branches_repo),
        branch_service=BranchService(branches_repo),
    )

    app = Flask(__name__)
    app.secret_key = "test"
    app.config["PHOTO_DIR"] = "/tmp"
    users_controller.register(app, container)
    programs_controller.register(app, container)
    branches_controller.register(app, container)

    return SimpleNamespace(
        client=app.test_client(),
        container=container,
        associations=associations,
        programs=programs,
        branches=branches_repo,
    )


def _flashes(client):
    with client.session_transaction() as sess:
        return sess.get("_flashes", [])


def test_program_periods_json(env):
    env.container.program_service.compose_periods(
        10, [{"type": "period", "name": "P1"}, {"type": "subject", "id": 2}]
    )

    resp = env.client.get("/programs/10/periods")

    assert resp.status_code == 200
    assert resp.get_json() == [
        {
            "id": 1,
            "name": "P1",
            "ordr": 0,
            "description": None,
            "subjects": [{"id": 2, "name": "Physics", "ordr": 0}],
        }
    ]


def test_program_periods_json_not_found(env):
    resp = env.client.get("/programs/99/periods")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Program not found"}


def test_program_update_recomposes_and_redirects(env):
    resp = env.client.post(
        "/programs/10",
        data={
            "name": "Science",
            "periods": '[{"type": "period", "name": "Year 1"}, {"type": "subject", "id": 1}]',
        },
    )

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/programs/10")
    assert [p.name for p in env.programs.list_periods(10)] == ["Year 1"]
    assert ("success", "Program was updated successfully!") in _flashes(env.client)


def test_program_update_with_subject_first_flashes_error(env):
    resp = env.client.post("/programs/10", data={"periods": '[{"type": "subject", "id": 1}]'})

    assert resp.status_code == 302
    assert env.programs.write_calls == 0
    assert ("danger", "A subject was listed before any period") in _flashes(env.client)


def test_program_delete_redirects_to_index(env):
    resp = env.client.post("/programs/10/delete")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/programs")
    assert env.programs.get_by_id(10) is None


def test_users_search_json(env):
    resp = env.client.get("/users/search?role=parent")

    assert resp.status_code == 200
    assert [u["id"] for u in resp.get_json()] == [2]


def test_users_search_bad_role(env):
    resp = env.client.get("/users/search?role=janitor")

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid role"}


def test_users_update_family_conflict_is_a_warning(env):
    env.associations.link(Relation.PARENTS, 1, 2)

    resp = env.client.post("/users/1", data={"family_members": '[{"id": 2}]'})

    assert resp.status_code == 302
    assert ("warning", "Family member has already been added") in _flashes(env.client)


def test_users_update_unknown_user_is_404(env):
    assert env.client.post("/users/99", data={}).status_code == 404


def test_users_remove_member(env):
    env.associations.link(Relation.PARENTS, 1, 2)

    resp = env.client.post("/users/1/family/2/remove")

    assert resp.status_code == 302
    assert "tab=family" in resp.headers["Location"]
    assert env.associations.list_targets(relation=Relation.PARENTS, owner_id=1) == set()


def test_users_subjects_replace(env):
    resp = env.client.post("/users/3/subjects", data={"subjects": ["1", "4"]})

    assert resp.status_code == 302
    assert env.associations.list_targets(relation=Relation.SUBJECTS, owner_id=3) == {1, 4}


def test_profile_without_session_redirects(env):
    resp = env.client.get("/profile")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/users")


def test_branch_rename_and_delete(env):
    env.client.post("/branches/1", data={"name": "Central"})
    env.client.post("/branches/2/delete")

    assert env.branches.get_by_id(1).name == "Central"
    assert env.branches.get_by_id(2) is None


def test_branch_rename_unknown_flashes(env):
    resp = env.client.post("/branches/42", data={"name": "Ghost"})

    assert resp.status_code == 302
    assert ("danger", "Branch not found") in _flashes(env.client)
