from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .associations.mysql_association_repository import MySQLAssociationRepository
from .associations.service import AssociationService
from .branches.mysql_branch_repository import MySQLBranchRepository
from .branches.service import BranchService
from .core.constants import ROLE_LABELS
from .core.enums import Role
from .core.lookups import CachedLookup, Lookup, RepositoryLookup
from .database.connection import DatabaseConnection, DBConfig
from .programs.mysql_program_repository import MySQLProgramRepository
from .programs.service import ProgramService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.profiles.factory import ProfileFactory
from .users.service import UserService


@dataclass(frozen=True)
class Lookups:
    """id -> label maps for form dropdowns."""

    roles: Lookup
    branches: Lookup
    programs: Lookup
    subjects: Lookup


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    branches_repo: MySQLBranchRepository
    subjects_repo: MySQLSubjectRepository
    programs_repo: MySQLProgramRepository
    associations_repo: MySQLAssociationRepository

    lookups: Lookups

    association_service: AssociationService
    user_service: UserService
    program_service: ProgramService
    branch_service: BranchService
    subject_service: SubjectService


def build_lookups(
    *,
    branches_repo: MySQLBranchRepository,
    programs_repo: MySQLProgramRepository,
    subjects_repo: MySQLSubjectRepository,
    ttl_seconds: Optional[float] = None,
) -> Lookups:
    def cached(loader) -> CachedLookup:
        return CachedLookup(RepositoryLookup(loader), ttl_seconds=ttl_seconds)

    return Lookups(
        roles=RepositoryLookup(lambda: ((role.value, ROLE_LABELS[role]) for role in Role)),
        branches=cached(lambda: ((b.branch_id, b.name) for b in branches_repo.list_all())),
        programs=cached(lambda: ((p.program_id, p.name) for p in programs_repo.list_all())),
        subjects=cached(lambda: ((s.subject_id, s.name) for s in subjects_repo.list_all())),
    )


def build_container(*, db_config: dict, lookup_ttl: Optional[float] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    branches_repo = MySQLBranchRepository(conn)
    subjects_repo = MySQLSubjectRepository(conn)
    programs_repo = MySQLProgramRepository(conn)
    associations_repo = MySQLAssociationRepository(conn)

    lookups = build_lookups(
        branches_repo=branches_repo,
        programs_repo=programs_repo,
        subjects_repo=subjects_repo,
        ttl_seconds=lookup_ttl,
    )

    association_service = AssociationService(associations_repo, users_repo)
    profiles = ProfileFactory(users=users_repo, associations=associations_repo, subjects=lookups.subjects)
    user_service = UserService(users_repo, association_service, profiles)
    program_service = ProgramService(programs_repo, subjects_repo, branches_repo, lookup=lookups.programs)
    branch_service = BranchService(branches_repo, lookup=lookups.branches)
    subject_service = SubjectService(subjects_repo, lookup=lookups.subjects)

    return Container(
        conn=conn,
        users_repo=users_repo,
        branches_repo=branches_repo,
        subjects_repo=subjects_repo,
        programs_repo=programs_repo,
        associations_repo=associations_repo,
        lookups=lookups,
        association_service=association_service,
        user_service=user_service,
        program_service=program_service,
        branch_service=branch_service,
        subject_service=subject_service,
    )
