from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..associations.model import SyncResult
from ..associations.service import AssociationService, already_linked, family_relation_for
from ..common.validators import filter_filled, require_int, require_min_length, require_non_empty
from ..core.constants import DEFAULT_PROFILE_TAB, FAMILY_RELATION, MIN_PASSWORD_LENGTH, PAGE_SIZE, QUICK_SEARCH_LIMIT
from ..core.enums import Relation, Role, SyncMode
from ..core.exceptions import NotFoundError, ValidationError
from .model import User, UserFilters
from .profiles.factory import ProfileFactory
from .repository import UserRepository

LOGGER = logging.getLogger(__name__)

FILLABLE = ("display_name", "email", "role", "phone", "address", "profile_picture")


@dataclass(frozen=True)
class UserPage:
    items: Sequence[User]
    page: int
    pages: int
    total: int


@dataclass(frozen=True)
class UserUpdateResult:
    branches: SyncResult
    programs: SyncResult
    family: Optional[SyncResult] = None


@dataclass(frozen=True)
class ProfileView:
    """Everything the profile page shows for one user."""

    user: User
    tab: str
    user_branches: list[int]
    user_programs: list[int]
    family_members: list[int]
    extras: dict = field(default_factory=dict)


def parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid role")


def parse_family_members(raw: Any) -> list[int]:
    """The family widget posts JSON like [{"id": 7, "display_name": "..."}]."""

    if raw is None or raw == "" or raw == []:
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise ValidationError("Family members could not be read (invalid JSON)")
    if not isinstance(raw, list):
        raise ValidationError("Family members must be a list")

    ids: list[int] = []
    for member in raw:
        value = member.get("id") if isinstance(member, dict) else member
        member_id = require_int(value, "Family member")
        if member_id not in ids:
            ids.append(member_id)
    return ids


def parse_filters(args: Mapping[str, Any]) -> UserFilters:
    query = (args.get("q") or "").strip() or None
    role_s = (args.get("role") or "").strip()
    branch_s = (args.get("branch_id") or "").strip()
    return UserFilters(
        query=query,
        role=parse_role(role_s) if role_s else None,
        branch_id=require_int(branch_s, "Branch") if branch_s else None,
    )


class UserService:
    """Use case: manage users and their links (admin back office)."""

    def __init__(self, users: UserRepository, associations: AssociationService, profiles: ProfileFactory):
        self._users = users
        self._associations = associations
        self._profiles = profiles

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _clean(self, data: Mapping[str, Any]) -> dict:
        fields = filter_filled(dict(data), FILLABLE)
        if "role" in fields:
            fields["role"] = parse_role(fields["role"])
        if "email" in fields:
            fields["email"] = str(fields["email"]).lower()

        password = data.get("password") or ""
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(password)
        return fields

    def _ensure_email_free(self, email: str, *, user_id: Optional[int] = None) -> None:
        other = self._users.get_by_email(email)
        if other and other.user_id != user_id:
            raise ValidationError("Email is already in use")

    def create_user(self, data: Mapping[str, Any], *, branches: Optional[Iterable[Any]] = None) -> int:
        fields = self._clean(data)
        fields["display_name"] = require_non_empty(fields.get("display_name", ""), "Display name")
        fields["email"] = require_non_empty(fields.get("email", ""), "Email")
        if "password_hash" not in fields:
            raise ValidationError("Password is required")
        fields.setdefault("role", Role.STUDENT)
        self._ensure_email_free(fields["email"])

        branch_ids = self._associations.validate_ids(Relation.BRANCHES, branches)

        user_id = self._users.create_user(fields=fields)
        if branch_ids:
            self._associations.sync_association(user_id, Relation.BRANCHES, branch_ids, SyncMode.REPLACE)

        LOGGER.info("Created user %s (%s)", user_id, fields["role"].value)
        return user_id

    def update_user(
        self,
        user_id: int,
        data: Mapping[str, Any],
        *,
        branches: Optional[Iterable[Any]] = None,
        programs: Optional[Iterable[Any]] = None,
        family_members: Any = None,
    ) -> UserUpdateResult:
        """Apply a profile form submission.

        Every id is checked before the first write, so a rejected submission
        changes nothing. Family members are only ever added here. Branches and
        programs are replaced by what was submitted (nothing submitted clears
        them). An already linked family member is an error only when adding
        that one member is all the submission does.
        """

        user = self.get(user_id)
        fields = self._clean(data)
        if "email" in fields:
            self._ensure_email_free(fields["email"], user_id=user.user_id)
        changes = {key: value for key, value in fields.items() if getattr(user, key) != value}

        # family side follows the role the user ends up with
        family_relation = family_relation_for(replace(user, **changes))
        family_ids = self._associations.validate_ids(
            family_relation, parse_family_members(family_members), owner_id=user.user_id
        )
        branch_ids = self._associations.validate_ids(Relation.BRANCHES, branches)
        program_ids = self._associations.validate_ids(Relation.PROGRAMS, programs)

        if changes:
            self._users.update_user(user.user_id, fields=changes)

        family_result = None
        if family_ids:
            family_result = self._associations.sync_association(
                user.user_id, family_relation, family_ids, SyncMode.ADDITIVE
            )
        branches_result = self._associations.sync_association(
            user.user_id, Relation.BRANCHES, branch_ids, SyncMode.REPLACE
        )
        programs_result = self._associations.sync_association(
            user.user_id, Relation.PROGRAMS, program_ids, SyncMode.REPLACE
        )

        family_only = not changes and not branches_result.changed and not programs_result.changed
        if len(family_ids) == 1 and family_result.skipped and family_only:
            raise already_linked(family_relation, family_ids[0])

        return UserUpdateResult(branches=branches_result, programs=programs_result, family=family_result)

    def sync_subjects(self, user_id: int, subject_ids: Optional[Iterable[Any]]) -> SyncResult:
        return self._associations.sync_association(user_id, Relation.SUBJECTS, subject_ids or [], SyncMode.REPLACE)

    def remove_family_member(self, user_id: int, member_id: Any) -> None:
        self._associations.remove_single_association(user_id, FAMILY_RELATION, member_id)

    def delete_user(self, user_id: int) -> None:
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
        LOGGER.info("Deleted user %s", user_id)

    def list_page(self, filters: UserFilters, page: int = 1) -> UserPage:
        total = self._users.count(filters)
        pages = max(1, math.ceil(total / PAGE_SIZE))
        page = min(max(1, int(page)), pages)
        items = self._users.search(filters, limit=PAGE_SIZE, offset=(page - 1) * PAGE_SIZE)
        return UserPage(items=items, page=page, pages=pages, total=total)

    def quick_search(self, filters: UserFilters) -> list[dict]:
        users = self._users.search(filters, limit=QUICK_SEARCH_LIMIT, newest_first=True)
        return [
            {"id": u.user_id, "display_name": u.display_name, "profile_picture": u.profile_picture}
            for u in users
        ]

    def profile_view(self, user_id: int, *, tab: Optional[str] = None) -> ProfileView:
        user = self.get(user_id)
        strategy = self._profiles.for_user(user)
        return ProfileView(
            user=user,
            tab=tab or DEFAULT_PROFILE_TAB,
            user_branches=sorted(self._associations.linked_ids(user.user_id, Relation.BRANCHES)),
            user_programs=sorted(self._associations.linked_ids(user.user_id, Relation.PROGRAMS)),
            family_members=sorted(self._associations.linked_ids(user.user_id, FAMILY_RELATION)),
            extras=strategy.extra_data(user),
        )
