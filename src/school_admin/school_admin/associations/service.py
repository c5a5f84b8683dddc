from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..common.validators import parse_id_list, require_int
from ..core.constants import FAMILY_RELATION
from ..core.enums import Relation, Role, SyncMode
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import SyncResult
from .repository import AssociationRepository

LOGGER = logging.getLogger(__name__)

FAMILY_RELATIONS = {Relation.PARENTS, Relation.CHILDREN}
SUBJECT_ROLES = {Role.TEACHER, Role.STUDENT}


def family_relation_for(user: User) -> Relation:
    """Students look up their parents; everyone else looks up their children."""

    return Relation.PARENTS if user.is_student else Relation.CHILDREN


def default_mode(relation: Relation) -> SyncMode:
    return SyncMode.ADDITIVE if relation in FAMILY_RELATIONS else SyncMode.REPLACE


def already_linked(relation: Relation, target_id: int) -> ConflictError:
    if relation in FAMILY_RELATIONS:
        return ConflictError("Family member has already been added")
    return ConflictError(f"{relation.value} {target_id} is already linked")


class AssociationService:
    """Reconcile a user's many-to-many links with a submitted id set."""

    def __init__(self, associations: AssociationRepository, users: UserRepository):
        self._associations = associations
        self._users = users

    def _get_owner(self, entity_id: Any) -> User:
        user = self._users.get_by_id(require_int(entity_id, "User"))
        if not user:
            raise NotFoundError("User not found")
        return user

    def resolve_relation(self, user: User, relation_name: str | Relation) -> Relation:
        if relation_name == FAMILY_RELATION:
            return family_relation_for(user)
        try:
            relation = Relation(relation_name)
        except ValueError:
            raise ValidationError(f"Unknown relation {relation_name!r}")

        if relation == Relation.SUBJECTS and user.role not in SUBJECT_ROLES:
            raise ValidationError("Only teachers and students have subjects")
        return relation

    def validate_ids(
        self,
        relation: Relation,
        submitted_ids: Optional[Iterable[Any]],
        *,
        owner_id: Optional[int] = None,
    ) -> list[int]:
        """Parse submitted ids and make sure every one of them exists, without writing anything."""

        ids = parse_id_list(submitted_ids, relation.value)
        self._check_targets(owner_id, relation, ids)
        return ids

    def _check_targets(self, owner_id: Optional[int], relation: Relation, ids: list[int]) -> None:
        if owner_id is not None and relation in FAMILY_RELATIONS and owner_id in ids:
            raise ValidationError("A user cannot be their own family member")

        if not ids:
            return
        existing = self._associations.existing_targets(relation=relation, target_ids=ids)
        missing = [i for i in ids if i not in existing]
        if missing:
            raise ValidationError(
                f"Unknown {relation.value} id(s): " + ", ".join(str(i) for i in missing)
            )

    def linked_ids(self, entity_id: Any, relation_name: str | Relation) -> set[int]:
        user = self._get_owner(entity_id)
        relation = self.resolve_relation(user, relation_name)
        return self._associations.list_targets(relation=relation, owner_id=user.user_id)

    def sync_association(
        self,
        entity_id: Any,
        relation_name: str | Relation,
        submitted_ids: Optional[Iterable[Any]],
        mode: Optional[SyncMode | str] = None,
        *,
        strict: bool = False,
    ) -> SyncResult:
        """Make the stored links match submitted_ids (REPLACE) or include them (ADDITIVE).

        In ADDITIVE mode links that already exist are skipped, never an error,
        unless strict is set and the batch is a single member.
        """

        user = self._get_owner(entity_id)
        relation = self.resolve_relation(user, relation_name)
        try:
            mode = SyncMode(mode) if mode else default_mode(relation)
        except ValueError:
            raise ValidationError(f"Unknown sync mode {mode!r}")

        ids = parse_id_list(submitted_ids, relation.value)
        self._check_targets(user.user_id, relation, ids)

        if mode == SyncMode.REPLACE:
            attached, detached = self._associations.replace(
                relation=relation, owner_id=user.user_id, target_ids=ids
            )
            result = SyncResult(attached=tuple(attached), detached=tuple(detached))
        else:
            persisted = self._associations.list_targets(relation=relation, owner_id=user.user_id)
            to_attach = [i for i in ids if i not in persisted]
            inserted = (
                self._associations.attach(relation=relation, owner_id=user.user_id, target_ids=to_attach)
                if to_attach
                else []
            )
            skipped = [i for i in ids if i not in inserted]
            if strict and len(ids) == 1 and skipped:
                raise already_linked(relation, ids[0])
            result = SyncResult(attached=tuple(inserted), skipped=tuple(skipped))

        if result.changed:
            LOGGER.info(
                "Synced %s for user %s (%s): +%s -%s",
                relation.value,
                user.user_id,
                mode.value,
                list(result.attached),
                list(result.detached),
            )
        return result

    def remove_single_association(self, entity_id: Any, relation_name: str | Relation, target_id: Any) -> None:
        """Detach one link. Succeeds whether or not the link existed."""

        user = self._get_owner(entity_id)
        relation = self.resolve_relation(user, relation_name)
        target = require_int(target_id, relation.value)
        removed = self._associations.detach(relation=relation, owner_id=user.user_id, target_ids=[target])
        if removed:
            LOGGER.info("Removed %s %s from user %s", relation.value, target, user.user_id)
