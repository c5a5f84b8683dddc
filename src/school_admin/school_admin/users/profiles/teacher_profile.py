from __future__ import annotations

from ...associations.repository import AssociationRepository
from ...core.enums import Relation
from ...core.lookups import Lookup
from ..model import User
from .base import ProfileStrategy


class TeacherProfile(ProfileStrategy):
    def __init__(self, associations: AssociationRepository, subjects: Lookup):
        self._associations = associations
        self._subjects = subjects

    def extra_data(self, user: User) -> dict:
        taught = self._associations.list_targets(relation=Relation.SUBJECTS, owner_id=user.user_id)
        return {
            "subjects": self._subjects.options(),
            "teacher_subjects": sorted(taught),
        }
