from __future__ import annotations

from dataclasses import dataclass

from ...associations.repository import AssociationRepository
from ...core.lookups import Lookup
from ..model import User
from ..repository import UserRepository
from .base import ProfileStrategy
from .basic_profile import BasicProfile
from .staff_profile import StaffProfile
from .student_profile import StudentProfile
from .teacher_profile import TeacherProfile


@dataclass
class ProfileFactory:
    """Factory Pattern: pick the profile strategy once per request from the user's role."""

    users: UserRepository
    associations: AssociationRepository
    subjects: Lookup

    def for_user(self, user: User) -> ProfileStrategy:
        if user.role.is_staff:
            return StaffProfile(self.subjects)
        if user.is_teacher:
            return TeacherProfile(self.associations, self.subjects)
        if user.is_student:
            return StudentProfile(self.users, self.subjects)
        return BasicProfile()
