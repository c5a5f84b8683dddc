from __future__ import annotations

from ...core.lookups import Lookup
from ..model import User
from .base import ProfileStrategy


class StaffProfile(ProfileStrategy):
    """Admins and managers get the subject catalogue to assign from."""

    def __init__(self, subjects: Lookup):
        self._subjects = subjects

    def extra_data(self, user: User) -> dict:
        return {"subjects": self._subjects.options()}
