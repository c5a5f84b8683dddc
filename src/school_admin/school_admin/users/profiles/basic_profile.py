from __future__ import annotations

from ..model import User
from .base import ProfileStrategy


class BasicProfile(ProfileStrategy):
    def extra_data(self, user: User) -> dict:
        return {}
