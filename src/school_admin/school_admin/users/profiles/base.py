from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import User


class ProfileStrategy(ABC):
    """Strategy Pattern: what extra data a user's profile page needs, by role."""

    @abstractmethod
    def extra_data(self, user: User) -> dict:
        raise NotImplementedError
