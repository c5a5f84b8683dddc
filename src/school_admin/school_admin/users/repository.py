from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GradeEntry, StudentSubject, User, UserFilters


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, fields: dict) -> int:
        """fields holds column -> value for fillable columns plus password_hash."""

        raise NotImplementedError

    def update_user(self, user_id: int, *, fields: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def search(
        self,
        filters: UserFilters,
        *,
        limit: int,
        offset: int = 0,
        newest_first: bool = False,
    ) -> Sequence[User]:
        raise NotImplementedError

    def count(self, filters: UserFilters) -> int:
        raise NotImplementedError

    def list_subject_pivot(self, user_id: int) -> Sequence[StudentSubject]:
        raise NotImplementedError

    def list_grades(self, user_id: int) -> Sequence[GradeEntry]:
        """Ordered by subject_id, then grade_id."""

        raise NotImplementedError
