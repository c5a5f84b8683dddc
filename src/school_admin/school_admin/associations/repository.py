from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from ..core.enums import Relation


class AssociationRepository(Protocol):
    """Join-table access keyed by (relation, owner_id, target_id)."""

    def list_targets(self, *, relation: Relation, owner_id: int) -> set[int]:
        raise NotImplementedError

    def existing_targets(self, *, relation: Relation, target_ids: Iterable[int]) -> set[int]:
        """Return the subset of target_ids that exist in the relation's target table."""

        raise NotImplementedError

    def replace(
        self,
        *,
        relation: Relation,
        owner_id: int,
        target_ids: Sequence[int],
    ) -> tuple[list[int], list[int]]:
        """Make the owner's links exactly target_ids inside one transaction.

        The diff is taken against the rows read in that same transaction.
        Returns (attached, detached).
        """

        raise NotImplementedError

    def attach(self, *, relation: Relation, owner_id: int, target_ids: Sequence[int]) -> list[int]:
        """Insert links, skipping ones that already exist. Returns the ids actually inserted."""

        raise NotImplementedError

    def detach(self, *, relation: Relation, owner_id: int, target_ids: Sequence[int]) -> int:
        raise NotImplementedError
