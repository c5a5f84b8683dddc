from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from ..core.lookups import Lookup, invalidate
from .model import Branch
from .repository import BranchRepository

LOGGER = logging.getLogger(__name__)


class BranchService:
    def __init__(self, branches: BranchRepository, lookup: Optional[Lookup] = None):
        self._branches = branches
        self._lookup = lookup

    def list_all(self) -> Sequence[Branch]:
        return self._branches.list_all()

    def get(self, branch_id: int) -> Branch:
        branch = self._branches.get_by_id(int(branch_id))
        if not branch:
            raise NotFoundError("Branch not found")
        return branch

    def create(self, *, name: str) -> int:
        name = require_non_empty(name, "Branch name")
        branch_id = self._branches.create(name=name)
        invalidate(self._lookup)
        LOGGER.info("Created branch %s (%s)", branch_id, name)
        return branch_id

    def rename(self, branch_id: int, *, name: str) -> None:
        name = require_non_empty(name, "Branch name")
        self.get(branch_id)
        self._branches.rename(int(branch_id), name=name)
        invalidate(self._lookup)

    def delete(self, branch_id: int) -> None:
        if not self._branches.delete_by_id(int(branch_id)):
            raise NotFoundError("Branch not found")
        invalidate(self._lookup)
        LOGGER.info("Deleted branch %s", branch_id)
