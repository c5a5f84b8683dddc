from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Branch


class BranchRepository(Protocol):
    def list_all(self) -> Sequence[Branch]:
        raise NotImplementedError

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        raise NotImplementedError

    def create(self, *, name: str) -> int:
        raise NotImplementedError

    def rename(self, branch_id: int, *, name: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, branch_id: int) -> bool:
        raise NotImplementedError
