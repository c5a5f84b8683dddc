from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SyncResult:
    """What a sync actually changed.

    skipped holds submitted ids that were already linked, including rows another
    request inserted between our read and our write.
    """

    attached: tuple[int, ...] = ()
    detached: tuple[int, ...] = ()
    skipped: tuple[int, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.attached or self.detached)
