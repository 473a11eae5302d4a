from __future__ import annotations

from typing import Protocol, Sequence

from .model import ScanEvent


class ScanEventRepository(Protocol):
    def list_all(self) -> Sequence[ScanEvent]:
        """Full scan log, newest first."""

        raise NotImplementedError

    def append(self, event: ScanEvent) -> ScanEvent:
        """Persist one event and return it with its id."""

        raise NotImplementedError
