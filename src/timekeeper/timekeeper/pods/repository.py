from __future__ import annotations

from typing import Protocol, Sequence


class PodRepository(Protocol):
    def list_names(self) -> Sequence[str]:
        raise NotImplementedError

    def exists(self, name: str) -> bool:
        raise NotImplementedError

    def add(self, name: str) -> bool:
        """False when the name is already present."""

        raise NotImplementedError

    def remove(self, name: str) -> bool:
        """Must raise ``PodInUse`` if employees still reference the POD."""

        raise NotImplementedError
