"""Station value object."""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Station:
    """
    A stop on a subway line.

    Stations are shared by reference between many connections, so identity is
    compared by key rather than by instance: the external ``id`` once the
    station has been persisted, otherwise its ``name``.
    """

    name: str
    id: uuid.UUID | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Identity key used for equality, hashing and index lookups."""
        if self.id is not None:
            return ("id", str(self.id))
        return ("name", self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Station):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)
