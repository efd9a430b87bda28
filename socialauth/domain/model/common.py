"""Base model for persisted social auth entities."""

from typing import Self

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Immutable entity loaded from or saved to a repository."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def evolve(self, **changes) -> Self:
        """Copy of this entity with ``changes`` applied."""
        return self.model_copy(update=changes)
