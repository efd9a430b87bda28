"""Value object bases."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, RootModel

T = TypeVar("T")


class ValueObject(BaseModel):
    """Immutable record compared by its fields.

    Unknown fields are rejected so a misspelled keyword in an adapter's
    normalization fails loudly instead of being dropped.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")


class RootValueObject(RootModel[T], Generic[T]):
    """Validated wrapper around one primitive, read through ``.root``."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.root)
