"""Provider base class and the names of swappable components."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with a real and an in-process implementation
Component = Literal["google", "github", "persistence"]


class ProviderBase(Provider):
    """Dishka provider carrying swap metadata.

    A component base sets ``__mock_component__``; its real and mock subclasses
    differ only in ``__is_mock__``.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
