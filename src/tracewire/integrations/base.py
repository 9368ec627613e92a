"""Base integration interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from tracewire.options import Options

if TYPE_CHECKING:
    from tracewire.hub import Hub


class Integration(ABC):
    """
    A piece of SDK behaviour attached to a hub at init time.

    The hub calls ``register`` once per integration and ``close`` when the
    hub closes. Neither may raise into the application.
    """

    name: ClassVar[str] = "integration"

    @abstractmethod
    def register(self, hub: "Hub", options: Options) -> None:
        ...

    def close(self) -> None:
        pass
