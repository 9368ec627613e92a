"""Base transport interface."""

from abc import ABC, abstractmethod

from tracewire.envelope import Envelope


class Transport(ABC):
    """
    Delivers envelopes to a destination.

    ``send`` runs on the hub's background worker, never on the caller's
    thread. Delivery is attempted once; failures are logged by the
    transport and the envelope is dropped.
    """

    @abstractmethod
    def send(self, envelope: Envelope) -> None:
        ...

    def flush(self, timeout_seconds: float) -> bool:
        """Wait for in-flight sends. Synchronous transports have nothing to wait for."""
        return True

    def close(self) -> None:
        pass
