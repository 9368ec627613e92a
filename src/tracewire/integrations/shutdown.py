"""
Shutdown hook integration — flush the hub before the process exits.

register() attaches one hook thread to the runtime; when the process exits
the runtime runs it, and the hook calls ``hub.flush(timeout)`` and nothing
else. close() detaches the hook. Attach and detach swap a single stored
handle under a lock, so concurrent register/close calls (e.g. a re-init)
never attach two hooks.
"""

import logging
import threading
from enum import Enum
from typing import Any, Optional, Protocol

from tracewire.integrations.base import Integration
from tracewire.options import Options
from tracewire.runtime import Runtime, get_runtime

logger = logging.getLogger(__name__)


class FlushableHub(Protocol):
    def flush(self, timeout_millis: int) -> Any:
        ...


class IntegrationState(str, Enum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    FLUSHING = "flushing"


class ShutdownHook(threading.Thread):
    """Runs ``hub.flush(timeout_millis)`` once, on its own thread."""

    def __init__(self, hub: FlushableHub, timeout_millis: int):
        super().__init__(name="tracewire-shutdown-hook", daemon=True)
        self._hub = hub
        self.timeout_millis = timeout_millis

    def run(self) -> None:
        try:
            self._hub.flush(self.timeout_millis)
        except Exception as e:
            logger.error(f"Flush on shutdown failed: {e}")


class ShutdownHookIntegration(Integration):
    name = "shutdown_hook"

    def __init__(self, runtime: Optional[Runtime] = None):
        self._runtime = runtime if runtime is not None else get_runtime()
        self._lock = threading.Lock()
        self._hook: Optional[ShutdownHook] = None

    @property
    def hook(self) -> Optional[ShutdownHook]:
        return self._hook

    @property
    def state(self) -> IntegrationState:
        hook = self._hook
        if hook is None:
            return IntegrationState.UNREGISTERED
        if hook.is_alive():
            return IntegrationState.FLUSHING
        if hook.ident is not None:
            # already fired and finished
            return IntegrationState.UNREGISTERED
        return IntegrationState.REGISTERED

    def register(self, hub: FlushableHub, options: Options) -> None:
        if not options.enable_shutdown_hook:
            logger.debug("Shutdown hook disabled, not registering")
            return

        with self._lock:
            if self._hook is not None:
                return
            hook = ShutdownHook(hub, options.flush_timeout_millis)
            try:
                self._runtime.add_shutdown_hook(hook)
            except Exception as e:
                logger.warning(f"Could not register shutdown hook: {e}")
                return
            self._hook = hook
        logger.debug(f"Shutdown hook registered (flush_timeout={options.flush_timeout_millis}ms)")

    def close(self) -> None:
        with self._lock:
            hook, self._hook = self._hook, None
        if hook is None:
            return
        # Removal only prevents a future run; a flush already in progress continues.
        try:
            self._runtime.remove_shutdown_hook(hook)
        except Exception as e:
            logger.debug(f"Shutdown hook not removed: {e}")
