"""
Host runtime — the process-exit notification used by shutdown hooks.

A hook is a ``threading.Thread`` that has not been started. At exit every
registered hook is started on its own thread and joined; hooks run once,
in no particular order.
"""

import atexit
import logging
import threading
from typing import Protocol

from tracewire.errors import ShutdownInProgressError

logger = logging.getLogger(__name__)


class Runtime(Protocol):
    def add_shutdown_hook(self, hook: threading.Thread) -> None:
        ...

    def remove_shutdown_hook(self, hook: threading.Thread) -> bool:
        ...


class AtexitRuntime:
    def __init__(self) -> None:
        self._hooks: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._installed = False
        self._shutting_down = False

    @property
    def hooks(self) -> tuple[threading.Thread, ...]:
        with self._lock:
            return tuple(self._hooks)

    def add_shutdown_hook(self, hook: threading.Thread) -> None:
        with self._lock:
            if self._shutting_down:
                raise ShutdownInProgressError()
            if hook.ident is not None:
                raise ValueError("Hook already started")
            if hook in self._hooks:
                raise ValueError("Hook previously registered")
            self._hooks.append(hook)
            if not self._installed:
                atexit.register(self.run_hooks)
                self._installed = True

    def remove_shutdown_hook(self, hook: threading.Thread) -> bool:
        """Returns False if the hook was not registered."""
        with self._lock:
            if self._shutting_down:
                raise ShutdownInProgressError()
            try:
                self._hooks.remove(hook)
            except ValueError:
                return False
            return True

    def run_hooks(self) -> None:
        with self._lock:
            if self._shutting_down:
                return
            self._shutting_down = True
            hooks = list(self._hooks)

        started = []
        for hook in hooks:
            try:
                hook.start()
                started.append(hook)
            except RuntimeError as e:
                # Newer interpreters refuse new threads inside atexit.
                logger.debug(f"Running shutdown hook {hook.name} inline: {e}")
                try:
                    hook.run()
                except Exception as err:
                    logger.error(f"Shutdown hook {hook.name} failed: {err}")
        for hook in started:
            hook.join()


_runtime = AtexitRuntime()


def get_runtime() -> AtexitRuntime:
    return _runtime
