"""Observable state shared with the presentation layer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from uvmanager.models import PendingCommand

logger = logging.getLogger("uvmanager.runner.state")

Dispatcher = Callable[[Callable[[], None]], Any]
Observer = Callable[[str, Any], None]


class ExecutionMode(str, Enum):
    """How the runner handles a process' output."""

    CAPTURED = "captured"
    STREAMED = "streamed"
    INTERACTIVE = "interactive"


class RunnerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    TERMINATED = "terminated"


def _run_inline(callback: Callable[[], None]) -> None:
    callback()


class ObservableState:
    """Fields a UI reads, changed only on the UI's own context.

    Mutations never touch the fields directly from the I/O side: each change is
    wrapped in a callable and handed to ``dispatcher``, which is expected to run
    it on the context that owns the UI (``loop.call_soon_threadsafe``, a toolkit
    "invoke later" hook, ...). The default dispatcher applies changes inline.
    Observers are notified after a field changes, on the dispatcher's context.
    """

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self._dispatcher: Dispatcher = dispatcher or _run_inline
        self._observers: list[Observer] = []

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def update(self, **changes: Any) -> None:
        """Schedule field replacements on the UI context."""

        self._dispatcher(lambda: self._apply(changes))

    def _apply(self, changes: dict[str, Any]) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
            for observer in list(self._observers):
                try:
                    observer(name, value)
                except Exception:  # pragma: no cover - logged and ignored
                    logger.exception("State observer failed for field '%s'", name)


class RunnerState(ObservableState):
    """Running flag, output accumulators and queued interactive command."""

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        super().__init__(dispatcher)
        self.phase = RunnerPhase.IDLE
        self.is_running = False
        self.output = ""
        self.error = ""
        self.pending_command: PendingCommand | None = None
        self.last_command: PendingCommand | None = None

    def append(self, field: str, text: str) -> None:
        """Schedule ``text`` to be appended to the ``output`` or ``error`` accumulator."""

        if field not in ("output", "error"):
            raise ValueError(f"Cannot append to '{field}'")
        if not text:
            return
        self._dispatcher(lambda: self._apply({field: getattr(self, field) + text}))
