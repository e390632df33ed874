"""Transient notification banner with an event-loop timer."""

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass(frozen=True)
class Notification:
    """Message shown in the banner. ``kind`` is "success" or "error"."""
    message: str
    kind: str = "success"


class Notifier:
    """
    Holds the current notification and clears it after ``duration`` seconds.

    Showing a new message replaces the old one and restarts the timer.
    Listeners are called with the new notification (or None once cleared).
    """

    def __init__(self, duration: float = 4.0):
        self.duration = duration
        self.current: Optional[Notification] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._listeners: List[Callable[[Optional[Notification]], None]] = []

    def subscribe(self, listener: Callable[[Optional[Notification]], None]) -> None:
        self._listeners.append(listener)

    def show(self, message: str, kind: str = "success") -> Notification:
        """Show a message. Must be called from a running event loop."""
        self._cancel_timer()
        self.current = Notification(message, kind)
        self._timer = asyncio.get_running_loop().call_later(self.duration, self.clear)
        self._emit()
        return self.current

    def error(self, message: str) -> Notification:
        return self.show(message, kind="error")

    def clear(self) -> None:
        self._cancel_timer()
        self.current = None
        self._emit()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self) -> None:
        for listener in self._listeners:
            listener(self.current)
