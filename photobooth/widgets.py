"""Building blocks shared by the booth pages: signals, timers, buttons and templates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable

NORMAL_ICON = ":/icons/Icons/normal.svg"
HOVER_ICON = ":/icons/Icons/hover.svg"


class Signal:
    """A list of callbacks that are all invoked when the signal is emitted."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def connect(self, slot: Callable[..., Any]) -> None:
        """Register a callback to be called on every emit."""
        self._slots.append(slot)

    def emit(self, *args: Any) -> None:
        """Call every connected callback, in connection order, with ``args``."""
        for slot in list(self._slots):
            slot(*args)


class Timer:
    """A timer driven by explicit elapsed time rather than a wall clock."""

    def __init__(self, interval: int = 0, single_shot: bool = False) -> None:
        self.interval = interval
        self.single_shot = single_shot
        self.timeout = Signal()
        self._active = False
        self._elapsed = 0

    @property
    def active(self) -> bool:
        return self._active

    def start(self, interval: int | None = None) -> None:
        """Start or restart the timer, optionally with a new interval in ms."""
        if interval is not None:
            if interval < 0:
                raise ValueError("timer interval must not be negative")
            self.interval = interval
        self._elapsed = 0
        self._active = True

    def stop(self) -> None:
        """Stop the timer; pending time is discarded."""
        self._active = False
        self._elapsed = 0

    def advance(self, elapsed_ms: int) -> int:
        """Let ``elapsed_ms`` pass and fire the timeout as due; return the number of firings."""
        if elapsed_ms < 0:
            raise ValueError("elapsed time must not be negative")
        if not self._active:
            return 0
        self._elapsed += elapsed_ms
        fired = 0
        while self._active and self._elapsed >= self.interval:
            self._elapsed -= self.interval
            if self.single_shot:
                self._active = False
            fired += 1
            self.timeout.emit()
            if self.interval <= 0:
                break
        return fired


class EventType(Enum):
    ENTER = auto()
    LEAVE = auto()
    MOUSE_BUTTON_PRESS = auto()
    OTHER = auto()


@dataclass
class Button:
    """State of a push button as the pages see it."""

    name: str
    icon: str = ""
    selected: bool = False
    enabled: bool = True


class HoverIcon:
    """Swaps a button's icon when the pointer enters or leaves it."""

    def __init__(self, normal_icon: str = NORMAL_ICON, hover_icon: str = HOVER_ICON) -> None:
        self.normal_icon = normal_icon
        self.hover_icon = hover_icon

    def event_filter(self, button: Any, event: EventType) -> bool:
        """Handle an event for ``button``; return True when it was consumed."""
        if not isinstance(button, Button):
            return False
        if event is EventType.ENTER:
            button.icon = self.hover_icon
            return True
        if event is EventType.LEAVE:
            button.icon = self.normal_icon
            return True
        return False


@dataclass
class VideoTemplate:
    """A named recording template with a fixed duration."""

    name: str = ""
    duration_seconds: int = 0