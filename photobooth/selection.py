"""Template selection pages where a choice is confirmed by picking it twice."""

from __future__ import annotations

import re

from .widgets import NORMAL_ICON, Button, HoverIcon, Signal, Timer

DEBOUNCE_MS = 400
IMAGE_BUTTON_NAMES = tuple(f"image{number}" for number in range(1, 7))
_IMAGE_BUTTON_PATTERN = re.compile(r"image[1-6]")


class ImageSelectionPage:
    """A grid of image buttons; selecting the same one twice confirms it."""

    def __init__(self, button_names=IMAGE_BUTTON_NAMES) -> None:
        self.back_button = Button("back", icon=NORMAL_ICON)
        self.back_hover = HoverIcon()
        self.back_requested = Signal()
        self.image_selected_twice = Signal()

        self.debounce_timer = Timer(interval=DEBOUNCE_MS, single_shot=True)
        self.debounce_timer.timeout.connect(self.reset_debounce)
        self.debounce_active = False

        self.buttons: dict[str, Button] = {
            name: Button(name)
            for name in button_names
            if _IMAGE_BUTTON_PATTERN.search(name)
        }
        self._selected: Button | None = None

    @property
    def selected_button(self) -> str | None:
        """Name of the highlighted button, if any."""
        return self._selected.name if self._selected else None

    def reset_page(self) -> None:
        """Clear any highlight and the debounce state."""
        self._selected = None
        for button in self.buttons.values():
            button.selected = False
        self.reset_debounce()
        self.debounce_timer.stop()

    def press(self, button_name: str) -> bool:
        """Handle a mouse press on a button; return True when the page consumed it."""
        button = self.buttons.get(button_name)
        if button is None or not button_name.startswith("image"):
            return False
        if self.debounce_active:
            return True
        self.debounce_active = True
        self.debounce_timer.start()
        self._process_click(button)
        return True

    def reset_debounce(self) -> None:
        self.debounce_active = False

    def back(self) -> None:
        """Drop the selection and ask to leave the page."""
        if self._selected:
            self._selected.selected = False
        self._selected = None
        self.back_requested.emit()

    def advance(self, elapsed_ms: int) -> None:
        """Let time pass for the page's timers."""
        self.debounce_timer.advance(elapsed_ms)

    def _process_click(self, button: Button) -> None:
        if button is self._selected:
            button.selected = False
            self._selected = None
            self.image_selected_twice.emit()
            return
        if self._selected:
            self._selected.selected = False
        button.selected = True
        self._selected = button


class Foreground(ImageSelectionPage):
    """Foreground template page; its back button returns to the landing page."""

    def __init__(self, button_names=IMAGE_BUTTON_NAMES) -> None:
        super().__init__(button_names)
        self.backto_landing_page = self.back_requested


class Background(ImageSelectionPage):
    """Background template page; its back button returns to the foreground page."""

    def __init__(self, button_names=IMAGE_BUTTON_NAMES) -> None:
        super().__init__(button_names)
        self.backto_foreground_page = self.back_requested