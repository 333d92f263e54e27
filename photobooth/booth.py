"""The booth window: routes between landing, template, capture and result pages."""

from __future__ import annotations

import argparse
import sys
from enum import Enum
from pathlib import Path
from typing import Sequence

import numpy as np

from .capture import FALLBACK_CAMERA_INDEX, Camera, Capture, CaptureMode
from .dynamic import Dynamic
from .final import Final
from .selection import Background, Foreground
from .widgets import Signal, VideoTemplate

DYNAMIC_TEMPLATE_NAME = "Default Dynamic Template"
DYNAMIC_TEMPLATE_SECONDS = 10


class Page(Enum):
    LANDING = "landing"
    FOREGROUND = "foreground"
    DYNAMIC = "dynamic"
    BACKGROUND = "background"
    CAPTURE = "capture"
    FINAL = "final"


class BRBooth:
    """Holds every page and switches between them in response to their signals."""

    def __init__(self, camera: Camera | None = None, save_directory: str | Path | None = None) -> None:
        self.foreground = Foreground()
        self.dynamic = Dynamic()
        self.background = Background()
        self.capture = Capture(camera)
        self.final = Final(save_directory)

        self.current_changed = Signal()
        self._current = Page.LANDING
        self.previous_page: Page | None = None

        self.foreground.backto_landing_page.connect(self.show_landing_page)
        self.foreground.image_selected_twice.connect(self.show_background_page)

        self.dynamic.backto_landing_page.connect(self.show_landing_page)
        self.dynamic.video_selected_twice.connect(self._on_video_chosen)

        self.background.backto_foreground_page.connect(self.show_foreground_page)
        self.background.image_selected_twice.connect(self._on_background_chosen)

        self.capture.backto_previous_page.connect(self._on_capture_back)
        self.capture.show_final_output_page.connect(self.show_final_output_page)
        self.capture.image_captured.connect(self.final.set_image)
        self.capture.video_recorded.connect(self.final.set_video)

        self.final.back_to_capture_page.connect(self.show_capture_page)
        self.final.back_to_landing_page.connect(self.show_landing_page)

        self.current_changed.connect(self._reset_on_show)

    @property
    def current_page(self) -> Page:
        return self._current

    def _set_page(self, page: Page) -> None:
        if page is self._current:
            return
        self._current = page
        self.current_changed.emit(page)

    def _reset_on_show(self, page: Page) -> None:
        if page is Page.FOREGROUND:
            self.foreground.reset_page()
        if page is Page.BACKGROUND:
            self.background.reset_page()
        if page is Page.DYNAMIC:
            self.dynamic.reset_page()

    def _on_video_chosen(self) -> None:
        self.previous_page = Page.DYNAMIC
        self.capture.set_capture_mode(CaptureMode.VIDEO)
        self.capture.set_video_template(
            VideoTemplate(DYNAMIC_TEMPLATE_NAME, DYNAMIC_TEMPLATE_SECONDS)
        )
        self.show_capture_page()

    def _on_background_chosen(self) -> None:
        self.previous_page = Page.BACKGROUND
        self.capture.set_capture_mode(CaptureMode.IMAGE)
        self.show_capture_page()

    def _on_capture_back(self) -> None:
        if self.previous_page is Page.BACKGROUND:
            self.show_background_page()
        elif self.previous_page is Page.DYNAMIC:
            self.show_dynamic_page()

    def show_landing_page(self) -> None:
        self._set_page(Page.LANDING)

    def show_foreground_page(self) -> None:
        self._set_page(Page.FOREGROUND)

    def show_dynamic_page(self) -> None:
        self._set_page(Page.DYNAMIC)

    def show_background_page(self) -> None:
        self._set_page(Page.BACKGROUND)

    def show_capture_page(self) -> None:
        self._set_page(Page.CAPTURE)

    def show_final_output_page(self) -> None:
        self._set_page(Page.FINAL)

    def on_static_button_clicked(self) -> None:
        self.show_foreground_page()

    def on_dynamic_button_clicked(self) -> None:
        self.show_dynamic_page()


def _test_pattern_source():
    frame = np.zeros((120, 160, 3), dtype=np.uint8)
    frame[:, :, 1] = np.arange(160, dtype=np.uint8)
    frame[:, :, 2] = np.arange(120, dtype=np.uint8)[:, np.newaxis]
    return lambda: frame.copy()


def _run_command(booth: BRBooth, command: str, args: list[str]) -> None:
    page = booth.current_page
    if command in ("static", "dynamic"):
        if page is not Page.LANDING:
            raise ValueError(f"'{command}' is only available on the landing page")
        if command == "static":
            booth.on_static_button_clicked()
        else:
            booth.on_dynamic_button_clicked()
    elif command == "back":
        handlers = {
            Page.FOREGROUND: booth.foreground.back,
            Page.BACKGROUND: booth.background.back,
            Page.DYNAMIC: booth.dynamic.back,
            Page.CAPTURE: booth.capture.back,
            Page.FINAL: booth.final.back,
        }
        handler = handlers.get(page)
        if handler is None:
            raise ValueError("nothing to go back to")
        handler()
    elif command == "press":
        if len(args) != 1:
            raise ValueError("usage: press NAME")
        if page is Page.FOREGROUND:
            consumed = booth.foreground.press(args[0])
        elif page is Page.BACKGROUND:
            consumed = booth.background.press(args[0])
        elif page is Page.DYNAMIC:
            consumed = booth.dynamic.press(args[0])
        else:
            raise ValueError("nothing to press on this page")
        if not consumed:
            raise ValueError(f"no such item: {args[0]}")
    elif command == "capture":
        if page is not Page.CAPTURE or not booth.capture.capture_button.enabled:
            raise ValueError("capture is not available")
        booth.capture.capture_clicked()
    elif command == "wait":
        if len(args) != 1:
            raise ValueError("usage: wait MILLISECONDS")
        elapsed = int(args[0])
        for part in (booth.foreground, booth.background, booth.dynamic, booth.capture, booth.final):
            part.advance(elapsed)
    elif command == "save":
        if page is not Page.FINAL:
            raise ValueError("nothing to save on this page")
        booth.final.save()
        if booth.final.notices:
            print(booth.final.notices[-1].text)
    else:
        raise ValueError(f"unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the booth, driven by commands read line by line from standard input."""
    parser = argparse.ArgumentParser(
        prog="photobooth",
        description="Photo booth driven by commands: static, dynamic, press NAME, "
        "back, capture, wait MS, save, quit.",
    )
    parser.add_argument(
        "--test-pattern", action="store_true", help="use a synthetic camera image"
    )
    parser.add_argument("--save-dir", type=Path, default=None, help="where results are saved")
    args = parser.parse_args(argv)

    devices = {FALLBACK_CAMERA_INDEX: _test_pattern_source()} if args.test_pattern else {}
    booth = BRBooth(Camera(devices), args.save_dir)
    print(f"page: {booth.current_page.value}")
    for line in sys.stdin:
        words = line.split()
        if not words:
            continue
        command, *rest = words
        if command in ("quit", "exit"):
            break
        try:
            _run_command(booth, command, rest)
        except ValueError as error:
            print(error, file=sys.stderr)
        print(f"page: {booth.current_page.value}")
    return 0