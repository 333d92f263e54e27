"""Camera page: live preview, countdown, still capture and timed video recording."""

from __future__ import annotations

import logging
import math
from enum import Enum, auto
from typing import Callable, Mapping, Optional

import numpy as np
from PIL import Image

from .widgets import NORMAL_ICON, Button, HoverIcon, Signal, Timer, VideoTemplate

log = logging.getLogger(__name__)

FrameSource = Callable[[], Optional[np.ndarray]]

PREFERRED_CAMERA_INDEX = 1
FALLBACK_CAMERA_INDEX = 0
REQUESTED_WIDTH = 1280
REQUESTED_HEIGHT = 720
REQUESTED_FPS = 60.0
PREVIEW_INTERVAL_MS = 1000 // 60
COUNTDOWN_START = 5
COUNTDOWN_INTERVAL_MS = 1000
RECORD_TICK_MS = 1000
SLIDER_MINIMUM = 0
SLIDER_MAXIMUM = 100
SLIDER_TICK = 10
CAMERA_ERROR_TEXT = "Camera not available.\nCheck connection and drivers."


def mat_to_rgb(mat: np.ndarray) -> Image.Image:
    """Convert an 8-bit BGR, BGRA or grayscale frame to a Pillow image.

    Colour frames become RGB images (alpha is dropped); grayscale frames
    become "L" images. Any other layout raises ValueError.
    """
    array = np.asarray(mat)
    if array.dtype != np.uint8:
        raise ValueError(f"unsupported frame type: {array.dtype}")
    if array.ndim == 2:
        return Image.fromarray(np.ascontiguousarray(array))
    if array.ndim == 3:
        channels = array.shape[2]
        if channels == 1:
            return Image.fromarray(np.ascontiguousarray(array[:, :, 0]))
        if channels == 3:
            return Image.fromarray(np.ascontiguousarray(array[:, :, ::-1]))
        if channels == 4:
            return Image.fromarray(np.ascontiguousarray(array[:, :, 2::-1]))
    raise ValueError(f"unsupported frame shape: {array.shape}")


def flip_horizontal(frame: np.ndarray) -> np.ndarray:
    """Mirror a frame left to right."""
    return np.ascontiguousarray(np.asarray(frame)[:, ::-1])


def _round_half_away(value: float) -> int:
    return math.floor(value + 0.5) if value >= 0 else math.ceil(value - 0.5)


def snap_to_tick(value: int, tick_interval: int, minimum: int, maximum: int) -> int:
    """Round ``value`` to the nearest tick and clamp it to the slider range."""
    if tick_interval == 0:
        return value
    snapped = _round_half_away(value / tick_interval) * tick_interval
    return max(minimum, min(snapped, maximum))


class CaptureMode(Enum):
    IMAGE = auto()
    VIDEO = auto()


class Camera:
    """A camera opened by device index, reading frames from a frame source.

    Each device is a callable returning a BGR frame, or None when the read fails.
    """

    def __init__(
        self,
        devices: Mapping[int, FrameSource] | None = None,
        max_fps: float | None = None,
    ) -> None:
        self._devices = dict(devices or {})
        self.max_fps = max_fps
        self._source: FrameSource | None = None
        self.index: int | None = None
        self.width = 0
        self.height = 0
        self.fps = 0.0

    @property
    def is_opened(self) -> bool:
        return self._source is not None

    def open(self, index: int) -> bool:
        """Open device ``index``; return whether it exists."""
        source = self._devices.get(index)
        if source is None:
            return False
        self._source = source
        self.index = index
        return True

    def configure(self, width: int, height: int, fps: float) -> None:
        """Request a resolution and frame rate; the rate is capped by the device."""
        if not self.is_opened:
            raise RuntimeError("camera is not open")
        self.width = width
        self.height = height
        self.fps = fps if self.max_fps is None else min(fps, self.max_fps)

    def read(self) -> np.ndarray | None:
        """Return the next frame, or None when nothing could be read."""
        if self._source is None:
            return None
        return self._source()

    def release(self) -> None:
        self._source = None
        self.index = None


class Capture:
    """Camera page driving preview, countdown, photo capture and recording."""

    def __init__(self, camera: Camera | None = None) -> None:
        self.camera = camera if camera is not None else Camera()

        self.back_button = Button("back", icon=NORMAL_ICON)
        self.back_hover = HoverIcon()
        self.capture_button = Button("capture", enabled=False)

        self.backto_previous_page = Signal()
        self.image_captured = Signal()
        self.video_recorded = Signal()
        self.show_final_output_page = Signal()

        self.slider_minimum = SLIDER_MINIMUM
        self.slider_maximum = SLIDER_MAXIMUM
        self.tick_interval = SLIDER_TICK
        self.slider_value = SLIDER_MAXIMUM

        self.mode = CaptureMode.IMAGE
        self.video_template = VideoTemplate("Default", 5)
        self.target_recording_fps = 60
        self.is_recording = False
        self.recorded_seconds = 0
        self.recorded_frames: list[Image.Image] = []
        self.captured_image: Image.Image | None = None
        self.preview: Image.Image | None = None
        self.frames_shown = 0

        self.countdown_value = 0
        self.countdown_text = ""
        self.countdown_visible = False
        self.error_message = ""

        self.camera_timer = Timer(PREVIEW_INTERVAL_MS)
        self.camera_timer.timeout.connect(self.update_camera_feed)
        self.countdown_timer = Timer(COUNTDOWN_INTERVAL_MS)
        self.countdown_timer.timeout.connect(self.update_countdown)
        self.record_timer = Timer(RECORD_TICK_MS)
        self.record_timer.timeout.connect(self.update_record_timer)
        self.recording_frame_timer = Timer(1000 // self.target_recording_fps)
        self.recording_frame_timer.timeout.connect(self.capture_recording_frame)

        self.camera_available = self._open_camera()
        if not self.camera_available:
            log.warning("No camera found or could not be opened. Disabling capture.")
            self.error_message = CAMERA_ERROR_TEXT
            return

        self.camera.configure(REQUESTED_WIDTH, REQUESTED_HEIGHT, REQUESTED_FPS)
        log.debug(
            "Camera settings: %sx%s @ %s FPS",
            self.camera.width,
            self.camera.height,
            self.camera.fps,
        )
        if self.camera.fps < 59:
            log.warning("Camera did not accept 60 FPS request; actual FPS is %s", self.camera.fps)

        self.camera_timer.start()
        self.capture_button.enabled = True

    def _open_camera(self) -> bool:
        if self.camera.open(PREFERRED_CAMERA_INDEX):
            return True
        log.warning("Could not open camera %d, trying %d", PREFERRED_CAMERA_INDEX, FALLBACK_CAMERA_INDEX)
        if self.camera.open(FALLBACK_CAMERA_INDEX):
            return True
        log.warning("Could not open camera %d either", FALLBACK_CAMERA_INDEX)
        return False

    def _grab(self, purpose: str) -> tuple[bool, Image.Image | None]:
        """Read, mirror and convert one frame; the flag is False when the read failed."""
        frame = self.camera.read()
        if frame is None:
            log.warning("Failed to read frame from camera for %s", purpose)
            return False, None
        if np.asarray(frame).size == 0:
            log.warning("Read empty frame for %s", purpose)
            return True, None
        try:
            return True, mat_to_rgb(flip_horizontal(frame))
        except ValueError as error:
            log.warning("Failed to convert frame for %s: %s", purpose, error)
            return True, None

    def set_capture_mode(self, mode: CaptureMode) -> None:
        self.mode = mode
        log.debug("Capture mode set to %s", mode.name)

    def set_video_template(self, template: VideoTemplate) -> None:
        self.video_template = template

    def update_camera_feed(self) -> None:
        """Show the next camera frame; stop the preview when the camera fails."""
        if not self.camera.is_opened:
            return
        ok, image = self._grab("preview")
        if not ok:
            self.camera_timer.stop()
            self.capture_button.enabled = False
            if self.is_recording:
                self.stop_recording()
            return
        if image is not None:
            self.preview = image
            self.frames_shown += 1

    def capture_recording_frame(self) -> None:
        """Append one frame to the recording in progress."""
        if not self.is_recording or not self.camera.is_opened:
            return
        _, image = self._grab("recording")
        if image is not None:
            self.recorded_frames.append(image)

    def back(self) -> None:
        """Cancel a countdown or recording and ask to return to the previous page."""
        if self.countdown_timer.active:
            self.countdown_timer.stop()
            self.countdown_visible = False
            self.countdown_value = 0
        if self.is_recording:
            self.stop_recording()
        elif not self.capture_button.enabled:
            self.capture_button.enabled = True
        self.backto_previous_page.emit()

    def capture_clicked(self) -> None:
        """Start the countdown that precedes a capture or recording."""
        self.capture_button.enabled = False
        self.countdown_value = COUNTDOWN_START
        self.countdown_text = str(self.countdown_value)
        self.countdown_visible = True
        self.countdown_timer.start(COUNTDOWN_INTERVAL_MS)

    def update_countdown(self) -> None:
        self.countdown_value -= 1
        if self.countdown_value > 0:
            self.countdown_text = str(self.countdown_value)
            return
        self.countdown_timer.stop()
        self.countdown_visible = False
        if self.mode is CaptureMode.IMAGE:
            self.perform_image_capture()
            self.capture_button.enabled = True
        elif self.mode is CaptureMode.VIDEO:
            self.start_recording()

    def update_record_timer(self) -> None:
        self.recorded_seconds += 1
        log.debug(
            "Recording: %d / %d seconds, %d frames",
            self.recorded_seconds,
            self.video_template.duration_seconds,
            len(self.recorded_frames),
        )
        if self.recorded_seconds >= self.video_template.duration_seconds:
            self.stop_recording()

    def start_recording(self) -> None:
        if not self.camera.is_opened:
            log.warning("Cannot start recording: camera not open")
            self.capture_button.enabled = True
            return
        self.recorded_frames = []
        self.is_recording = True
        self.recorded_seconds = 0
        self.record_timer.start(RECORD_TICK_MS)
        self.recording_frame_timer.start(1000 // self.target_recording_fps)

    def stop_recording(self) -> None:
        """Finish recording, hand over the frames and move to the final page."""
        if not self.is_recording:
            return
        self.record_timer.stop()
        self.recording_frame_timer.stop()
        self.is_recording = False
        if self.recorded_seconds:
            log.debug(
                "Recording stopped: %d frames, %.2f FPS",
                len(self.recorded_frames),
                len(self.recorded_frames) / self.recorded_seconds,
            )
        if self.recorded_frames:
            self.video_recorded.emit(list(self.recorded_frames))
        else:
            log.warning("No frames recorded for video")
        self.show_final_output_page.emit()
        self.capture_button.enabled = True

    def perform_image_capture(self) -> None:
        """Take one photo and move to the final page."""
        frame = self.camera.read()
        if frame is None:
            log.warning("Failed to read frame from camera for capture")
        elif np.asarray(frame).size == 0:
            log.warning("Captured an empty frame")
            return
        else:
            try:
                image = mat_to_rgb(flip_horizontal(frame))
            except ValueError as error:
                log.warning("Failed to convert captured frame: %s", error)
            else:
                self.captured_image = image
                self.image_captured.emit(image)
        self.show_final_output_page.emit()

    def slider_changed(self, value: int) -> int:
        """Snap the slider to the nearest tick and return its new value."""
        if self.tick_interval == 0:
            self.slider_value = value
            return value
        self.slider_value = snap_to_tick(
            value, self.tick_interval, self.slider_minimum, self.slider_maximum
        )
        return self.slider_value

    def advance(self, elapsed_ms: int) -> None:
        """Let time pass millisecond by millisecond for all the page's timers."""
        if elapsed_ms < 0:
            raise ValueError("elapsed time must not be negative")
        timers = (
            self.camera_timer,
            self.countdown_timer,
            self.recording_frame_timer,
            self.record_timer,
        )
        for _ in range(elapsed_ms):
            for timer in timers:
                timer.advance(1)