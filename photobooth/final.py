"""Result page: shows the captured photo or plays the recorded clip, and saves it."""

from __future__ import annotations

import io
import logging
import math
import struct
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from fractions import Fraction
from pathlib import Path
from typing import Callable, Iterable

import numpy as np
from PIL import Image

from .widgets import NORMAL_ICON, Button, HoverIcon, Signal, Timer

log = logging.getLogger(__name__)

PLAYBACK_INTERVAL_MS = 1000 // 60
ASSUMED_VIDEO_SECONDS = 10.0
FALLBACK_DOWNLOADS = "C:/Downloads"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_AVIF_HASINDEX = 0x10
_AVIIF_KEYFRAME = 0x10
_FRAME_CHUNK_ID = b"00dc"


def image_to_bgr(image: Image.Image) -> np.ndarray:
    """Convert an RGB, RGBA or grayscale Pillow image to a 3-channel BGR array."""
    array = np.asarray(image)
    if image.mode == "RGB":
        return np.ascontiguousarray(array[:, :, ::-1])
    if image.mode == "RGBA":
        return np.ascontiguousarray(array[:, :, 2::-1])
    if image.mode == "L":
        return np.repeat(array[:, :, np.newaxis], 3, axis=2)
    raise ValueError(f"unsupported image mode: {image.mode}")


def downloads_dir() -> Path:
    """The user's download folder, or a fixed fallback when no home is known."""
    try:
        return Path.home() / "Downloads"
    except RuntimeError:
        return Path(FALLBACK_DOWNLOADS)


def timestamped_path(
    directory: str | Path, prefix: str, suffix: str, now: datetime | None = None
) -> Path:
    """A file name of the form ``<prefix>_<yyyyMMdd_hhmmss><suffix>`` in ``directory``."""
    moment = now if now is not None else datetime.now()
    return Path(directory) / f"{prefix}_{moment.strftime(TIMESTAMP_FORMAT)}{suffix}"


def _chunk(fourcc: bytes, data: bytes) -> bytes:
    padding = b"\x00" if len(data) % 2 else b""
    return fourcc + struct.pack("<I", len(data)) + data + padding


def _list(kind: bytes, payload: bytes) -> bytes:
    return b"LIST" + struct.pack("<I", 4 + len(payload)) + kind + payload


class MjpegAviWriter:
    """Writes BGR frames as Motion-JPEG into an AVI file."""

    def __init__(self, path: str | Path, fps: float, size: tuple[int, int], quality: int = 95) -> None:
        if not math.isfinite(fps) or fps <= 0:
            raise ValueError("frame rate must be a positive number")
        width, height = size
        if width <= 0 or height <= 0:
            raise ValueError("frame size must be positive")
        self.path = Path(path)
        self.fps = fps
        self.width = width
        self.height = height
        self.quality = quality
        self._rate = Fraction(fps).limit_denominator(1000)
        self._index: list[tuple[int, int]] = []
        self._movi_bytes = 0
        self._max_frame = 0
        self._file = open(self.path, "wb")
        header = self._header(movi_size=4, riff_size=0)
        self._movi_start = len(header) - 4
        self._file.write(header)

    @property
    def frame_count(self) -> int:
        return len(self._index)

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _header(self, movi_size: int, riff_size: int) -> bytes:
        frames = len(self._index)
        usec_per_frame = round(1_000_000 / self.fps)
        max_bytes_per_sec = int(self._max_frame * self.fps)
        avih = struct.pack(
            "<14I",
            usec_per_frame, max_bytes_per_sec, 0, _AVIF_HASINDEX, frames, 0, 1,
            self._max_frame, self.width, self.height, 0, 0, 0, 0,
        )
        strh = struct.pack(
            "<4s4sIHH8I4H",
            b"vids", b"MJPG", 0, 0, 0,
            0, self._rate.denominator, self._rate.numerator, 0, frames,
            self._max_frame, 0xFFFFFFFF, 0,
            0, 0, min(self.width, 0xFFFF), min(self.height, 0xFFFF),
        )
        strf = struct.pack(
            "<IiiHH4sIiiII",
            40, self.width, self.height, 1, 24, b"MJPG",
            self.width * self.height * 3, 0, 0, 0, 0,
        )
        hdrl = _list(
            b"hdrl",
            _chunk(b"avih", avih) + _list(b"strl", _chunk(b"strh", strh) + _chunk(b"strf", strf)),
        )
        return b"RIFF" + struct.pack("<I", riff_size) + b"AVI " + hdrl + b"LIST" + struct.pack("<I", movi_size) + b"movi"

    def write(self, frame: np.ndarray) -> None:
        """Append one BGR frame of the writer's size."""
        if self.closed:
            raise ValueError("writer is closed")
        array = np.asarray(frame)
        if array.dtype != np.uint8 or array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"expected an 8-bit BGR frame, got {array.dtype} {array.shape}")
        if array.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"frame is {array.shape[1]}x{array.shape[0]}, expected {self.width}x{self.height}"
            )
        buffer = io.BytesIO()
        Image.fromarray(np.ascontiguousarray(array[:, :, ::-1])).save(
            buffer, "JPEG", quality=self.quality
        )
        jpeg = buffer.getvalue()
        offset = self._file.tell() - self._movi_start
        data = _chunk(_FRAME_CHUNK_ID, jpeg)
        self._file.write(data)
        self._index.append((offset, len(jpeg)))
        self._movi_bytes += len(data)
        self._max_frame = max(self._max_frame, len(jpeg))

    def close(self) -> None:
        """Write the index, fix up the headers and close the file."""
        if self.closed:
            return
        entries = b"".join(
            struct.pack("<4sIII", _FRAME_CHUNK_ID, _AVIIF_KEYFRAME, offset, size)
            for offset, size in self._index
        )
        self._file.write(_chunk(b"idx1", entries))
        end = self._file.tell()
        self._file.seek(0)
        self._file.write(self._header(movi_size=4 + self._movi_bytes, riff_size=end - 8))
        self._file.close()

    def __enter__(self) -> MjpegAviWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Severity(Enum):
    INFORMATION = auto()
    WARNING = auto()
    CRITICAL = auto()


@dataclass(frozen=True)
class Notice:
    """A message shown to the user."""

    severity: Severity
    title: str
    text: str


class Final:
    """Shows the result of a capture and saves it to disk."""

    def __init__(
        self,
        save_directory: str | Path | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.back_button = Button("back", icon=NORMAL_ICON)
        self.back_hover = HoverIcon()
        self.back_to_capture_page = Signal()
        self.back_to_landing_page = Signal()

        self.save_directory = Path(save_directory) if save_directory is not None else None
        self._clock = clock or datetime.now
        self.displayed: Image.Image | None = None
        self.video_frames: list[Image.Image] = []
        self.current_frame_index = 0
        self.notices: list[Notice] = []

        self.video_playback_timer = Timer(PLAYBACK_INTERVAL_MS)
        self.video_playback_timer.timeout.connect(self.play_next_frame)

    def _notify(self, severity: Severity, title: str, text: str) -> None:
        self.notices.append(Notice(severity, title, text))

    def _target_directory(self) -> Path:
        directory = self.save_directory or downloads_dir()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            log.warning("Could not create %s: %s", directory, error)
        return directory

    def back(self) -> None:
        """Stop playback and ask to return to the capture page."""
        self.video_playback_timer.stop()
        self.back_to_capture_page.emit()

    def set_image(self, image: Image.Image | None) -> None:
        """Show a still photo, ending any video playback."""
        self.video_playback_timer.stop()
        self.video_frames = []
        self.current_frame_index = 0
        self.displayed = image

    def set_video(self, frames: Iterable[Image.Image]) -> None:
        """Start looping playback of recorded frames."""
        self.video_playback_timer.stop()
        self.video_frames = list(frames)
        self.current_frame_index = 0
        if self.video_frames:
            self.video_playback_timer.start(PLAYBACK_INTERVAL_MS)
            self.play_next_frame()
        else:
            log.warning("No video frames provided for playback")
            self.displayed = None

    def play_next_frame(self) -> None:
        """Show the next frame; after the last one, wrap around to the start."""
        if not self.video_frames:
            self.video_playback_timer.stop()
            self.displayed = None
            return
        if self.current_frame_index < len(self.video_frames):
            self.displayed = self.video_frames[self.current_frame_index]
            self.current_frame_index += 1
        else:
            self.current_frame_index = 0

    def save(self) -> Path | None:
        """Save the video, or else the shown photo; return the file written."""
        if self.video_frames:
            saved = self.save_video()
        else:
            if self.displayed is None:
                self._notify(Severity.WARNING, "Save Image", "No image to save.")
                return None
            path = timestamped_path(self._target_directory(), "image", ".png", self._clock())
            try:
                self.displayed.save(path)
            except OSError as error:
                log.warning("Failed to save %s: %s", path, error)
                self._notify(Severity.CRITICAL, "Save Image", "Failed to save image.")
                saved = None
            else:
                self._notify(
                    Severity.INFORMATION, "Save Image", f"Image saved successfully to:\n{path}"
                )
                saved = path
        self.back_to_landing_page.emit()
        return saved

    def save_video(self) -> Path | None:
        """Write the recorded frames as an MJPEG AVI; return the file written."""
        if not self.video_frames:
            self._notify(Severity.WARNING, "Save Video", "No video frames to save.")
            return None
        path = timestamped_path(self._target_directory(), "video", ".avi", self._clock())
        fps = len(self.video_frames) / ASSUMED_VIDEO_SECONDS
        try:
            writer = MjpegAviWriter(path, fps, self.video_frames[0].size)
        except OSError as error:
            log.warning("Failed to open video writer for %s: %s", path, error)
            self._notify(
                Severity.CRITICAL,
                "Save Video",
                "Failed to open video writer. Check codecs and file path.",
            )
            return None
        with writer:
            for frame in self.video_frames:
                try:
                    writer.write(image_to_bgr(frame))
                except ValueError as error:
                    log.warning("Skipping frame while saving video: %s", error)
        self._notify(
            Severity.INFORMATION,
            "Save Video",
            f"Video saved successfully at {fps:.1f} FPS to:\n{path}",
        )
        return path

    def advance(self, elapsed_ms: int) -> None:
        """Let time pass for the playback timer."""
        self.video_playback_timer.advance(elapsed_ms)