"""Dynamic template page: video previews where a choice is confirmed by picking it twice."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .widgets import NORMAL_ICON, Button, HoverIcon, Signal, Timer

DEBOUNCE_MS = 400
VIDEO_COUNT = 5
VIDEO_PATHS = tuple(f"qrc:/videos/videos/video{n}.mp4" for n in range(1, VIDEO_COUNT + 1))
THUMBNAIL_PATHS = tuple(f"qrc:/images/pics/dynamic{n}.png" for n in range(1, VIDEO_COUNT + 1))


class PlaybackState(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


class MediaPlayer:
    """Playback state of one video source."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.state = PlaybackState.STOPPED
        self.position = 0

    def play(self) -> None:
        self.state = PlaybackState.PLAYING

    def pause(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.state = PlaybackState.PAUSED

    def stop(self) -> None:
        """Stop playback and rewind to the beginning."""
        self.state = PlaybackState.STOPPED
        self.position = 0

    def set_position(self, position: int) -> None:
        if position < 0:
            raise ValueError("position must not be negative")
        self.position = position


@dataclass
class VideoTile:
    """One video preview with its player and thumbnail overlay."""

    name: str
    player: MediaPlayer
    thumbnail: str
    selected: bool = False
    thumbnail_visible: bool = True
    thumbnail_on_top: bool = True


class Dynamic:
    """Page of video templates."""

    def __init__(self) -> None:
        self.back_button = Button("back", icon=NORMAL_ICON)
        self.back_hover = HoverIcon()
        self.backto_landing_page = Signal()
        self.video_selected_twice = Signal()

        self.debounce_timer = Timer(interval=DEBOUNCE_MS, single_shot=True)
        self.debounce_timer.timeout.connect(self.reset_debounce)
        self.debounce_active = False
        self._selected: VideoTile | None = None

        self.tiles: dict[str, VideoTile] = {}
        for number, (video, thumbnail) in enumerate(zip(VIDEO_PATHS, THUMBNAIL_PATHS), start=1):
            name = f"videoWidget{number}"
            self.tiles[name] = VideoTile(name, MediaPlayer(video), thumbnail)
            self.show_thumbnail(name, True)

    @property
    def selected_video(self) -> str | None:
        """Name of the highlighted video widget, if any."""
        return self._selected.name if self._selected else None

    def _deselect(self, tile: VideoTile) -> None:
        tile.selected = False
        if tile.player.state is PlaybackState.PLAYING:
            tile.player.stop()
        self.show_thumbnail(tile.name, True)

    def reset_page(self) -> None:
        """Stop all playback, show every thumbnail and clear the selection."""
        if self._selected:
            self._deselect(self._selected)
        self._selected = None
        for tile in self.tiles.values():
            self._deselect(tile)
        self.reset_debounce()
        self.debounce_timer.stop()

    def press(self, widget_name: str, left_button: bool = True) -> bool:
        """Handle a mouse press on a video widget; return True when consumed."""
        if not left_button or widget_name not in self.tiles:
            return False
        self.show_thumbnail(widget_name, False)
        if not self.debounce_active:
            self.debounce_active = True
            self.debounce_timer.start()
        self.process_video_click(widget_name)
        return True

    def reset_debounce(self) -> None:
        self.debounce_active = False

    def back(self) -> None:
        """Stop the selected video and ask to return to the landing page."""
        if self._selected:
            self._deselect(self._selected)
        self._selected = None
        self.backto_landing_page.emit()

    def process_video_click(self, widget_name: str) -> None:
        """Select and play a video, or confirm it when it is already selected."""
        tile = self.tiles.get(widget_name)
        if tile is None:
            return
        player = tile.player

        if tile is self._selected:
            tile.selected = False
            self._selected = None
            player.stop()
            player.set_position(0)
            self.show_thumbnail(widget_name, True)
            self.video_selected_twice.emit()
            self.debounce_timer.stop()
            self.reset_debounce()
            return

        if self._selected:
            self._deselect(self._selected)
        tile.selected = True
        self._selected = tile
        self.show_thumbnail(widget_name, False)

        if player.state in (PlaybackState.STOPPED, PlaybackState.PAUSED):
            player.play()
        else:
            player.stop()
            player.set_position(0)
            player.play()

    def show_thumbnail(self, widget_name: str, show: bool) -> None:
        """Show the thumbnail above the video, or hide it and raise the video."""
        tile = self.tiles.get(widget_name)
        if tile is None:
            return
        tile.thumbnail_visible = show
        tile.thumbnail_on_top = show

    def advance(self, elapsed_ms: int) -> None:
        """Let time pass for the page's timers."""
        self.debounce_timer.advance(elapsed_ms)