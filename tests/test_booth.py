import io
import sys

import numpy as np
import pytest

from photobooth.booth import DYNAMIC_TEMPLATE_SECONDS, BRBooth, Page, main
from photobooth.capture import Camera, CaptureMode
from photobooth.dynamic import PlaybackState
from photobooth.selection import DEBOUNCE_MS
from photobooth.widgets import VideoTemplate

FRAME = np.full((4, 6, 3), (10, 20, 30), dtype=np.uint8)


@pytest.fixture
def booth(tmp_path):
    return BRBooth(Camera({0: lambda: FRAME.copy()}), tmp_path)


def _choose(page, name):
    page.press(name)
    page.advance(DEBOUNCE_MS)
    page.press(name)


def test_starts_on_landing(booth):
    assert booth.current_page is Page.LANDING
    assert booth.previous_page is None


def test_static_route_reaches_capture_in_image_mode(booth):
    booth.on_static_button_clicked()
    assert booth.current_page is Page.FOREGROUND
    _choose(booth.foreground, "image1")
    assert booth.current_page is Page.BACKGROUND
    _choose(booth.background, "image2")
    assert booth.current_page is Page.CAPTURE
    assert booth.previous_page is Page.BACKGROUND
    assert booth.capture.mode is CaptureMode.IMAGE


def test_capture_back_returns_to_background(booth):
    booth.show_foreground_page()
    _choose(booth.foreground, "image1")
    _choose(booth.background, "image3")
    booth.capture.back()
    assert booth.current_page is Page.BACKGROUND


def test_dynamic_route_sets_video_template(booth):
    booth.on_dynamic_button_clicked()
    assert booth.current_page is Page.DYNAMIC
    booth.dynamic.press("videoWidget1")
    booth.dynamic.press("videoWidget1")
    assert booth.current_page is Page.CAPTURE
    assert booth.previous_page is Page.DYNAMIC
    assert booth.capture.mode is CaptureMode.VIDEO
    assert booth.capture.video_template.duration_seconds == DYNAMIC_TEMPLATE_SECONDS
    booth.capture.back()
    assert booth.current_page is Page.DYNAMIC


def test_back_buttons_navigate(booth):
    booth.show_foreground_page()
    booth.foreground.back()
    assert booth.current_page is Page.LANDING
    booth.show_background_page()
    booth.background.back()
    assert booth.current_page is Page.FOREGROUND
    booth.show_dynamic_page()
    booth.dynamic.back()
    assert booth.current_page is Page.LANDING


def test_showing_page_resets_selection(booth):
    booth.show_foreground_page()
    booth.foreground.press("image4")
    assert booth.foreground.selected_button == "image4"
    booth.show_dynamic_page()
    booth.show_foreground_page()
    assert booth.foreground.selected_button is None


def test_showing_dynamic_stops_playback(booth):
    booth.show_dynamic_page()
    booth.dynamic.press("videoWidget2")
    tile = booth.dynamic.tiles["videoWidget2"]
    assert tile.player.state is PlaybackState.PLAYING
    booth.show_landing_page()
    booth.show_dynamic_page()
    assert tile.player.state is PlaybackState.STOPPED
    assert booth.dynamic.selected_video is None


def test_photo_reaches_final_and_saves(booth):
    booth.show_foreground_page()
    _choose(booth.foreground, "image1")
    _choose(booth.background, "image1")
    booth.capture.capture_clicked()
    booth.capture.advance(5000)
    assert booth.current_page is Page.FINAL
    assert booth.final.displayed.size == (FRAME.shape[1], FRAME.shape[0])

    booth.final.back()
    assert booth.current_page is Page.CAPTURE
    booth.show_final_output_page()
    path = booth.final.save()
    assert path.exists()
    assert booth.current_page is Page.LANDING


def test_video_reaches_final_playback(booth):
    booth.show_dynamic_page()
    booth.dynamic.press("videoWidget3")
    booth.dynamic.press("videoWidget3")
    booth.capture.set_video_template(VideoTemplate("short", 1))
    booth.capture.capture_clicked()
    booth.capture.advance(6100)
    assert booth.current_page is Page.FINAL
    assert len(booth.final.video_frames) > 0
    assert len(booth.final.video_frames) == len(booth.capture.recorded_frames)
    assert booth.final.video_playback_timer.active


def test_main_runs_commands(monkeypatch, capsys, tmp_path):
    monkeypatch.setattr(sys, "stdin", io.StringIO("static\nbogus\nback\nquit\n"))
    assert main(["--save-dir", str(tmp_path)]) == 0
    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert lines[0] == f"page: {Page.LANDING.value}"
    assert f"page: {Page.FOREGROUND.value}" in lines
    assert lines[-1] == f"page: {Page.LANDING.value}"
    assert "unknown command" in captured.err


def test_main_test_pattern_enables_capture(monkeypatch, capsys, tmp_path):
    commands = "static\npress image1\nwait 400\npress image1\npress image1\nwait 400\npress image1\ncapture\n"
    monkeypatch.setattr(sys, "stdin", io.StringIO(commands))
    assert main(["--test-pattern", "--save-dir", str(tmp_path)]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines()[-1] == f"page: {Page.CAPTURE.value}"
    assert captured.err == ""