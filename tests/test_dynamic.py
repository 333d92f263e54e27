import pytest

from photobooth.dynamic import (
    DEBOUNCE_MS,
    THUMBNAIL_PATHS,
    VIDEO_PATHS,
    Dynamic,
    MediaPlayer,
    PlaybackState,
)


@pytest.fixture
def page():
    return Dynamic()


def _counter(signal):
    calls = []
    signal.connect(lambda *a: calls.append(a))
    return calls


def test_tiles_are_set_up_with_sources(page):
    assert list(page.tiles) == [f"videoWidget{n}" for n in range(1, 6)]
    assert [t.player.source for t in page.tiles.values()] == list(VIDEO_PATHS)
    assert [t.thumbnail for t in page.tiles.values()] == list(THUMBNAIL_PATHS)
    assert VIDEO_PATHS[0] == "qrc:/videos/videos/video1.mp4"


def test_all_thumbnails_visible_initially(page):
    assert all(t.thumbnail_visible and t.thumbnail_on_top for t in page.tiles.values())
    assert all(t.player.state is PlaybackState.STOPPED for t in page.tiles.values())


def test_media_player_stop_rewinds():
    player = MediaPlayer("clip.mp4")
    player.play()
    player.set_position(500)
    player.stop()
    assert player.state is PlaybackState.STOPPED
    assert player.position == 0
    with pytest.raises(ValueError):
        player.set_position(-1)


def test_first_click_selects_and_plays(page):
    assert page.press("videoWidget2") is True
    tile = page.tiles["videoWidget2"]
    assert page.selected_video == "videoWidget2"
    assert tile.selected
    assert tile.player.state is PlaybackState.PLAYING
    assert not tile.thumbnail_visible


def test_second_click_confirms_even_during_debounce(page):
    twice = _counter(page.video_selected_twice)
    page.press("videoWidget1")
    page.press("videoWidget1")
    tile = page.tiles["videoWidget1"]
    assert len(twice) == 1
    assert page.selected_video is None
    assert tile.player.state is PlaybackState.STOPPED
    assert tile.player.position == 0
    assert tile.thumbnail_visible
    assert not page.debounce_active


def test_selecting_another_stops_previous(page):
    page.press("videoWidget1")
    page.advance(DEBOUNCE_MS)
    page.press("videoWidget3")
    first, third = page.tiles["videoWidget1"], page.tiles["videoWidget3"]
    assert first.player.state is PlaybackState.STOPPED
    assert first.thumbnail_visible and not first.selected
    assert third.player.state is PlaybackState.PLAYING
    assert page.selected_video == "videoWidget3"


def test_paused_player_resumes_on_click(page):
    tile = page.tiles["videoWidget4"]
    tile.player.play()
    tile.player.pause()
    tile.player.set_position(200)
    page.press("videoWidget4")
    assert tile.player.state is PlaybackState.PLAYING
    assert tile.player.position == 200


def test_playing_unselected_player_restarts(page):
    tile = page.tiles["videoWidget5"]
    tile.player.play()
    tile.player.set_position(300)
    page.process_video_click("videoWidget5")
    assert tile.player.state is PlaybackState.PLAYING
    assert tile.player.position == 0


def test_right_click_and_unknown_widget_not_consumed(page):
    assert page.press("videoWidget1", left_button=False) is False
    assert page.press("nothing") is False
    assert page.selected_video is None


def test_back_stops_and_emits(page):
    back = _counter(page.backto_landing_page)
    page.press("videoWidget2")
    page.back()
    tile = page.tiles["videoWidget2"]
    assert len(back) == 1
    assert page.selected_video is None
    assert tile.player.state is PlaybackState.STOPPED
    assert tile.thumbnail_visible


def test_reset_page_restores_initial_state(page):
    page.press("videoWidget3")
    page.reset_page()
    assert page.selected_video is None
    assert not page.debounce_active
    assert not page.debounce_timer.active
    assert all(t.thumbnail_visible and not t.selected for t in page.tiles.values())
    assert all(t.player.state is PlaybackState.STOPPED for t in page.tiles.values())


def test_debounce_expires_after_interval(page):
    page.press("videoWidget1")
    assert page.debounce_active
    page.advance(DEBOUNCE_MS)
    assert not page.debounce_active


def test_show_thumbnail_toggles_layering(page):
    page.show_thumbnail("videoWidget1", False)
    tile = page.tiles["videoWidget1"]
    assert not tile.thumbnail_visible and not tile.thumbnail_on_top
    page.show_thumbnail("videoWidget1", True)
    assert tile.thumbnail_visible and tile.thumbnail_on_top