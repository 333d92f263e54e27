import pytest

from photobooth.widgets import (
    HOVER_ICON,
    NORMAL_ICON,
    Button,
    EventType,
    HoverIcon,
    Signal,
    Timer,
    VideoTemplate,
)


def test_signal_calls_all_slots_in_order_with_args():
    signal = Signal()
    calls = []
    signal.connect(lambda *a: calls.append(("first", a)))
    signal.connect(lambda *a: calls.append(("second", a)))
    signal.emit(1, "x")
    assert calls == [("first", (1, "x")), ("second", (1, "x"))]


def test_signal_without_slots_does_nothing():
    signal = Signal()
    calls = []
    signal.emit()
    signal.connect(calls.append)
    signal.emit("a")
    assert calls == ["a"]


def test_single_shot_timer_fires_once():
    timer = Timer(interval=400, single_shot=True)
    calls = []
    timer.timeout.connect(lambda: calls.append(1))
    timer.start()
    fired = timer.advance(5000)
    assert fired == 1
    assert len(calls) == 1
    assert not timer.active


def test_timer_does_not_fire_before_interval():
    timer = Timer(interval=400, single_shot=True)
    calls = []
    timer.timeout.connect(lambda: calls.append(1))
    timer.start()
    assert timer.advance(399) == 0
    assert timer.active
    assert timer.advance(1) == 1
    assert calls == [1]


def test_repeating_timer_fire_count_matches_slot_calls():
    timer = Timer()
    calls = []
    timer.timeout.connect(lambda: calls.append(1))
    timer.start(100)
    fired = timer.advance(1000)
    assert fired == len(calls)
    assert fired == 10
    assert timer.active


def test_stopped_timer_never_fires():
    timer = Timer(interval=10)
    calls = []
    timer.timeout.connect(lambda: calls.append(1))
    timer.start()
    timer.stop()
    assert timer.advance(1000) == 0
    assert calls == []


def test_restart_discards_elapsed_time():
    timer = Timer(interval=400, single_shot=True)
    timer.start()
    timer.advance(300)
    timer.start()
    assert timer.advance(300) == 0
    assert timer.active


def test_timer_rejects_negative_time():
    timer = Timer(interval=10)
    timer.start()
    with pytest.raises(ValueError):
        timer.advance(-1)
    with pytest.raises(ValueError):
        timer.start(-5)


def test_hover_icon_swaps_icons():
    hover = HoverIcon()
    button = Button("back", icon=NORMAL_ICON)
    assert hover.event_filter(button, EventType.ENTER) is True
    assert button.icon == HOVER_ICON
    assert hover.event_filter(button, EventType.LEAVE) is True
    assert button.icon == NORMAL_ICON


def test_hover_icon_passes_other_events():
    hover = HoverIcon()
    button = Button("back", icon=NORMAL_ICON)
    assert hover.event_filter(button, EventType.MOUSE_BUTTON_PRESS) is False
    assert button.icon == NORMAL_ICON


def test_hover_icon_ignores_non_buttons():
    hover = HoverIcon()
    assert hover.event_filter("label", EventType.ENTER) is False


def test_video_template_defaults_and_values():
    empty = VideoTemplate()
    assert empty.name == ""
    assert empty.duration_seconds == 0
    template = VideoTemplate("Default Dynamic Template", 10)
    assert template.name == "Default Dynamic Template"
    assert template.duration_seconds == 10