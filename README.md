# photobooth

This package holds the page flow and capture logic of a photo booth. It
models them as plain Python objects that tests and front ends can drive.
Timers never run in the background. Time passes only when a page's
`advance(elapsed_ms)` method is called, so every run plays out the same way.

## Pages

`photobooth.booth.BRBooth` holds every page and switches between them. The
current page is in `current_page`, which is a `Page` value: `LANDING`,
`FOREGROUND`, `BACKGROUND`, `DYNAMIC`, `CAPTURE` or `FINAL`.

- **Landing**: `on_static_button_clicked()` goes to the foreground page.
  `on_dynamic_button_clicked()` goes to the dynamic page.
- **Foreground and Background** (`photobooth.selection`): six buttons,
  `image1` to `image6`. The first `press(name)` highlights a button. Pressing
  the same button again confirms it. For 400 ms after a press, further
  presses are consumed and ignored. Confirming a foreground template opens
  the background page. Confirming a background template opens the capture
  page in image mode.
- **Dynamic** (`photobooth.dynamic`): five video tiles, `videoWidget1` to
  `videoWidget5`. Pressing a tile selects it and sets its `MediaPlayer` to
  playing. Pressing the selected tile again confirms it. This page does not
  ignore repeated presses. Confirming a tile opens the capture page in video
  mode, with a 10-second `VideoTemplate`.
- **Capture** (`photobooth.capture`): `capture_clicked()` starts a countdown
  from 5 that ticks once a second.
  - In image mode, one mirrored frame is then taken and the final page is
    shown.
  - In video mode, a mirrored frame is recorded every 16 ms until the
    template's duration has passed.

  `back()` cancels a countdown or a recording and returns to the page the
  capture was started from.
- **Final** (`photobooth.final`): shows the photo, or plays the recorded
  frames in a loop. `save()` writes a photo as `image_<yyyyMMdd_hhmmss>.png`.
  It writes a recording as a Motion-JPEG `video_<yyyyMMdd_hhmmss>.avi`, with
  the frame rate set to the number of frames divided by 10. The outcome is
  added to `notices`. After saving, the booth returns to the landing page.
  Files go to `save_directory` if one was given. Otherwise they go to
  `~/Downloads`, or to `C:/Downloads` when no home directory is known.

```python
from photobooth.booth import BRBooth, Page

booth = BRBooth()
booth.on_static_button_clicked()
booth.foreground.press("image1")
booth.foreground.advance(400)
booth.foreground.press("image1")
assert booth.current_page is Page.BACKGROUND
```

## Cameras

`photobooth.capture.Camera` takes a mapping from device index to a callable.
The callable returns a BGR `numpy` array, or `None` when a read fails. The
capture page opens device 1 if it exists, and device 0 otherwise. If neither
device exists, capture stays disabled and `error_message` says so.

## Helpers

- `photobooth.capture.mat_to_rgb`: converts an 8-bit BGR, BGRA or grayscale
  array to a Pillow image.
- `photobooth.capture.flip_horizontal`: mirrors a frame.
- `photobooth.capture.snap_to_tick`: rounds a slider value to the nearest
  tick and clamps it to the slider range.
- `photobooth.final.image_to_bgr`: converts an RGB, RGBA or L image to a BGR
  array.
- `photobooth.final.MjpegAviWriter`: writes BGR frames to an MJPEG AVI file.
  It can be used as a context manager.
- `photobooth.final.timestamped_path`: builds an output file name.
- `photobooth.final.downloads_dir`: returns the download folder.

## Command line

Start the booth with:

```
photobooth [--test-pattern] [--save-dir DIR]
```

The booth reads commands from standard input, one per line:

- `static`
- `dynamic`
- `press NAME`
- `back`
- `capture`
- `wait MS`
- `save`
- `quit` or `exit`

After each command it prints the current page. Errors are printed to
standard error. `--test-pattern` supplies a synthetic 160×120 camera image.
`--save-dir` chooses where results are saved.

## What it does not do

- There is no graphical window.
- It does not access real camera devices. Frames come only from the
  callables given to `Camera`, or from the test pattern.
- The dynamic page's players keep only their playback state. Videos and
  thumbnails are never decoded or shown.

## Running the tests

```
pip install .[test]
pytest
```