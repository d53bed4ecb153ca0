# stbrowser

Support components for a desktop web browser. Each one can be used by itself.

## Modules

- `stbrowser.interceptor.ContainerInterceptor` holds a chain of request
  interceptors. `add_interceptor()` accepts any object that has an
  `intercept_request(info)` method, and raises `TypeError` for anything else.
  `intercept_request(info)` passes the request to every interceptor, in the
  order they were added.
- `stbrowser.cookie_exceptions.CookieExceptionsModel` is a two-column table
  built from a cookie jar. The jar must have `allowed_cookies`,
  `blocked_cookies` and `allow_for_session_cookies` lists. The table lists the
  allowed domains first, then the blocked ones, then the session-only ones.
  Column 0 holds the domain. Column 1 holds its status: "Allow", "Block" or
  "Allow For Session". The model provides:
  - `header_data()`, `data()`, `row_count()` and `column_count()`. These take
    `Role` and `Orientation` values.
  - `remove_rows()`, which removes rows and writes the remaining lists back to
    the jar.
- `stbrowser.raw_image` treats any file as a picture:
  - `parse_image_raw(path)` reads the file's bytes as RGBA pixels of a
    near-square image.
  - `parse_image(path)` reads the bytes as running per-channel deltas.
  - `decode_raw_file(image_path, output_path)` writes an image's pixels back out
    as raw RGBA bytes.
  - Both parse functions return `None` when the file holds fewer than four
    bytes.
- `stbrowser.qr_render` renders QR code matrices:
  - `QrMatrix` holds the symbol's modules. A set low bit marks a dark module.
  - `qrcode_to_image()` draws the symbol with a one-module border. It makes
    either the dark or the light modules transparent, as the `TransparentMode`
    says. It can also write the list of points as JSON, with the same content as
    `qr_point_list()`.
  - `image_overlay()` draws one image onto another.
  - `draw_grid()` draws grid lines. Every tenth line is thick and dark green.
  - `save_qr_code_image()` saves the symbol black on white, 512 pixels wide.
  - `QrHelper.generate_qr_image()` percent-encodes the text as a URL and cuts it
    to `max_url_length` bytes, 276 by default. It then encodes it with the
    encoder you supply and draws the result over a background. The background
    is cropped when it is 1740 pixels wide or more; otherwise it is scaled to
    cover the target size and then cropped. Without a background the code is
    drawn on black. When the encoder returns `None`, the result is a green
    256x256 image that carries an error message.
  - `QrHelper.generate_numbered_image()` saves the code for a number as
    `<number>.png`.
- `stbrowser.file_time.FileTimeComparator` compares files by modification time,
  to the millisecond. `difference()` returns the gap and `compare()` returns a
  `CompareResult`.
- `stbrowser.scanning` finds the parts of an image store, skipping hidden
  entries:
  - `scan_subdirs(base_dir)` lists the directories level by level.
  - `scan_files(base_dir)` lists the files in them.
  - `select_oldest(paths, fraction=0.3)` returns that share of the paths that
    were modified longest ago, oldest first.

## Example

```python
from stbrowser.qr_render import QrHelper, QrMatrix, TransparentMode

# Any encoder that turns bytes into a QrMatrix, or None on failure.
def encoder(payload: bytes) -> QrMatrix:
    return QrMatrix.from_rows([[1, 0, 1], [0, 1, 0], [1, 0, 1]])

helper = QrHelper(encoder)
image = helper.generate_qr_image(
    "https://example.com/page",
    transparent_mode=TransparentMode.WHITE_AS_TRANSPARENT,
    show_grid=True,
    target_width=381,
)
image.save("code.png")
```

## What the package does not do

- It contains no QR encoder. `QrHelper` needs an encoder function that returns
  a `QrMatrix`.
- It does not dispatch downloads to a downloader process.
- It does not track whether the application is active.
- It does not choose background images at random.
- It does not ask a remote scanner service to check generated codes.
- It has no browser window and no command-line program.

## Installation

```
pip install .
```

With the test requirements:

```
pip install ".[test]"
```

## Running the tests

```
pytest
```