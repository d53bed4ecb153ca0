"""Rendering of QR code matrices onto images."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union
from urllib.parse import quote

from PIL import Image, ImageDraw

PathArg = Union[str, "PathLike[str]"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "QtWebEngine/5.10.1 Chrome/61.0.3163.140 Safari/537.36"
)

MAX_URL_LENGTH = 276
TOO_BIG_WIDTH = 1740
FAILED_TEXT = "QR code generating failed"
DPI = (800, 800)

WHITE_HEX = "#ffffff"
BLACK_HEX = "#000000"

TRANSPARENT = (0, 0, 0, 0)
OPAQUE_WHITE = (255, 255, 255, 255)
OPAQUE_BLACK = (0, 0, 0, 255)
GREEN = (0, 255, 0)
DARK_GREEN = (0, 128, 0)

_URL_SAFE = ":/?#[]@!$&'()*+,;=%~-._"


class TransparentMode(enum.Enum):
    """Which modules of the code are drawn transparent."""

    BLACK_AS_TRANSPARENT = 0
    WHITE_AS_TRANSPARENT = 1


@dataclass(frozen=True)
class QrMatrix:
    """A square symbol; the low bit of each module byte marks a dark module."""

    version: int
    width: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError("width must not be negative")
        if len(self.data) != self.width * self.width:
            raise ValueError(
                f"data holds {len(self.data)} modules, expected {self.width * self.width}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], version: int = 1) -> "QrMatrix":
        """Build a matrix from rows of module values."""
        width = len(rows)
        if any(len(row) != width for row in rows):
            raise ValueError("rows must form a square")
        return cls(version, width, bytes(value for row in rows for value in row))

    def is_dark(self, x: int, y: int) -> bool:
        """Whether the module at column x, row y is dark."""
        if not (0 <= x < self.width and 0 <= y < self.width):
            raise IndexError(f"module ({x}, {y}) is outside a {self.width}-wide symbol")
        return bool(self.data[y * self.width + x] & 1)


Encoder = Callable[[bytes], Optional[QrMatrix]]


def qr_point_list(matrix: QrMatrix) -> list[dict[str, Any]]:
    """List every point of the bordered symbol, row by row, with its colour."""
    size = matrix.width + 2
    points = [{"color": WHITE_HEX, "x": x, "y": 0} for x in range(size)]
    for row in range(matrix.width):
        y = row + 1
        points.append({"color": WHITE_HEX, "x": 0, "y": y})
        for column in range(matrix.width):
            colour = BLACK_HEX if matrix.is_dark(column, row) else WHITE_HEX
            points.append({"color": colour, "x": column + 1, "y": y})
        points.append({"color": WHITE_HEX, "x": size - 1, "y": y})
    points.extend({"color": WHITE_HEX, "x": x, "y": size - 1} for x in range(size))
    return points


def _module_image(matrix: QrMatrix, light: tuple, dark: tuple, mode: str) -> Image.Image:
    size = matrix.width + 2
    image = Image.new(mode, (size, size), light)
    pixels = image.load()
    for row in range(matrix.width):
        for column in range(matrix.width):
            if matrix.is_dark(column, row):
                pixels[column + 1, row + 1] = dark
    return image


def qrcode_to_image(
    matrix: QrMatrix,
    transparent_mode: TransparentMode = TransparentMode.BLACK_AS_TRANSPARENT,
    target_width: int = 512,
    points_path: PathArg | None = None,
) -> Image.Image:
    """Draw the symbol with a one-module border, scaled to the target width.

    Dark modules take the background colour and light modules the foreground
    colour, as chosen by the transparent mode. When ``points_path`` is given,
    the point list is written there as JSON.
    """
    if transparent_mode is TransparentMode.BLACK_AS_TRANSPARENT:
        background, foreground = TRANSPARENT, OPAQUE_WHITE
    else:
        background, foreground = OPAQUE_BLACK, TRANSPARENT
    image = _module_image(matrix, foreground, background, "RGBA")

    if points_path is not None:
        document = {"qrcodearray": qr_point_list(matrix)}
        Path(points_path).write_text(json.dumps(document, indent=4) + "\n", encoding="utf-8")

    scaled = image.resize((target_width, target_width), Image.NEAREST)
    scaled.info["dpi"] = DPI
    return scaled


def save_qr_code_image(matrix: QrMatrix, path: PathArg) -> Path:
    """Save the symbol, black on white with a border, 512 pixels wide."""
    image = _module_image(matrix, (255, 255, 255), (0, 0, 0), "RGB")
    image = image.resize((512, 512), Image.NEAREST)
    output = Path(path)
    image.save(output, dpi=DPI)
    return output


def image_overlay(overlay: Image.Image, background: Image.Image) -> Image.Image:
    """Draw the overlay, alpha blended, onto the top-left of the background."""
    if background.mode == "P":
        background = background.convert("RGB")
    keeps_alpha = "A" in background.mode
    base = background.convert("RGBA")
    width = min(overlay.width, base.width)
    height = min(overlay.height, base.height)
    if width and height:
        piece = overlay.convert("RGBA").crop((0, 0, width, height))
        base.alpha_composite(piece, (0, 0))
    return base if keeps_alpha else base.convert("RGB")


def draw_grid(image: Image.Image, matrix: QrMatrix, target_width: int = 512) -> Image.Image:
    """Draw module grid lines, every tenth one thick and dark green."""
    result = image.copy()
    painter = ImageDraw.Draw(result)
    size = float(target_width)
    point_width = size / float(matrix.width + 2)
    line_count = matrix.width + 3

    def pen(counter: int) -> dict[str, Any]:
        if counter % 10 == 0:
            return {"fill": DARK_GREEN, "width": 3}
        return {"fill": GREEN, "width": 1}

    for column in range(line_count):
        x = column * point_width
        painter.line([(x, 0.0), (x, size - 1.0)], **pen(column))
    for row in range(line_count):
        y = row * point_width
        painter.line([(0.0, y), (size - 1.0, y)], **pen(row))
    return result


def _fit_background(background: Image.Image, target_width: int) -> Image.Image:
    target = (target_width, target_width)
    if background.width >= TOO_BIG_WIDTH:
        fitted = background.crop((0, 0, target_width, target_width))
    else:
        scale = max(target_width / background.width, target_width / background.height)
        size = (
            max(1, round(background.width * scale)),
            max(1, round(background.height * scale)),
        )
        fitted = background.resize(size, Image.BILINEAR)
    if fitted.size != target:
        fitted = fitted.crop((0, 0, target_width, target_width))
    return fitted


class QrHelper:
    """Generates QR code images, optionally on a background picture."""

    def __init__(
        self,
        encoder: Encoder,
        max_url_length: int = MAX_URL_LENGTH,
        points_path: PathArg | None = None,
    ) -> None:
        if max_url_length < 0:
            raise ValueError("max_url_length must not be negative")
        self.encoder = encoder
        self.max_url_length = max_url_length
        self.points_path = points_path

    def _encoded_text(self, text: str) -> bytes:
        return quote(text, safe=_URL_SAFE).encode("ascii")[: self.max_url_length]

    def generate_qr_image(
        self,
        text: str,
        background: Image.Image | None = None,
        transparent_mode: TransparentMode = TransparentMode.BLACK_AS_TRANSPARENT,
        show_grid: bool = False,
        target_width: int = 512,
    ) -> Image.Image:
        """Encode text as a URL and render it over a background.

        Without a background the code is drawn on black. If encoding fails, a
        green 256x256 image carrying an error message is returned.
        """
        matrix = self.encoder(self._encoded_text(text))
        if matrix is None:
            failed = Image.new("RGB", (256, 256), GREEN)
            ImageDraw.Draw(failed).text((20, 20), FAILED_TEXT, fill=(0, 0, 0))
            return failed

        code_image = qrcode_to_image(matrix, transparent_mode, target_width, self.points_path)
        if background is None:
            base = Image.new("RGB", (target_width, target_width), (0, 0, 0))
        else:
            base = _fit_background(background, target_width)
        result = image_overlay(code_image, base)
        if show_grid:
            result = draw_grid(result, matrix, target_width)
        return result

    def generate_numbered_image(self, number: int, output_dir: PathArg = "QrCodeImages") -> Path:
        """Encode a number and save its code as ``<number>.png`` in a directory."""
        matrix = self.encoder(str(number).encode("utf-8"))
        if matrix is None:
            raise ValueError(f"could not encode {number}")
        return save_qr_code_image(matrix, Path(output_dir) / f"{number}.png")