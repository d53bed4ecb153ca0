import json

import pytest
from PIL import Image

from stbrowser.qr_render import (
    FAILED_TEXT,
    QrHelper,
    QrMatrix,
    TransparentMode,
    draw_grid,
    image_overlay,
    qr_point_list,
    qrcode_to_image,
    save_qr_code_image,
)

ROWS = [[1, 0, 1], [0, 1, 0], [1, 1, 0]]


@pytest.fixture
def matrix():
    return QrMatrix.from_rows(ROWS)


class RecordingEncoder:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, data):
        self.calls.append(data)
        return self.result


def test_is_dark(matrix):
    assert matrix.is_dark(0, 0)
    assert not matrix.is_dark(1, 0)
    assert matrix.is_dark(1, 2)
    with pytest.raises(IndexError):
        matrix.is_dark(3, 0)


def test_matrix_rejects_wrong_length():
    with pytest.raises(ValueError):
        QrMatrix(1, 3, bytes(8))


def test_point_list_covers_bordered_symbol(matrix):
    points = qr_point_list(matrix)
    assert len(points) == (matrix.width + 2) ** 2
    assert points[0] == {"color": "#ffffff", "x": 0, "y": 0}
    dark = sum(value & 1 for row in ROWS for value in row)
    assert sum(p["color"] == "#000000" for p in points) == dark
    for point in points:
        if point["color"] == "#000000":
            assert matrix.is_dark(point["x"] - 1, point["y"] - 1)


def test_qrcode_to_image_black_transparent(matrix, tmp_path):
    points_file = tmp_path / "points.json"
    image = qrcode_to_image(matrix, TransparentMode.BLACK_AS_TRANSPARENT, 50, points_file)
    assert image.size == (50, 50)
    assert image.getpixel((5, 5)) == (255, 255, 255, 255)
    assert image.getpixel((15, 15))[3] == 0
    assert image.getpixel((25, 15))[3] == 255
    document = json.loads(points_file.read_text(encoding="utf-8"))
    assert document["qrcodearray"] == qr_point_list(matrix)


def test_qrcode_to_image_white_transparent(matrix):
    image = qrcode_to_image(matrix, TransparentMode.WHITE_AS_TRANSPARENT, 50)
    assert image.getpixel((5, 5))[3] == 0
    assert image.getpixel((15, 15)) == (0, 0, 0, 255)


def test_save_qr_code_image(matrix, tmp_path):
    path = save_qr_code_image(matrix, tmp_path / "code.png")
    with Image.open(path) as saved:
        assert saved.size == (512, 512)
        assert saved.convert("RGB").getpixel((0, 0)) == (255, 255, 255)
        # module (0, 0) sits at bordered cell (1, 1), 512/5 pixels per cell
        assert saved.convert("RGB").getpixel((150, 150)) == (0, 0, 0)


def test_image_overlay_blends():
    background = Image.new("RGB", (4, 4), (10, 20, 30))
    overlay = Image.new("RGBA", (2, 2), (0, 0, 0, 0))
    overlay.putpixel((0, 0), (200, 100, 50, 255))
    result = image_overlay(overlay, background)
    assert result.mode == "RGB"
    assert result.getpixel((0, 0)) == (200, 100, 50)
    assert result.getpixel((1, 1)) == (10, 20, 30)
    assert result.getpixel((3, 3)) == (10, 20, 30)


def test_image_overlay_converts_palette():
    background = Image.new("P", (3, 3))
    result = image_overlay(Image.new("RGBA", (3, 3), (0, 0, 0, 0)), background)
    assert result.mode == "RGB"
    assert result.size == (3, 3)


def test_draw_grid_colours():
    small = QrMatrix.from_rows([[1, 0], [0, 1]])
    image = Image.new("RGB", (40, 40), (255, 255, 255))
    result = draw_grid(image, small, 40)
    assert result.getpixel((0, 5)) == (0, 128, 0)
    assert result.getpixel((10, 5)) == (0, 255, 0)
    assert image.getpixel((0, 5)) == (255, 255, 255)


def test_generate_on_black_background(matrix):
    encoder = RecordingEncoder(matrix)
    helper = QrHelper(encoder)
    image = helper.generate_qr_image("a b", target_width=50)
    assert encoder.calls == [b"a%20b"]
    assert image.size == (50, 50)
    assert image.getpixel((5, 5)) == (255, 255, 255)
    assert image.getpixel((15, 15)) == (0, 0, 0)


def test_generate_truncates_long_text(matrix):
    encoder = RecordingEncoder(matrix)
    helper = QrHelper(encoder, max_url_length=5)
    helper.generate_qr_image("abcdefghij", target_width=50)
    assert encoder.calls == [b"abcde"]


def test_generate_crops_huge_background(matrix):
    background = Image.new("RGB", (1800, 1800), (9, 8, 7))
    helper = QrHelper(RecordingEncoder(matrix))
    image = helper.generate_qr_image("x", background=background, target_width=50)
    assert image.size == (50, 50)
    assert image.getpixel((15, 15)) == (9, 8, 7)


def test_generate_scales_small_background(matrix):
    background = Image.new("RGB", (10, 20), (9, 8, 7))
    helper = QrHelper(RecordingEncoder(matrix))
    image = helper.generate_qr_image(
        "x", background=background, target_width=50, show_grid=True
    )
    assert image.size == (50, 50)
    assert image.getpixel((0, 5)) == (0, 128, 0)


def test_generate_failure_image():
    helper = QrHelper(RecordingEncoder(None))
    image = helper.generate_qr_image("x")
    assert image.size == (256, 256)
    assert image.getpixel((255, 255)) == (0, 255, 0)
    assert FAILED_TEXT.startswith("QR code")


def test_generate_numbered_image(matrix, tmp_path):
    encoder = RecordingEncoder(matrix)
    path = QrHelper(encoder).generate_numbered_image(42, tmp_path)
    assert path == tmp_path / "42.png"
    assert path.exists()
    assert encoder.calls == [b"42"]


def test_generate_numbered_image_failure(tmp_path):
    with pytest.raises(ValueError):
        QrHelper(RecordingEncoder(None)).generate_numbered_image(7, tmp_path)