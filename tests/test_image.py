import struct
import numpy as np
import pytest
from PIL import Image

from core.image import to_pixels, to_image, save_bmp, DISPLAY_LIMIT


# --- Tests for to_pixels ---

def test_to_pixels_gamma():
    radiance = np.array([[[0.0, 0.5, 0.9]]])
    pixels, clipped = to_pixels(radiance, 2.2)
    assert clipped == 0
    expected = [int(256 * c ** 2.2) for c in (0.0, 0.5, 0.9)]
    assert pixels[0, 0].tolist() == expected


def test_to_pixels_rescales_bright_colors_keeping_hue():
    radiance = np.array([[[2.0, 1.0, 0.0], [0.2, 0.2, 0.2]]])
    pixels, clipped = to_pixels(radiance, 2.2)
    assert clipped == 1
    assert pixels[0, 0].tolist() == [255, int(256 * (0.5 * DISPLAY_LIMIT) ** 2.2), 0]
    assert pixels[0, 1].tolist() == [int(256 * 0.2 ** 2.2)] * 3


def test_to_pixels_exactly_one_does_not_overflow():
    pixels, clipped = to_pixels(np.ones((2, 2, 3)), 2.2)
    assert clipped == 4
    assert (pixels == 255).all()


# --- Tests for BMP output ---

@pytest.fixture
def sample_pixels():
    # 3행 x 5열, 5*3 = 15바이트 -> 행마다 1바이트 패딩
    pixels = np.zeros((3, 5, 3), dtype=np.uint8)
    for row in range(3):
        for col in range(5):
            pixels[row, col] = (10 * row + col, 100 + row, 200 + col)
    return pixels


def test_bmp_header_fields(sample_pixels, tmp_path):
    path = tmp_path / "out.bmp"
    save_bmp(to_image(sample_pixels), str(path))
    data = path.read_bytes()

    magic, size, reserved, offset = struct.unpack_from("<2sIII", data, 0)
    assert magic == b"BM"
    assert reserved == 0
    assert offset == 54
    stride = 16
    assert size == len(data) == 54 + stride * 3

    (header_size, width, height, planes, bits, compression, image_size,
     hres, vres, palette, important) = struct.unpack_from("<IiiHHIIiiII", data, 14)
    assert header_size == 40
    assert (width, height) == (5, 3)
    assert planes == 1
    assert bits == 24
    assert compression == 0
    assert image_size == stride * 3
    assert (hres, vres) == (2835, 2835)
    assert (palette, important) == (0, 0)


def test_bmp_rows_bottom_up_bgr(sample_pixels, tmp_path):
    path = tmp_path / "out.bmp"
    save_bmp(to_image(sample_pixels), str(path))
    data = path.read_bytes()

    stride = 16
    for file_row in range(3):
        image_row = 2 - file_row    # 파일 첫 행 = 이미지 맨 아래
        start = 54 + file_row * stride
        row = data[start:start + stride]
        for col in range(5):
            b, g, r = row[col * 3:col * 3 + 3]
            assert (r, g, b) == tuple(sample_pixels[image_row, col])


def test_bmp_roundtrip_with_pillow(sample_pixels, tmp_path):
    path = tmp_path / "out.bmp"
    save_bmp(to_image(sample_pixels), str(path))
    with Image.open(path) as img:
        assert img.format == "BMP"
        assert img.size == (5, 3)
        assert np.array_equal(np.asarray(img.convert("RGB")), sample_pixels)


def test_bmp_write_failure_raises(sample_pixels, tmp_path):
    with pytest.raises(OSError):
        save_bmp(to_image(sample_pixels), str(tmp_path / "missing" / "out.bmp"))
