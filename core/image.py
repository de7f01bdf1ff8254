from typing import Tuple
import numpy as np
from PIL import Image
from core.math import EPS

# 감마 보정 후 256 * c^gamma 가 255를 넘지 않도록 하는 상한
DISPLAY_LIMIT = 1.0 - 256 * EPS - EPS

# 2835 pixels/meter
BMP_DPI = (72, 72)


def to_pixels(radiance: np.ndarray, gamma: float = 2.2) -> Tuple[np.ndarray, int]:
    """
    (H, W, 3) 선형 radiance -> (H, W, 3) uint8.

    한 채널이라도 DISPLAY_LIMIT 이상이면 색조를 유지하도록 세 채널을 같은 비율로
    줄인다 (밝기 손실). 잘린 픽셀 수를 함께 반환한다.
    """
    radiance = np.asarray(radiance, dtype=np.float64)
    peak = radiance.max(axis=-1, keepdims=True)
    clipped = peak >= DISPLAY_LIMIT

    scale = np.ones_like(peak)
    np.divide(DISPLAY_LIMIT, peak, out=scale, where=clipped)
    scaled = np.clip(radiance * scale, 0.0, DISPLAY_LIMIT)

    pixels = (256.0 * np.power(scaled, gamma)).astype(np.uint8)
    return pixels, int(np.count_nonzero(clipped))


def to_image(pixels: np.ndarray) -> Image.Image:
    """위->아래 행 순서의 RGB 배열을 PIL Image로"""
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8), 'RGB')


def save_bmp(image: Image.Image, path: str):
    """
    24비트 무압축 BMP 저장: BITMAPINFOHEADER, 아래->위 행 순서, BGR, 행마다 4바이트 정렬.
    생성/쓰기 실패는 OSError 그대로 전파한다.
    """
    image.save(path, format='BMP', dpi=BMP_DPI)
