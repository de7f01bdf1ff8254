import math
from typing import Optional, Tuple
import numpy as np
from core.math import Vec3, EPS


def sample_count(significance: float, sample_scale: float) -> int:
    """유의도에 비례하는 확산 샘플 수: floor(K * significance)"""
    return int(sample_scale * significance)


def random_direction(rng: np.random.Generator) -> Vec3:
    # 3차원 표준정규분포는 등방성 -> 방향이 구 위에서 균일
    while True:
        x, y, z = rng.standard_normal(3)
        if x * x + y * y + z * z >= EPS:
            return Vec3(x, y, z)


def sample_hemisphere(offset: Vec3, radius: float, rng: np.random.Generator) -> Tuple[Vec3, float]:
    """
    법선 쪽 반구로 접은 랜덤 방향과 가중치를 반환.

    offset: 구 중심 -> 교차점 벡터 (길이 radius, 정규화하지 않은 법선)
    weight = (v . offset) / (radius * |v|), 즉 법선과의 cos 값.
    균일 분포를 접은 것이므로 cosine 중요도 샘플링과는 다르다.
    """
    v = random_direction(rng)
    dot = v.dot(offset)
    if dot < 0:
        v = -v
        dot = -dot
    weight = dot / (radius * v.length())
    return v, weight


def mirror_direction(incoming: Vec3, offset: Vec3, radius: float) -> Optional[Vec3]:
    """
    incoming (= 이전 교차점 - 현재 교차점)을 법선에 대해 거울 반사.

    -v/|v|^2 + s * 2(v.s)/(r^2 |v|^2), 결과 길이는 1/|v| (정규화하지 않음).
    |v|가 0이면 방향을 정의할 수 없으므로 None.
    """
    vnormsq = incoming.length_squared()
    if vnormsq < EPS:
        return None
    mult = 2.0 * incoming.dot(offset) / (radius * radius * vnormsq)
    return -incoming / vnormsq + offset * mult


def lambert_falloff(offset: Vec3, radius: float, point: Vec3, light_position: Vec3) -> float:
    """
    점광원의 직접광 계수: -(s . v) / (|v|^2 * r * |v|), v = point - light.
    |v|^2은 역제곱 감쇠, 나머지 |v| 와 r은 두 벡터의 정규화. 음수면 0.
    """
    v = point - light_position
    vnormsq = v.length_squared()
    if vnormsq < EPS:
        return 0.0
    light_from = -offset.dot(v) / (vnormsq * radius * math.sqrt(vnormsq))
    return max(0.0, light_from)
