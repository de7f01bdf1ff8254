import math
from typing import List, Optional, Tuple
from dataclasses import dataclass
import numpy as np
from core.math import Vec3, Ray, EPS
from core.material import HitRecord
from core.geometry import Sphere


@dataclass
class RenderSettings:
    width: int = 700
    height: int = 700
    horiz_ratio: float = 0.5
    vert_ratio: float = 0.5
    max_depth: int = 10
    sample_scale: float = 2000.0
    negligible_significance: float = 0.001
    gamma: float = 2.2
    seed: Optional[int] = 0
    normalization: str = "streaming"   # "streaming" | "buffered"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.sample_scale < 0:
            raise ValueError(f"sample_scale must be >= 0, got {self.sample_scale}")
        if self.normalization not in ("streaming", "buffered"):
            raise ValueError(f"Unknown normalization: {self.normalization}")


@dataclass(frozen=True)
class PointLight:
    position: Vec3
    power: Vec3   # 채널별 방사 강도, 1.0을 넘을 수 있다


@dataclass(frozen=True)
class DirectionalLight:
    """무한히 먼 광원. 선언만 되어 있고 셰이딩 루프에서는 사용하지 않는다."""
    direction: Vec3
    power: Vec3

    def __post_init__(self):
        if abs(self.direction.length() - 1.0) > 1e-6:
            raise ValueError(f"directional light direction must be unit length, got {self.direction}")


def logistic_blend(low: Vec3, high: Vec3, elevation: float) -> Vec3:
    """low + (high - low) / (1 + e^(-10 x)), 큰 |x|에서도 overflow 없이 계산"""
    z = 10.0 * elevation
    if z >= 0:
        mult = 1.0 / (1.0 + math.exp(-z))
    else:
        e = math.exp(z)
        mult = e / (1.0 + e)
    return low + (high - low) * mult


class Scene:
    def __init__(self):
        self.objects: List[Sphere] = []
        self.lights: List[PointLight] = []
        self.directional_lights: List[DirectionalLight] = []
        self.background_low = Vec3(0.2, 0.2, 0.5)    # 수평선 쪽
        self.background_high = Vec3(0.5, 0.5, 0.5)   # 천정 쪽
        self._frozen = False

    def add_object(self, obj: Sphere):
        self._check_mutable()
        self.objects.append(obj)

    def add_light(self, light: PointLight):
        self._check_mutable()
        self.lights.append(light)

    def add_directional_light(self, light: DirectionalLight):
        self._check_mutable()
        self.directional_lights.append(light)

    def freeze(self) -> "Scene":
        """빌드가 끝난 씬을 읽기 전용으로 고정"""
        self.objects = tuple(self.objects)
        self.lights = tuple(self.lights)
        self.directional_lights = tuple(self.directional_lights)
        self._frozen = True
        return self

    def _check_mutable(self):
        if self._frozen:
            raise RuntimeError("Scene is frozen")

    def hit(self, ray: Ray, exclude: int = -1) -> HitRecord:
        """모든 구를 선형 탐색하여 가장 가까운 양의 t 교차를 찾는다 (exclude 인덱스 제외)"""
        rec = HitRecord()
        for i, obj in enumerate(self.objects):
            if i == exclude:
                continue
            t = obj.intersect(ray)
            if t is None:
                continue
            if t < rec.t:
                rec.index = i
                rec.t = t

        if rec:
            rec.point = ray.point_at_parameter(rec.t)
            rec.normal = self.objects[rec.index].normal_at(rec.point)
        return rec

    def background(self, direction: Vec3) -> Vec3:
        nonvert = math.sqrt(direction.x * direction.x + direction.z * direction.z)
        if nonvert < EPS:
            # 거의 수직인 레이: NaN 대신 검은색
            return Vec3(0, 0, 0)
        return logistic_blend(self.background_low, self.background_high, direction.y / nonvert)

    def is_shadowed(self, point: Vec3, light_position: Vec3, self_index: int) -> bool:
        """광원 -> point 선분을 self_index 이외의 구가 가리는지 검사"""
        # 광원 기준 상대좌표, 선분 구간은 [0, a]
        v = point - light_position
        a = v.length_squared()
        for i, obj in enumerate(self.objects):
            if i == self_index:
                continue
            oc = obj.center - light_position
            b = -2.0 * v.dot(oc)
            c = oc.length_squared() - obj.radius * obj.radius

            desc = b * b - 4.0 * a * c
            if desc < 0:
                continue

            at = (-b - math.sqrt(desc)) / 2.0
            if 0 <= at <= a:
                return True
        return False

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """컴파일된 렌더러용으로 씬을 float64 배열로 변환"""
        spheres = np.zeros((len(self.objects), 8), dtype=np.float64)
        for i, obj in enumerate(self.objects):
            spheres[i] = [
                obj.center.x, obj.center.y, obj.center.z, obj.radius,
                obj.reflectivity,
                obj.color.x, obj.color.y, obj.color.z
            ]

        lights = np.zeros((len(self.lights), 6), dtype=np.float64)
        for i, light in enumerate(self.lights):
            lights[i] = [
                light.position.x, light.position.y, light.position.z,
                light.power.x, light.power.y, light.power.z
            ]

        background = np.array([
            self.background_low.x, self.background_low.y, self.background_low.z,
            self.background_high.x, self.background_high.y, self.background_high.z
        ], dtype=np.float64)
        return spheres, lights, background

    def summary(self):
        print("=== 씬 객체 분석 ===")
        for i, obj in enumerate(self.objects):
            print(f"객체 {i}: {obj}")
        for i, light in enumerate(self.lights):
            print(f"점광원 {i}: position={light.position}, power={light.power}")
        for i, light in enumerate(self.directional_lights):
            print(f"방향광 {i}: direction={light.direction}, power={light.power} (셰이딩에 사용되지 않음)")
