from typing import List
import numpy as np

from core.math import Vec3, Ray, EPS
from core.scene import Scene, RenderSettings
from core.camera import Camera
from core.sampling import sample_count, sample_hemisphere, mirror_direction, lambert_falloff
from renderers.base_renderer import BaseRenderer, RendererFactory


BLACK = Vec3(0, 0, 0)


class CPURenderer(BaseRenderer):
    """순수 파이썬 재귀 몬테카를로 렌더러 (기준 구현)"""

    def __init__(self):
        super().__init__("cpu_raytracer")

    def get_capabilities(self) -> List[str]:
        return [
            "ray_tracing",
            "shadows",
            "reflection",
            "diffuse_interreflection",
            "adaptive_sampling",
            "seeded_rng"
        ]

    def render_radiance(self, scene: Scene, camera: Camera, settings: RenderSettings) -> np.ndarray:
        rng = np.random.default_rng(settings.seed)
        width, height = settings.width, settings.height
        radiance = np.zeros((height, width, 3), dtype=np.float64)

        for j in range(height):
            for i in range(width):
                col = self.trace_pixel(scene, camera, settings, rng, i, j)
                # j는 아래->위, 배열 행은 위->아래
                radiance[height - 1 - j, i] = (col.x, col.y, col.z)

            if j % 50 == 0:
                print(f"CPU is working for you...: {height - j}")

        return radiance

    def trace_pixel(self, scene: Scene, camera: Camera, settings: RenderSettings,
                    rng: np.random.Generator, i: int, j: int) -> Vec3:
        ray = camera.get_ray(i, j, settings.width, settings.height)
        rec = scene.hit(ray)
        if not rec:
            return scene.background(ray.direction)
        return self.shade(scene, settings, rng, rec.index, camera.origin, rec.point, 0, 1.0)

    def shade(self, scene: Scene, settings: RenderSettings, rng: np.random.Generator,
              index: int, from_point: Vec3, point: Vec3, depth: int, significance: float) -> Vec3:
        """
        index번 구 위의 point에서 from_point 방향으로 나가는 radiance.

        확산 샘플(개수는 유의도에 비례) + 점광원 직접광 + 거울 반사 1샘플을 합쳐
        reflectivity로 섞고, 마지막에 물체 색으로 틴트한다.
        """
        if depth > settings.max_depth:
            return BLACK

        obj = scene.objects[index]
        significance *= obj.color.min_component()
        if significance <= settings.negligible_significance:
            return BLACK

        offset = obj.offset(point)
        radius = obj.radius
        reflectivity = obj.reflectivity

        fully_reflective = reflectivity > 1 - EPS
        fully_nonreflective = reflectivity < EPS

        # 1) 반구 확산 샘플
        color = BLACK
        if not fully_reflective:
            color = self._diffuse(scene, settings, rng, index, point, offset, radius,
                                  depth, significance, reflectivity)

        # 2) 점광원 직접광 (그림자 검사 포함)
        for light in scene.lights:
            if scene.is_shadowed(point, light.position, index):
                continue
            color += light.power * lambert_falloff(offset, radius, point, light.position)

        # 3) 거울 반사
        if not fully_nonreflective:
            reflection = BLACK
            direction = mirror_direction(from_point - point, offset, radius)
            if direction is not None:
                reflection = self._gather(scene, settings, rng, index, point, direction,
                                          depth, significance * reflectivity)
            color = reflection * reflectivity + color * (1 - reflectivity)

        return color * obj.color

    def _diffuse(self, scene: Scene, settings: RenderSettings, rng: np.random.Generator,
                 index: int, point: Vec3, offset: Vec3, radius: float,
                 depth: int, significance: float, reflectivity: float) -> Vec3:
        """가중 평균 sum(w * L) / sum(w). 가중치 합이 0이면 기여 없음"""
        count = sample_count(significance, settings.sample_scale)
        accumulated = BLACK
        weight_sum = 0.0
        for direction, weight, normalizer in self._weighted_samples(settings, rng, offset, radius, count):
            weight_sum += weight
            child_significance = 0.0
            if normalizer > EPS:
                child_significance = significance * (1 - reflectivity) * weight / normalizer
            col = self._gather(scene, settings, rng, index, point, direction, depth, child_significance)
            accumulated += col * weight

        if weight_sum <= EPS:
            return BLACK
        return accumulated / weight_sum

    def _weighted_samples(self, settings: RenderSettings, rng: np.random.Generator,
                          offset: Vec3, radius: float, count: int):
        """(direction, weight, normalizer) 생성.

        streaming: normalizer는 지금까지의 가중치 누적합 (샘플을 뽑으면서 바로 재귀).
        buffered: 모든 방향을 먼저 뽑고 최종 가중치 합을 normalizer로 사용.
        """
        if settings.normalization == "buffered":
            samples = [sample_hemisphere(offset, radius, rng) for _ in range(count)]
            total = sum(weight for _, weight in samples)
            for direction, weight in samples:
                yield direction, weight, total
        else:
            running = 0.0
            for _ in range(count):
                direction, weight = sample_hemisphere(offset, radius, rng)
                running += weight
                yield direction, weight, running

    def _gather(self, scene: Scene, settings: RenderSettings, rng: np.random.Generator,
                index: int, point: Vec3, direction: Vec3, depth: int, significance: float) -> Vec3:
        """point에서 direction으로 나간 레이가 가져오는 radiance (빗나가면 배경)"""
        rec = scene.hit(Ray(point, direction), exclude=index)
        if not rec:
            return scene.background(direction)
        return self.shade(scene, settings, rng, rec.index, point, rec.point, depth + 1, significance)


# 렌더러 등록
RendererFactory.register("cpu_raytracer", CPURenderer)
