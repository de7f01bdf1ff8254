import math
from typing import List
import numpy as np
from numba import njit

from core.math import EPS
from core.scene import Scene, RenderSettings
from core.camera import Camera
from renderers.base_renderer import BaseRenderer, RendererFactory


# spheres 행: x, y, z, r, reflectivity, red, green, blue
# lights 행:  x, y, z, power red, power green, power blue
# background: low rgb, high rgb


@njit
def seed_generator(seed):
    """numba 내부 난수 생성기 시드 (파이썬 쪽 np.random과는 별개)"""
    np.random.seed(seed)


@njit
def nearest_sphere(spheres, px, py, pz, vx, vy, vz, exclude):
    """p + t*v 와 가장 가까운 양의 t 교차. 없으면 (-1, 0.0)"""
    best = -1
    mint = 0.0
    a = vx * vx + vy * vy + vz * vz
    if a == 0.0:
        return best, mint
    for iobj in range(spheres.shape[0]):
        if iobj == exclude:
            continue
        # p 기준 상대좌표
        ox = spheres[iobj, 0] - px
        oy = spheres[iobj, 1] - py
        oz = spheres[iobj, 2] - pz
        r = spheres[iobj, 3]

        b = -2.0 * (vx * ox + vy * oy + vz * oz)
        c = ox * ox + oy * oy + oz * oz - r * r

        desc = b * b - 4.0 * a * c
        if desc < 0:
            continue

        t = (-b - math.sqrt(desc)) / (2.0 * a)
        if t <= 0:
            continue
        if best == -1 or t < mint:
            mint = t
            best = iobj
    return best, mint


@njit
def background_color(background, vx, vy, vz):
    nonvert = math.sqrt(vx * vx + vz * vz)
    if nonvert < EPS:
        return 0.0, 0.0, 0.0
    z = 10.0 * vy / nonvert
    if z >= 0:
        mult = 1.0 / (1.0 + math.exp(-z))
    else:
        e = math.exp(z)
        mult = e / (1.0 + e)
    return (background[0] + (background[3] - background[0]) * mult,
            background[1] + (background[4] - background[1]) * mult,
            background[2] + (background[5] - background[2]) * mult)


@njit
def shadowed(spheres, px, py, pz, lx, ly, lz, objnum):
    # 광원 기준 상대좌표, 선분 구간 [0, a]
    vx = px - lx
    vy = py - ly
    vz = pz - lz
    a = vx * vx + vy * vy + vz * vz
    for iobj in range(spheres.shape[0]):
        if iobj == objnum:
            continue
        ox = spheres[iobj, 0] - lx
        oy = spheres[iobj, 1] - ly
        oz = spheres[iobj, 2] - lz
        r = spheres[iobj, 3]

        b = -2.0 * (vx * ox + vy * oy + vz * oz)
        c = ox * ox + oy * oy + oz * oz - r * r

        desc = b * b - 4.0 * a * c
        if desc < 0:
            continue

        at = (-b - math.sqrt(desc)) / 2.0
        if at >= 0 and at <= a:
            return True
    return False


@njit
def hemisphere_sample(sx, sy, sz, snorm):
    """균일 랜덤 방향을 법선 쪽으로 접는다. (vx, vy, vz, weight)"""
    while True:
        vx = np.random.standard_normal()
        vy = np.random.standard_normal()
        vz = np.random.standard_normal()
        vnormsq = vx * vx + vy * vy + vz * vz
        if vnormsq >= EPS:
            break

    dot = vx * sx + vy * sy + vz * sz
    if dot < 0:
        vx = -vx
        vy = -vy
        vz = -vz
        dot = -dot
    return vx, vy, vz, dot / (snorm * math.sqrt(vnormsq))


@njit
def child_significance(significance, reflectivity, weight, weightsum, total, buffered):
    """확산 샘플 하나가 자식에게 넘기는 유의도.

    streaming은 지금까지의 누적합, buffered는 최종 합으로 나눈다.
    """
    normalizer = total if buffered else weightsum
    if normalizer <= EPS:
        return 0.0
    return significance * (1 - reflectivity) * weight / normalizer


@njit
def colorsat(spheres, lights, background, objnum, fx, fy, fz, px, py, pz,
             depth, significance, max_depth, sample_scale, negligible, buffered):
    """objnum번 구 위의 p에서 f 쪽으로 나가는 radiance (r, g, b)"""
    if depth > max_depth:
        return 0.0, 0.0, 0.0

    min_sig = min(spheres[objnum, 5], spheres[objnum, 6], spheres[objnum, 7])
    significance *= min_sig
    if significance <= negligible:
        return 0.0, 0.0, 0.0

    # 구의 법선 (길이 snorm)
    sx = px - spheres[objnum, 0]
    sy = py - spheres[objnum, 1]
    sz = pz - spheres[objnum, 2]
    snorm = spheres[objnum, 3]

    reflectivity = spheres[objnum, 4]
    fully_reflective = reflectivity > 1 - EPS
    fully_nonreflective = reflectivity < EPS

    ans_r = 0.0
    ans_g = 0.0
    ans_b = 0.0

    # 반구 확산 샘플
    if not fully_reflective:
        count = int(sample_scale * significance)
        diff_r = 0.0
        diff_g = 0.0
        diff_b = 0.0
        weightsum = 0.0

        # buffered: 방향을 먼저 모두 뽑고 최종 가중치 합으로 정규화
        samples = np.empty((count if buffered else 0, 4))
        total = 0.0
        if buffered:
            for i in range(count):
                vx, vy, vz, weight = hemisphere_sample(sx, sy, sz, snorm)
                samples[i, 0] = vx
                samples[i, 1] = vy
                samples[i, 2] = vz
                samples[i, 3] = weight
                total += weight

        for i in range(count):
            if buffered:
                vx = samples[i, 0]
                vy = samples[i, 1]
                vz = samples[i, 2]
                weight = samples[i, 3]
            else:
                vx, vy, vz, weight = hemisphere_sample(sx, sy, sz, snorm)
            weightsum += weight

            child = child_significance(significance, reflectivity, weight, weightsum, total, buffered)
            bestobj, mint = nearest_sphere(spheres, px, py, pz, vx, vy, vz, objnum)
            if bestobj == -1:
                col_r, col_g, col_b = background_color(background, vx, vy, vz)
            else:
                col_r, col_g, col_b = colorsat(spheres, lights, background, bestobj,
                                               px, py, pz, mint * vx + px, mint * vy + py, mint * vz + pz,
                                               depth + 1, child, max_depth, sample_scale, negligible, buffered)
            diff_r += col_r * weight
            diff_g += col_g * weight
            diff_b += col_b * weight

        if weightsum > EPS:
            ans_r += diff_r / weightsum
            ans_g += diff_g / weightsum
            ans_b += diff_b / weightsum

    # 점광원은 랜덤 샘플과 별도로 직접 계산
    for ilight in range(lights.shape[0]):
        lx = lights[ilight, 0]
        ly = lights[ilight, 1]
        lz = lights[ilight, 2]
        if shadowed(spheres, px, py, pz, lx, ly, lz, objnum):
            continue

        vx = px - lx
        vy = py - ly
        vz = pz - lz
        vnormsq = vx * vx + vy * vy + vz * vz
        if vnormsq < EPS:
            continue

        # vnormsq 한 번은 역제곱 감쇠, 한 번은 정규화
        light_from = -(sx * vx + sy * vy + sz * vz) / (vnormsq * snorm * math.sqrt(vnormsq))
        if light_from > 0:
            ans_r += light_from * lights[ilight, 3]
            ans_g += light_from * lights[ilight, 4]
            ans_b += light_from * lights[ilight, 5]

    # 거울 반사 1샘플
    if not fully_nonreflective:
        ref_r = 0.0
        ref_g = 0.0
        ref_b = 0.0
        vx = fx - px
        vy = fy - py
        vz = fz - pz
        vnormsq = vx * vx + vy * vy + vz * vz
        if vnormsq >= EPS:
            mult = 2.0 * (vx * sx + vy * sy + vz * sz) / (snorm * snorm * vnormsq)
            rx = -vx / vnormsq + sx * mult
            ry = -vy / vnormsq + sy * mult
            rz = -vz / vnormsq + sz * mult
            bestobj, mint = nearest_sphere(spheres, px, py, pz, rx, ry, rz, objnum)
            if bestobj == -1:
                ref_r, ref_g, ref_b = background_color(background, rx, ry, rz)
            else:
                ref_r, ref_g, ref_b = colorsat(spheres, lights, background, bestobj,
                                               px, py, pz, mint * rx + px, mint * ry + py, mint * rz + pz,
                                               depth + 1, significance * reflectivity,
                                               max_depth, sample_scale, negligible, buffered)
        ans_r = reflectivity * ref_r + (1 - reflectivity) * ans_r
        ans_g = reflectivity * ref_g + (1 - reflectivity) * ans_g
        ans_b = reflectivity * ref_b + (1 - reflectivity) * ans_b

    # 물체 색으로 틴트
    return (ans_r * spheres[objnum, 5],
            ans_g * spheres[objnum, 6],
            ans_b * spheres[objnum, 7])


@njit
def render_frame(spheres, lights, background, width, height, horiz_ratio, vert_ratio,
                 ox, oy, oz, max_depth, sample_scale, negligible, buffered):
    radiance = np.zeros((height, width, 3))
    for j in range(height):
        cy = vert_ratio * 2.0 * (j - height // 2) / height
        for i in range(width):
            cx = horiz_ratio * 2.0 * (i - width // 2) / width

            bestobj, mint = nearest_sphere(spheres, ox, oy, oz, cx, cy, 1.0, -1)
            row = height - 1 - j
            if bestobj == -1:
                r, g, b = background_color(background, cx, cy, 1.0)
            else:
                r, g, b = colorsat(spheres, lights, background, bestobj,
                                   ox, oy, oz, ox + mint * cx, oy + mint * cy, oz + mint,
                                   0, 1.0, max_depth, sample_scale, negligible, buffered)
            radiance[row, i, 0] = r
            radiance[row, i, 1] = g
            radiance[row, i, 2] = b
    return radiance


class NumbaRenderer(BaseRenderer):
    """numba로 컴파일한 CPU 렌더러. 알고리즘은 cpu_raytracer와 동일"""

    def __init__(self):
        super().__init__("numba_raytracer")

    def get_capabilities(self) -> List[str]:
        return [
            "ray_tracing",
            "shadows",
            "reflection",
            "diffuse_interreflection",
            "adaptive_sampling",
            "seeded_rng",
            "jit_compiled"
        ]

    def render_radiance(self, scene: Scene, camera: Camera, settings: RenderSettings) -> np.ndarray:
        spheres, lights, background = scene.to_arrays()
        print(f"씬 데이터: Spheres {spheres.shape[0]}개, 점광원 {lights.shape[0]}개 (첫 실행은 JIT 컴파일 포함)")

        if settings.seed is not None:
            seed_generator(settings.seed)

        origin = camera.origin
        return render_frame(
            spheres, lights, background,
            settings.width, settings.height,
            float(camera.horiz_ratio), float(camera.vert_ratio),
            origin.x, origin.y, origin.z,
            settings.max_depth, float(settings.sample_scale),
            float(settings.negligible_significance),
            settings.normalization == "buffered"
        )


# 렌더러 등록
RendererFactory.register("numba_raytracer", NumbaRenderer)
