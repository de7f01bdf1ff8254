import pytest

from core.math import Vec3
from core.material import Material
from core.geometry import Sphere
from core.scene import Scene, PointLight, RenderSettings
from scene_builders.spheres_scene_builder import SpheresSceneBuilder
from scene_builders.single_sphere_scene_builder import SingleSphereSceneBuilder


def make_scene(spheres=(), lights=()):
    """(center, radius, reflectivity, color) / (position, power) 튜플로 씬 구성"""
    scene = Scene()
    for center, radius, reflectivity, color in spheres:
        scene.add_object(Sphere(center, radius, Material(color=color, reflectivity=reflectivity)))
    for position, power in lights:
        scene.add_light(PointLight(position, power))
    return scene.freeze()


@pytest.fixture
def spheres_builder():
    return SpheresSceneBuilder()


@pytest.fixture
def single_builder():
    return SingleSphereSceneBuilder()


@pytest.fixture
def small_settings():
    # 빠른 테스트용: 작은 이미지, 확산 샘플 없음
    return RenderSettings(width=16, height=16, sample_scale=0, seed=1)
