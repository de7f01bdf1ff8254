import pytest

from core.math import Vec3, Ray
from core.material import Material
from core.geometry import Sphere, intersect_sphere
from conftest import make_scene


# --- Tests for intersect_sphere ---

def test_intersect_unit_direction():
    """Ray along +z hits the near face of a sphere centered on the axis."""
    ray = Ray(Vec3(0, 0, 0), Vec3(0, 0, 1))
    t = intersect_sphere(ray, Vec3(0, 0, 5), 1.0)
    assert t == pytest.approx(4.0)


def test_intersect_unnormalized_direction():
    """The quadratic's a coefficient compensates for a non-unit direction."""
    ray = Ray(Vec3(0, 0, 0), Vec3(0, 0, 2))
    t = intersect_sphere(ray, Vec3(0, 0, 5), 1.0)
    assert t == pytest.approx(2.0)
    assert ray.point_at_parameter(t).z == pytest.approx(4.0)


def test_intersect_oblique_matches_analytic_root():
    origin = Vec3(1, 2, 3)
    direction = Vec3(0.3, -0.2, 1.5)
    center = Vec3(2.5, 1.0, 10.0)
    radius = 1.7
    t = intersect_sphere(Ray(origin, direction), center, radius)
    assert t is not None
    point = origin + direction * t
    assert (point - center).length() == pytest.approx(radius)
    # 작은 근: 조금 더 앞은 구 밖
    before = origin + direction * (t * 0.999)
    assert (before - center).length() > radius


def test_intersect_miss_negative_discriminant():
    ray = Ray(Vec3(0, 0, 0), Vec3(0, 0, 1))
    assert intersect_sphere(ray, Vec3(3, 0, 5), 1.0) is None


def test_intersect_behind_origin():
    ray = Ray(Vec3(0, 0, 0), Vec3(0, 0, 1))
    assert intersect_sphere(ray, Vec3(0, 0, -5), 1.0) is None


def test_intersect_origin_inside_sphere_is_miss():
    """Only the smaller root counts; from inside it is negative."""
    ray = Ray(Vec3(0, 0, 0), Vec3(0, 0, 1))
    assert intersect_sphere(ray, Vec3(0, 0, 0.5), 1.0) is None


def test_intersect_zero_direction():
    ray = Ray(Vec3(0, 0, 0), Vec3(0, 0, 0))
    assert intersect_sphere(ray, Vec3(0, 0, 5), 1.0) is None


# --- Tests for Sphere ---

def test_sphere_rejects_non_positive_radius():
    with pytest.raises(ValueError):
        Sphere(Vec3(0, 0, 0), 0.0, Material())


def test_material_rejects_reflectivity_out_of_range():
    with pytest.raises(ValueError):
        Material(color=Vec3(1, 1, 1), reflectivity=1.5)
    with pytest.raises(ValueError):
        Material(color=Vec3(1, 1, 1), reflectivity=-0.1)


def test_sphere_normal_is_outward_unit():
    sphere = Sphere(Vec3(1, 1, 1), 2.0, Material())
    normal = sphere.normal_at(Vec3(1, 3, 1))
    assert (normal.x, normal.y, normal.z) == pytest.approx((0, 1, 0))


def test_sphere_normal_is_unit_off_surface():
    # 부동소수점 오차로 표면에서 살짝 벗어난 점도 단위 법선
    sphere = Sphere(Vec3(0, 0, 0), 2.0, Material())
    normal = sphere.normal_at(Vec3(0, 0, 2.5))
    assert normal.length() == pytest.approx(1.0)
    assert (normal.x, normal.y, normal.z) == pytest.approx((0, 0, 1))


# --- Tests for Scene.hit ---

def test_scene_hit_picks_nearest():
    scene = make_scene(spheres=[
        (Vec3(0, 0, 10), 1.0, 0.0, Vec3(1, 1, 1)),
        (Vec3(0, 0, 5), 1.0, 0.0, Vec3(1, 1, 1)),
    ])
    rec = scene.hit(Ray(Vec3(0, 0, 0), Vec3(0, 0, 1)))
    assert rec
    assert rec.index == 1
    assert rec.t == pytest.approx(4.0)
    assert (rec.normal.x, rec.normal.y, rec.normal.z) == pytest.approx((0, 0, -1))


def test_scene_hit_excludes_self():
    scene = make_scene(spheres=[
        (Vec3(0, 0, 10), 1.0, 0.0, Vec3(1, 1, 1)),
        (Vec3(0, 0, 5), 1.0, 0.0, Vec3(1, 1, 1)),
    ])
    rec = scene.hit(Ray(Vec3(0, 0, 0), Vec3(0, 0, 1)), exclude=1)
    assert rec.index == 0
    assert rec.t == pytest.approx(9.0)


def test_scene_hit_nothing():
    scene = make_scene()
    rec = scene.hit(Ray(Vec3(0, 0, 0), Vec3(0, 0, 1)))
    assert not rec
    assert rec.point is None
