import math
from abc import ABC, abstractmethod
from typing import Optional
from core.math import Vec3, Ray
from core.material import Material


def intersect_sphere(ray: Ray, center: Vec3, radius: float) -> Optional[float]:
    """
    t^2 (V.V) - 2t (V.(C-O)) + ((C-O).(C-O) - r^2) = 0 의 작은 근.
    판별식 < 0 이거나 작은 근이 0 이하이면 None (뒤쪽/원점 위의 교차는 무시).
    """
    # 레이 원점 기준 상대좌표로 계산
    oc = center - ray.origin
    a = ray.direction.length_squared()
    if a == 0.0:
        return None
    b = -2.0 * ray.direction.dot(oc)
    c = oc.length_squared() - radius * radius

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0:
        return None

    t = (-b - math.sqrt(discriminant)) / (2.0 * a)
    if t <= 0:
        return None
    return t


class Hittable(ABC):
    @abstractmethod
    def intersect(self, ray: Ray) -> Optional[float]:
        pass

    @abstractmethod
    def normal_at(self, point: Vec3) -> Vec3:
        pass


class Sphere(Hittable):
    def __init__(self, center: Vec3, radius: float, material: Material):
        if not radius > 0:
            raise ValueError(f"sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)
        self.material = material

    @property
    def reflectivity(self) -> float:
        return self.material.reflectivity

    @property
    def color(self) -> Vec3:
        return self.material.color

    def intersect(self, ray: Ray) -> Optional[float]:
        return intersect_sphere(ray, self.center, self.radius)

    def offset(self, point: Vec3) -> Vec3:
        """중심에서 point로 향하는 벡터. 표면 위에서는 길이가 radius"""
        return point - self.center

    def normal_at(self, point: Vec3) -> Vec3:
        # 바깥 방향 단위 법선
        return self.offset(point).normalize()

    def __repr__(self):
        return (f"Sphere(center={self.center}, radius={self.radius:.3f}, "
                f"reflectivity={self.reflectivity:.2f}, color={self.color})")
