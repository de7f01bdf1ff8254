from core.math import Vec3
from core.material import Material
from core.geometry import Sphere
from core.scene import Scene, PointLight, DirectionalLight
from core.camera import Camera


class SpheresSceneBuilder:
    """거울 구 두 개, 확산 구 두 개, 반쯤 반사하는 구 하나로 이루어진 기본 씬"""

    def __init__(self):
        # (중심, 반지름, reflectivity, 알베도)
        self.spheres = [
            (Vec3(-1.2, 1.1, 4.5), 0.9, 1.0, Vec3(0.95, 0.95, 0.95)),
            (Vec3(-1.2, -1.0, 4.5), 0.9, 1.0, Vec3(0.95, 0.95, 0.95)),
            (Vec3(1.2, 1.0, 4.5), 0.6, 0.0, Vec3(0.5, 0.9, 0.5)),
            (Vec3(-1.2, 1.1, 2.0), 0.6, 0.0, Vec3(0.5, 0.9, 0.5)),
            (Vec3(0.9, -1.0, 4.5), 1.0, 0.6, Vec3(0.9, 0.5, 0.5)),
        ]

        # 점광원: 구들 사이의 약한 조명 + 아래쪽 멀리 있는 강한 조명
        self.lights = [
            (Vec3(0, 0.3, 4.5), Vec3(0.5, 0.5, 0.5)),
            (Vec3(0, -100, 0), Vec3(7000, 7000, 7000)),
        ]

        self.directional_lights = [
            (Vec3(1, 0, 0), Vec3(0.5, 0.5, 0.5)),
        ]

    def build_scene(self) -> Scene:
        scene = Scene()

        for center, radius, reflectivity, color in self.spheres:
            scene.add_object(Sphere(center, radius, Material(color=color, reflectivity=reflectivity)))

        for position, power in self.lights:
            scene.add_light(PointLight(position, power))

        for direction, power in self.directional_lights:
            scene.add_directional_light(DirectionalLight(direction, power))

        # 하늘 그라데이션 (수평선 -> 천정)
        scene.background_low = Vec3(0.2, 0.2, 0.5)
        scene.background_high = Vec3(0.5, 0.5, 0.5)

        return scene.freeze()

    def create_camera(self, horiz_ratio: float = 0.5, vert_ratio: float = 0.5) -> Camera:
        # 원점에서 +z 방향
        return Camera(horiz_ratio, vert_ratio)
