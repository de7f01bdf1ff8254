from core.math import Vec3
from core.material import Material
from core.geometry import Sphere
from core.scene import Scene, PointLight
from core.camera import Camera


class SingleSphereSceneBuilder:
    """시선 방향으로 distance 만큼 떨어진 반지름 1의 확산 구 + 점광원 하나"""

    def __init__(self,
                 distance: float = 3.0,
                 light_position: Vec3 = Vec3(0, 0.5, 0),   # 눈 바로 위
                 light_power: Vec3 = Vec3(2, 2, 2),
                 color: Vec3 = Vec3(0.9, 0.9, 0.9)):
        self.distance = distance
        self.light_position = light_position
        self.light_power = light_power
        self.color = color

    def build_scene(self) -> Scene:
        scene = Scene()
        scene.add_object(Sphere(Vec3(0, 0, self.distance), 1.0,
                                Material(color=self.color, reflectivity=0.0)))
        scene.add_light(PointLight(self.light_position, self.light_power))
        return scene.freeze()

    def create_camera(self, horiz_ratio: float = 0.5, vert_ratio: float = 0.5) -> Camera:
        return Camera(horiz_ratio, vert_ratio)
