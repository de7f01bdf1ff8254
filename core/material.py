from core.math import Vec3


class Material:
    def __init__(self,
                 color: Vec3 = Vec3(1, 1, 1),
                 reflectivity=0.0):
        """
        color: Vec3, 채널별 알베도(틴트). 표면에 도달한 모든 빛에 곱해진다
        reflectivity: 거울 반사 비율 (0~1). 나머지 (1 - reflectivity)는 확산 + 직접광
        """
        if not 0.0 <= reflectivity <= 1.0:
            raise ValueError(f"reflectivity must be in [0, 1], got {reflectivity}")
        if color.min_component() < 0.0:
            raise ValueError(f"albedo channels must be non-negative, got {color}")
        self.color = color
        self.reflectivity = float(reflectivity)


class HitRecord:
    def __init__(self):
        self.index = -1
        self.t = float('inf')
        self.point = None
        self.normal = None

    def __bool__(self):
        return self.index >= 0
