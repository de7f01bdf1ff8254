from core.math import Vec3, Ray


class Camera:
    def __init__(self,
                 horiz_ratio: float = 0.5,   # 화면 가장자리에서의 x/z (수평 화각 비율)
                 vert_ratio: float = 0.5,    # 화면 가장자리에서의 y/z (수직 화각 비율)
                 origin: Vec3 = Vec3(0, 0, 0)):
        # 핀홀 카메라: 눈은 origin, +z 방향을 바라보고 뷰 평면은 z = 1
        self.origin = origin
        self.horiz_ratio = horiz_ratio
        self.vert_ratio = vert_ratio

    def get_ray(self, i: int, j: int, width: int, height: int) -> Ray:
        """픽셀 (i, j) -> 레이. i는 왼쪽->오른쪽, j는 아래->위"""
        cx = self.horiz_ratio * 2.0 * (i - width // 2) / width
        cy = self.vert_ratio * 2.0 * (j - height // 2) / height
        return Ray(self.origin, Vec3(cx, cy, 1.0))
