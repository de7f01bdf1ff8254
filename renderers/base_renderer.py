import time
from abc import ABC, abstractmethod
from typing import List
import numpy as np
from PIL import Image
from core.scene import Scene, RenderSettings
from core.camera import Camera
from core.image import to_pixels, to_image


class BaseRenderer(ABC):
    """모든 렌더러가 구현해야 하는 베이스 클래스"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def render_radiance(self, scene: Scene, camera: Camera, settings: RenderSettings) -> np.ndarray:
        """(height, width, 3) 선형 radiance, 행은 위->아래 순서"""
        pass

    @abstractmethod
    def get_capabilities(self) -> List[str]:
        """이 렌더러가 지원하는 기능들을 반환"""
        pass

    def render(self, scene: Scene, camera: Camera, settings: RenderSettings) -> Image.Image:
        """장면을 렌더링하여 PIL Image를 반환"""
        start_time = time.time()
        print(f"{self.name} 렌더링 시작: {settings.width}x{settings.height}, "
              f"sample scale {settings.sample_scale:g}, max depth {settings.max_depth}, seed {settings.seed}")

        radiance = self.render_radiance(scene, camera, settings)
        pixels, clipped = to_pixels(radiance, settings.gamma)
        if clipped:
            print(f"경고: {clipped}개 픽셀이 표시하기에 너무 밝아 축소되었습니다. "
                  f"색조는 유지되지만 밝기는 정확하지 않습니다.")

        elapsed = time.time() - start_time
        minutes = int(elapsed // 60)
        seconds = elapsed % 60
        print(f"{self.name} 렌더링 완료: {minutes}분 {seconds:.2f}초")
        return to_image(pixels)


class RendererFactory:
    """렌더러 팩토리 클래스"""

    _renderers = {}

    @classmethod
    def register(cls, name: str, renderer_class):
        """새로운 렌더러를 등록"""
        cls._renderers[name] = renderer_class

    @classmethod
    def create(cls, name: str, **kwargs) -> BaseRenderer:
        """등록된 렌더러를 생성"""
        if name not in cls._renderers:
            raise ValueError(f"Unknown renderer: {name}")
        return cls._renderers[name](**kwargs)

    @classmethod
    def list_available(cls) -> List[str]:
        """사용 가능한 렌더러 목록 반환"""
        return list(cls._renderers.keys())
