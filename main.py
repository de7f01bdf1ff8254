import sys
import time
import argparse
from core.scene import RenderSettings
from core.image import save_bmp
from scene_builders.spheres_scene_builder import SpheresSceneBuilder
from scene_builders.single_sphere_scene_builder import SingleSphereSceneBuilder
from renderers.base_renderer import RendererFactory

# 렌더러 모듈들 import (등록을 위해)
import renderers.cpu_renderer
import renderers.numba_renderer


SCENE_BUILDERS = {
    'spheres': SpheresSceneBuilder,
    'single': SingleSphereSceneBuilder,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Recursive Monte Carlo sphere ray tracer')
    parser.add_argument('--renderer', '-r',
                        choices=RendererFactory.list_available(),
                        default='numba_raytracer',
                        help='렌더러 선택')
    parser.add_argument('--scene',
                        choices=list(SCENE_BUILDERS),
                        default='spheres',
                        help='씬 선택: spheres (기본 구 5개), single (구 하나)')
    parser.add_argument('--width', '-w', type=int, default=700,
                        help='이미지 가로 크기')
    parser.add_argument('--height', type=int, default=700,
                        help='이미지 세로 크기')
    parser.add_argument('--depth', '-d', type=int, default=10,
                        help='최대 재귀 깊이')
    parser.add_argument('--sample-scale', '-k', type=float, default=2000.0,
                        help='확산 샘플 수 = floor(K * significance)')
    parser.add_argument('--seed', type=int, default=0,
                        help='난수 시드 (같은 시드 -> 같은 이미지)')
    parser.add_argument('--normalization',
                        choices=['streaming', 'buffered'],
                        default='streaming',
                        help='확산 유의도 정규화: streaming (누적합), buffered (최종 합)')
    parser.add_argument('--output', '-o', default='out.bmp',
                        help='출력 파일명 (BMP)')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # 렌더링 설정
    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            sample_scale=args.sample_scale,
            seed=args.seed,
            normalization=args.normalization
        )
    except ValueError as e:
        parser.error(str(e))

    # 씬 생성
    print(f"장면 생성 중: {args.scene}")
    scene_builder = SCENE_BUILDERS[args.scene]()
    scene = scene_builder.build_scene()
    camera = scene_builder.create_camera(settings.horiz_ratio, settings.vert_ratio)
    scene.summary()

    # 렌더러 생성
    print(f"렌더러 생성: {args.renderer}")
    renderer = RendererFactory.create(args.renderer)
    print(f"지원 기능: {', '.join(renderer.get_capabilities())}")

    # 렌더링 실행
    start_time = time.time()
    image = renderer.render(scene, camera, settings)

    # 결과 저장
    try:
        save_bmp(image, args.output)
    except OSError as e:
        print(f"파일 저장 오류: 0x{(e.errno or 0):x} ({e.strerror or e})")
        return e.errno or 1
    print(f"이미지 저장: {args.output}")

    # 실행 시간 출력
    elapsed = time.time() - start_time
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    print(f"총 실행 시간: {minutes}분 {seconds:.2f}초")
    return 0


if __name__ == "__main__":
    sys.exit(main())
