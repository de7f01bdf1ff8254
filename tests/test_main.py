import errno
import pytest
from PIL import Image

import main


def test_main_writes_bitmap(tmp_path, capsys):
    out = tmp_path / "render.bmp"
    code = main.main([
        "--renderer", "cpu_raytracer",
        "--scene", "single",
        "-w", "8", "--height", "6",
        "-k", "0",
        "-o", str(out),
    ])
    assert code == 0
    with Image.open(out) as img:
        assert img.format == "BMP"
        assert img.size == (8, 6)
    assert "이미지 저장" in capsys.readouterr().out


def test_main_reports_write_failure(tmp_path, capsys):
    out = tmp_path / "no_such_dir" / "render.bmp"
    code = main.main([
        "--renderer", "cpu_raytracer",
        "--scene", "single",
        "-w", "4", "--height", "4",
        "-k", "0",
        "-o", str(out),
    ])
    assert code == errno.ENOENT
    assert "파일 저장 오류" in capsys.readouterr().out


def test_main_rejects_invalid_size(capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(["-w", "0"])
    assert exc.value.code == 2
