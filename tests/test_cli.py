"""Tests for the photo-variants command line."""

import argparse
import json
from pathlib import Path

import pytest
from PIL import Image

from photo_variants.cli import main, parse_variant


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("large:1200x1200", ("large", 1200, 1200, False)),
        ("thumb:400X300:crop", ("thumb", 400, 300, True)),
    ],
)
def test_parse_variant(value: str, expected: tuple) -> None:
    info = parse_variant(value)
    assert (info.kind, info.width, info.height, info.crop) == expected


@pytest.mark.parametrize("value", ["large", "large:1200", "large:axb", "large:10x10:fill", ":10x10", "x:0x10"])
def test_parse_variant_rejects(value: str) -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        parse_variant(value)


def test_main_prints_json_lines(landscape_photo: Path, work_root: Path, capsys: pytest.CaptureFixture) -> None:
    code = main([
        str(landscape_photo),
        "--variant", "large:1200x1200",
        "--variant", "thumb:400x400:crop",
        "--quality", "70",
        "--tmp-dir", str(work_root),
    ])

    assert code == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [(l["kind"], l["width"], l["height"]) for l in lines] == [("large", 1200, 900), ("thumb", 400, 400)]
    assert all(Path(l["file_path"]).is_relative_to(work_root) for l in lines)


def test_main_missing_source(tmp_path: Path, work_root: Path) -> None:
    code = main([str(tmp_path / "missing.jpg"), "--variant", "a:10x10", "--tmp-dir", str(work_root)])
    assert code == 1


def test_main_requires_variant(landscape_photo: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main([str(landscape_photo)])
    assert exc.value.code == 2


def test_main_decompression_bomb(landscape_photo: Path, work_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    code = main([str(landscape_photo), "--variant", "a:10x10", "--tmp-dir", str(work_root)])
    assert code == 1
