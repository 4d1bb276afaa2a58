"""Shared fixtures: synthetic photos written to ``tmp_path``."""

from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from photo_variants.processor import ImageProcessor
from photo_variants.utils.encoder_pool import EncoderPoolManager

EXIF_ORIENTATION = 0x0112


def make_photo(path: Path, width: int, height: int, mode: str = "RGB", orientation: int | None = None) -> Path:
    """Write a photo with some structure so JPEG encoding has work to do."""
    img  = Image.new("RGB", (width, height), (40, 90, 160))
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, width // 2, height // 2), fill=(220, 40, 40))
    draw.ellipse((width // 4, height // 4, width * 3 // 4, height * 3 // 4), fill=(30, 200, 60))

    if mode == "RGBA":
        img = img.convert("RGBA")
        img.putalpha(128)
        img.save(path, format="PNG")
        return path

    save_kwargs = {"format": "JPEG", "quality": 95}
    if orientation is not None:
        exif = Image.Exif()
        exif[EXIF_ORIENTATION] = orientation
        save_kwargs["exif"] = exif.tobytes()
    img.save(path, **save_kwargs)
    return path


@pytest.fixture
def landscape_photo(tmp_path: Path) -> Path:
    """1600x1200 JPEG."""
    return make_photo(tmp_path / "landscape.jpg", 1600, 1200)


@pytest.fixture
def rotated_photo(tmp_path: Path) -> Path:
    """Stored as 1600x800 but tagged orientation 6 (displayed as 800x1600)."""
    return make_photo(tmp_path / "rotated.jpg", 1600, 800, orientation=6)


@pytest.fixture
def transparent_photo(tmp_path: Path) -> Path:
    """600x400 semi-transparent PNG."""
    return make_photo(tmp_path / "transparent.png", 600, 400, mode="RGBA")


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    root = tmp_path / "work_root"
    root.mkdir()
    return root


@pytest.fixture
def pool_manager() -> EncoderPoolManager:
    return EncoderPoolManager(workers=2)


@pytest.fixture
def processor(work_root: Path, pool_manager: EncoderPoolManager) -> ImageProcessor:
    return ImageProcessor(tmp_dir=work_root, pool_manager=pool_manager)


@pytest.fixture
def variant_specs() -> list[dict]:
    return [
        {"kind": "small", "width": 800, "height": 800},
        {"kind": "thumb", "width": 400, "height": 400, "crop": True},
        {"kind": "large", "width": 1200, "height": 1200},
    ]


@pytest.fixture
def sixteen_bit_photo(tmp_path: Path) -> Path:
    """200x100 dark-gray 16-bit grayscale PNG (value 1000 of 65535)."""
    path = tmp_path / "deep.png"
    Image.new("I;16", (200, 100), 1000).save(path, format="PNG")
    return path


@pytest.fixture
def sliver_photo(tmp_path: Path) -> Path:
    """10x1000 JPEG, narrow enough that fitting it into a flat box rounds to 0px."""
    return make_photo(tmp_path / "sliver.jpg", 10, 1000)
