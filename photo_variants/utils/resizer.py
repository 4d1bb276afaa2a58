from pathlib import Path
from typing import BinaryIO, Union

from PIL import Image, ImageOps

from photo_variants.config import INTERMEDIATE_QUALITY
from photo_variants.errors import ImageProcessingError
from photo_variants.schemas import OutFileInfo

Source = Union[str, Path, BinaryIO]

# Modes a JPEG can hold as-is; everything else is flattened to RGB.
JPEG_MODES = ("RGB", "L")
BACKGROUND = (255, 255, 255)
HIGH_BIT_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I", "F")


def _describe(src: Source) -> str:
    if isinstance(src, (str, Path)):
        return str(src)
    return getattr(src, "name", None) or "<stream>"


def _load(src: Source, *, arrange: bool) -> Image.Image:
    """Decode *src* fully; with *arrange*, apply the EXIF orientation."""
    try:
        with Image.open(src) as img:
            if arrange:
                img = ImageOps.exif_transpose(img)
            else:
                img = img.copy()
    except FileNotFoundError:
        raise
    except (OSError, Image.DecompressionBombError) as e:  # UnidentifiedImageError, truncated data
        raise ImageProcessingError(f"Cannot decode image: {e}", path=_describe(src)) from e
    return to_jpeg_mode(img)


def _high_bit_to_l(img: Image.Image) -> Image.Image:
    # I;16* and I hold 16-bit samples, F is rescaled from its own range
    if img.mode == "F":
        lo, hi = img.getextrema()
        if lo >= 0 and hi <= 255:
            return img.convert("L")
        scale = 255 / (hi - lo) if hi > lo else 0
        return img.point(lambda v: (v - lo) * scale).convert("L")
    return img.convert("I").point(lambda v: v / 256).convert("L")


def to_jpeg_mode(img: Image.Image) -> Image.Image:
    if img.mode in JPEG_MODES:
        return img
    if img.mode in HIGH_BIT_MODES:
        return _high_bit_to_l(img)
    if img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        rgba       = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, BACKGROUND)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return img.convert("RGB")


def fit_size(src_width: int, src_height: int, width: int, height: int) -> tuple[int, int]:
    """Largest size with the source's aspect ratio inside the box, never below 1px."""
    ratio = min(width / src_width, height / src_height)
    return max(1, round(src_width * ratio)), max(1, round(src_height * ratio))


def fit_inside(img: Image.Image, width: int, height: int) -> Image.Image:
    """Scale to the largest size that fits the box; small images are enlarged."""
    size = fit_size(img.width, img.height, width, height)
    return img.resize(size, Image.Resampling.LANCZOS)


def cover_and_crop(img: Image.Image, width: int, height: int) -> Image.Image:
    """Crop the centered region with the box's aspect ratio, then scale it to the box."""
    target = width / height
    if img.width / img.height > target:
        crop_w, crop_h = max(1, round(img.height * target)), img.height
    else:
        crop_w, crop_h = img.width, max(1, round(img.width / target))
    left = (img.width - crop_w) // 2
    top  = (img.height - crop_h) // 2
    region = img.crop((left, top, left + crop_w, top + crop_h))
    return region.resize((width, height), Image.Resampling.LANCZOS)


def _save_jpeg(img: Image.Image, dest_path: Path, quality: int) -> OutFileInfo:
    img = to_jpeg_mode(img)
    try:
        img.save(dest_path, format="JPEG", quality=quality, optimize=True)
    except OSError as e:
        raise ImageProcessingError(f"Cannot write JPEG: {e}", path=str(dest_path)) from e
    return OutFileInfo(
        width=img.width,
        height=img.height,
        channels=len(img.getbands()),
        size=dest_path.stat().st_size,
    )


def convert_stream_to_arranged_file(
    src: Source,
    dest_path: str | Path,
    max_width: int,
    max_height: int,
    quality: int = INTERMEDIATE_QUALITY,
) -> OutFileInfo:
    """
    Decode the source, undo its EXIF rotation and fit it inside
    ``max_width x max_height``. The result is the base every smaller
    variant is derived from.
    """
    img = _load(src, arrange=True)
    img = fit_inside(img, max_width, max_height)
    return _save_jpeg(img, Path(dest_path), quality)


def convert_to_scaled_file(
    src_path: str | Path,
    dest_path: str | Path,
    crop: bool,
    max_width: int,
    max_height: int,
    quality: int = INTERMEDIATE_QUALITY,
) -> OutFileInfo:
    img = _load(src_path, arrange=False)
    if crop:
        img = cover_and_crop(img, max_width, max_height)
    else:
        img = fit_inside(img, max_width, max_height)
    return _save_jpeg(img, Path(dest_path), quality)
