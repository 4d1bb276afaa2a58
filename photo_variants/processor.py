"""
Resize one photograph into several named JPEG variants.

Layout of a batch while it is being built::

    <tmp_root>/workXXXXXXXX/
        <kind>.jpg          resized, not yet optimized (deleted afterwards)
        optimized/
            <kind>.jpg      final output returned to the caller

The largest requested variant is produced straight from the source and
every smaller one is scaled down from it, so the source is decoded once.
"""

import logging
import os
import shutil
import tempfile
from concurrent.futures import wait
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from photo_variants.config import QUALITY, TMP_ROOT, logger as default_logger
from photo_variants.schemas import ImageInfo, OutImageInfo
from photo_variants.utils.encoder_pool import EncoderPoolManager, encode_jpeg, encoder_pool_manager
from photo_variants.utils.resizer import Source, convert_stream_to_arranged_file, convert_to_scaled_file

OPTIMIZED_DIR   = "optimized"
WORK_DIR_PREFIX = "work"


class ImageProcessor:
    def __init__(
        self,
        tmp_dir: Union[str, Path, None] = None,
        logger: Optional[logging.Logger] = None,
        pool_manager: Optional[EncoderPoolManager] = None,
    ):
        self.tmp_root     = Path(os.path.abspath(tmp_dir if tmp_dir is not None else TMP_ROOT))
        self.logger       = logger or default_logger
        self.pool_manager = pool_manager or encoder_pool_manager

    # ── public API ─────────────────────────────────────────────────────────
    def execute(
        self,
        source: Source,
        image_infos: Sequence[Union[ImageInfo, Mapping[str, Any]]],
        quality: int = QUALITY,
    ) -> list[OutImageInfo]:
        """
        Build every variant in *image_infos* from *source* (a path or a
        readable binary stream) and return them largest first.

        Output files live in a fresh work directory under ``tmp_root``;
        they belong to the caller, who may pass the results to
        :meth:`cleanup` when done with them.
        """
        infos = self._validate(image_infos, quality)

        self.tmp_root.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix=WORK_DIR_PREFIX, dir=self.tmp_root))
        try:
            (work_dir / OPTIMIZED_DIR).mkdir()
            return self._build(source, infos, work_dir, quality)
        except Exception:
            shutil.rmtree(work_dir, ignore_errors=True)
            raise

    def cleanup(self, results: Iterable[OutImageInfo]) -> None:
        """Remove the work directories holding *results*."""
        for work_dir in {Path(r.file_path).parent.parent for r in results}:
            if work_dir.parent != self.tmp_root or not work_dir.name.startswith(WORK_DIR_PREFIX):
                raise ValueError(f"{work_dir} is not a work directory of this processor")
            shutil.rmtree(work_dir, ignore_errors=True)
            self.logger.info("Removed work directory %s", work_dir)

    # ── steps ──────────────────────────────────────────────────────────────
    @staticmethod
    def _validate(
        image_infos: Sequence[Union[ImageInfo, Mapping[str, Any]]],
        quality: int,
    ) -> list[ImageInfo]:
        if not image_infos:
            raise ValueError("imageInfo requires at least 1 item")
        if not 1 <= quality <= 100:
            raise ValueError(f"quality must be between 1 and 100, got {quality}")

        infos = [
            info if isinstance(info, ImageInfo) else ImageInfo.model_validate(info)
            for info in image_infos
        ]
        seen: set[str] = set()
        for info in infos:
            if info.kind in seen:
                raise ValueError(f"duplicate image kind: {info.kind!r}")
            seen.add(info.kind)
        return infos

    def _build(
        self,
        source: Source,
        infos: list[ImageInfo],
        work_dir: Path,
        quality: int,
    ) -> list[OutImageInfo]:
        # sorted() is stable, equal areas keep the caller's order
        max_info, *rest = sorted(infos, key=lambda i: i.area, reverse=True)
        max_path = work_dir / f"{max_info.kind}.jpg"

        generated = [self._generate_arranged_file(source, max_path, max_info)]
        for info in rest:
            dest_path = work_dir / f"{info.kind}.jpg"
            generated.append(self._generate_scaled_file(max_path, dest_path, info))

        pool = self.pool_manager.retain()
        try:
            futures = [
                pool.submit(
                    self._generate_optimized_file,
                    out.file_path,
                    work_dir / OPTIMIZED_DIR / Path(out.file_path).name,
                    quality,
                )
                for out in generated
            ]
            wait(futures)
            results = [
                out.model_copy(update={"file_path": str(future.result())})
                for out, future in zip(generated, futures)
            ]
        finally:
            self.pool_manager.release()

        for out in generated:
            Path(out.file_path).unlink(missing_ok=True)
        self.logger.info("Deleted scaled and unoptimized image files")
        return results

    def _generate_arranged_file(self, source: Source, dest_path: Path, info: ImageInfo) -> OutImageInfo:
        file_info = convert_stream_to_arranged_file(source, dest_path, info.width, info.height)
        result = OutImageInfo(
            kind=info.kind,
            width=file_info.width,
            height=file_info.height,
            file_path=str(dest_path),
        )
        self.logger.info("Generated maximum scaled image file: %s", result.model_dump())
        return result

    def _generate_scaled_file(self, src_path: Path, dest_path: Path, info: ImageInfo) -> OutImageInfo:
        file_info = convert_to_scaled_file(src_path, dest_path, info.crop, info.width, info.height)
        result = OutImageInfo(
            kind=info.kind,
            width=file_info.width,
            height=file_info.height,
            file_path=str(dest_path),
        )
        self.logger.info("Generated scaled image file from maximum scaled one: %s", result.model_dump())
        return result

    def _generate_optimized_file(self, src_path: str, dest_path: Path, quality: int) -> Path:
        encode_jpeg(src_path, dest_path, quality)
        self.logger.info("Generated optimized image file: %s", dest_path)
        return dest_path
