import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from PIL import Image

from photo_variants.config import WORKERS, logger
from photo_variants.errors import ImageProcessingError


class EncoderPoolManager:
    """
    Owns the single encoder pool shared by every batch in flight.

    Each batch calls :meth:`retain` before encoding and :meth:`release`
    afterwards; the pool is created on the first retain and shut down
    when the last holder releases it.
    """

    def __init__(self, workers: int = WORKERS):
        self.workers    = workers
        self._pool: Optional[ThreadPoolExecutor] = None
        self._ref_count = 0
        self._lock      = threading.Lock()

    @property
    def ref_count(self) -> int:
        return self._ref_count

    @property
    def active(self) -> bool:
        return self._pool is not None

    def retain(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._pool is None:
                logger.debug("Starting encoder pool with %d workers", self.workers)
                self._pool = ThreadPoolExecutor(
                    max_workers=self.workers,
                    thread_name_prefix="jpeg-encoder",
                )
            self._ref_count += 1
            return self._pool

    def release(self) -> None:
        with self._lock:
            if self._ref_count == 0:
                raise RuntimeError("release() called without a matching retain()")
            self._ref_count -= 1
            if self._ref_count:
                return
            pool, self._pool = self._pool, None
        pool.shutdown(wait=True)
        logger.debug("Encoder pool shut down")


def encode_jpeg(src_path: str | Path, dest_path: str | Path, quality: int) -> Path:
    """Re-encode *src_path* as an optimized progressive JPEG at *quality*."""
    dest_path = Path(dest_path)
    try:
        with Image.open(src_path) as img:
            img.save(
                dest_path,
                format="JPEG",
                quality=quality,
                optimize=True,
                progressive=True,
            )
    except FileNotFoundError:
        raise
    except (OSError, Image.DecompressionBombError) as e:
        raise ImageProcessingError(f"Cannot encode JPEG: {e}", path=str(src_path)) from e
    return dest_path


# Shared by every ImageProcessor in the process.
encoder_pool_manager = EncoderPoolManager()
