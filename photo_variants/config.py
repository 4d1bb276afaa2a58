import logging
import os
import tempfile

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


LOG_LEVEL            = os.getenv("LOG_LEVEL", "INFO").upper()
TMP_ROOT             = os.getenv("PHOTO_VARIANTS_TMP_DIR") or tempfile.gettempdir()
WORKERS              = _int_env("PHOTO_VARIANTS_WORKERS", os.cpu_count() or 1)
QUALITY              = _int_env("PHOTO_VARIANTS_QUALITY", 80)
INTERMEDIATE_QUALITY = _int_env("PHOTO_VARIANTS_INTERMEDIATE_QUALITY", 80)

if WORKERS < 1:
    raise RuntimeError("PHOTO_VARIANTS_WORKERS must be at least 1")
for _name, _value in (("PHOTO_VARIANTS_QUALITY", QUALITY),
                      ("PHOTO_VARIANTS_INTERMEDIATE_QUALITY", INTERMEDIATE_QUALITY)):
    if not 1 <= _value <= 100:
        raise RuntimeError(f"{_name} must be between 1 and 100")

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("photo_variants")
