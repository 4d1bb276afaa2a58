from photo_variants.errors import ImageProcessingError
from photo_variants.processor import ImageProcessor
from photo_variants.schemas import ImageInfo, OutImageInfo

__all__ = ["ImageProcessor", "ImageInfo", "OutImageInfo", "ImageProcessingError"]
