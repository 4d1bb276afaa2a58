import base64
from pathlib import Path

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError

from photo_variants.config import QUALITY, logger
from photo_variants.errors import ImageProcessingError
from photo_variants.processor import ImageProcessor
from photo_variants.schemas import ImageInfo, VariantOut

router       = APIRouter()
processor    = ImageProcessor()
info_adapter = TypeAdapter(list[ImageInfo])


@router.post("/variants", response_model=list[VariantOut], status_code=201)
def create_variants(
    file: UploadFile = File(...),
    variants: str    = Form(...),
    quality: int     = Form(QUALITY),
):
    try:
        specs = info_adapter.validate_json(variants)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid variants: {e}")

    try:
        results = processor.execute(file.file, specs, quality)
    except ImageProcessingError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    # the work directory is server-local, so the bytes travel in the response
    try:
        payload = [
            VariantOut(
                kind=r.kind,
                width=r.width,
                height=r.height,
                data=base64.b64encode(Path(r.file_path).read_bytes()).decode("ascii"),
            )
            for r in results
        ]
    finally:
        processor.cleanup(results)

    logger.info("Built %d variants from %s", len(payload), file.filename)
    return payload
