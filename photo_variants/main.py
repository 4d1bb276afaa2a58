from fastapi import FastAPI

from photo_variants.api.variants import router as variants_router

app = FastAPI(title="Photo Variants API")
app.include_router(variants_router)
