# Router aggregator – import each route module here and expose ``api_router``
# for convenient inclusion in the FastAPI app.

from fastapi import APIRouter

from . import (
    routes_audio,
    routes_calc,
    routes_convert,
    routes_image,
    routes_url,
)


api_router = APIRouter()
api_router.include_router(routes_convert.router, prefix="/convert", tags=["convert"])
api_router.include_router(routes_image.router, prefix="/image", tags=["image"])
api_router.include_router(routes_url.router, prefix="/url", tags=["url"])
api_router.include_router(routes_audio.router, prefix="/audio", tags=["audio"])
api_router.include_router(routes_calc.router, prefix="/calc", tags=["calc"])
