"""FastAPI dependencies exposing the objects built by ``create_app``."""

from fastapi import Request

from ..pipeline import ConversionPipeline


def get_pipeline(request: Request) -> ConversionPipeline:
    return request.app.state.pipeline
