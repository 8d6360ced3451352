"""
FastAPI routes: /v1/images/generations, /v1/models, upstream connectivity check.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from image_gateway.errors import UpstreamError
from image_gateway.schemas import GenerateImageRequest, GenerationResult, ModelInfo, ModelList
from image_gateway.service import ImageGenerationService, get_image_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["images"])

ServiceDep = Annotated[ImageGenerationService, Depends(get_image_service)]


@router.post("/images/generations", response_model=GenerationResult)
async def generate_image(body: GenerateImageRequest, service: ServiceDep) -> GenerationResult:
    """Translate (if enabled) and generate. Upstream status codes are passed through."""
    model = service.resolve_model(body.model)
    try:
        return await service.generate(body.prompt, model, body.size, body.num_steps)
    except UpstreamError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except ValueError as e:
        logger.error("Image generation misconfigured: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    except Exception as e:
        logger.exception("Image generation error: %s", e)
        raise HTTPException(status_code=500, detail="Image generation failed") from e


@router.get("/models", response_model=ModelList)
async def list_models(service: ServiceDep) -> ModelList:
    settings = service.settings
    return ModelList(
        data=[
            ModelInfo(id=alias, upstream_id=upstream_id, fast=service.is_fast_model(upstream_id))
            for alias, upstream_id in settings.model_map.items()
        ]
    )


@router.get("/health/upstream")
async def upstream_health(service: ServiceDep) -> dict[str, str]:
    try:
        await service.check_connection()
    except UpstreamError as e:
        logger.warning("Upstream connectivity check failed: %s", e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except Exception as e:
        logger.exception("Upstream connectivity check error: %s", e)
        raise HTTPException(status_code=500, detail="Upstream connectivity check failed") from e
    return {"status": "ok"}
