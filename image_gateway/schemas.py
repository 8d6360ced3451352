"""
Request/response schemas for the image gateway API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GenerateImageRequest(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    prompt: str = Field(..., min_length=1, max_length=4000)
    model: str | None = Field(default=None, description="Model alias or upstream model id. Empty uses the default model.")
    size: str = Field(default="1024x1024", description="WIDTHxHEIGHT, forwarded for standard models only.")
    num_steps: int = Field(default=4, ge=1, le=50)


class GenerationResult(BaseModel):
    """Produced once per request. Serialized as {prompt, translatedPrompt, image}."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    translated_prompt: str = Field(..., serialization_alias="translatedPrompt")
    image: str = Field(..., description="Base64 image (standard models) or upstream passthrough (fast models).")


class ModelInfo(BaseModel):
    id: str
    upstream_id: str
    fast: bool = False


class ModelList(BaseModel):
    object: str = "list"
    data: list[ModelInfo]
