"""
Image generation orchestrator: translate prompt, pick strategy by model family, call Workers AI.
Translation then generation, strictly sequential. Generation errors propagate unchanged.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from image_gateway.config import Settings, get_settings
from image_gateway.errors import UpstreamProtocolError
from image_gateway.schemas import GenerationResult
from image_gateway.translator import PromptTranslator
from image_gateway.upstream import Chooser, CloudflareAIClient

logger = logging.getLogger(__name__)

STANDARD_GUIDANCE = 7.5
STANDARD_STRENGTH = 1


def _parse_dimension(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def parse_size(size: str) -> tuple[int | None, int | None]:
    """
    "512x768" -> (512, 768). Non-integer parts become None and are sent as null;
    no bounds are enforced here, the upstream model decides.
    """
    parts = size.split("x")
    width = _parse_dimension(parts[0])
    height = _parse_dimension(parts[1]) if len(parts) > 1 else None
    return width, height


def decode_fast_image(data: Any) -> str:
    """Extract result.image from a Flux reply. Raises UpstreamProtocolError if absent."""
    result = data.get("result") if isinstance(data, dict) else None
    image = result.get("image") if isinstance(result, dict) else None
    if not isinstance(image, str) or not image:
        raise UpstreamProtocolError("Invalid response from upstream model")
    return image


class ImageGenerationService:
    """Settings are passed in explicitly; nothing here reads configuration on its own."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        rng: Chooser | None = None,
    ) -> None:
        self._settings = settings
        self._upstream = CloudflareAIClient(settings, client=client, rng=rng)
        self._translator = PromptTranslator(settings, self._upstream)

    @property
    def settings(self) -> Settings:
        return self._settings

    async def close(self) -> None:
        await self._upstream.close()

    def resolve_model(self, name: str | None) -> str:
        """Alias -> upstream id via model_map. Unknown names are treated as upstream ids."""
        name = (name or "").strip() or self._settings.default_model
        return self._settings.model_map.get(name, name)

    def is_fast_model(self, model: str) -> bool:
        return model == self._settings.fast_model

    async def generate(self, prompt: str, model: str, size: str, num_steps: int) -> GenerationResult:
        logger.info(
            "Generating image: model=%s, size=%s, num_steps=%s, prompt=%r",
            model,
            size,
            num_steps,
            prompt,
        )
        translated_prompt = await self._translator.translate(prompt)
        logger.info("Translated prompt: %r", translated_prompt)
        try:
            if self.is_fast_model(model):
                image = await self.generate_fast(model, translated_prompt, num_steps)
            else:
                image = await self.generate_standard(model, translated_prompt, size, num_steps)
        except Exception as e:
            logger.error("Image generation failed (model=%s): %s", model, e)
            raise
        return GenerationResult(prompt=prompt, translated_prompt=translated_prompt, image=image)

    async def generate_standard(self, model: str, prompt: str, size: str, num_steps: int) -> str:
        width, height = parse_size(size)
        body = {
            "prompt": prompt,
            "num_steps": num_steps,
            "guidance": STANDARD_GUIDANCE,
            "strength": STANDARD_STRENGTH,
            "width": width,
            "height": height,
        }
        response = await self._upstream.run(model, body)
        return base64.b64encode(response.content).decode("ascii")

    async def generate_fast(self, model: str, prompt: str, num_steps: int) -> str:
        response = await self._upstream.run(model, {"prompt": prompt, "num_steps": num_steps})
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamProtocolError("Invalid response from upstream model") from e
        return decode_fast_image(data)

    async def check_connection(self) -> None:
        await self._upstream.check_connection()


# Process-wide instance for the HTTP layer; built from settings once.
_service: ImageGenerationService | None = None


def get_image_service() -> ImageGenerationService:
    global _service
    if _service is None:
        _service = ImageGenerationService(get_settings())
    return _service


async def shutdown_image_service() -> None:
    global _service
    if _service is not None:
        await _service.close()
        _service = None
