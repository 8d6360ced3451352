"""Shared fixtures: settings without .env, and an httpx.MockTransport that records upstream calls."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from image_gateway.config import Settings

FAST_MODEL = "@cf/black-forest-labs/flux-1-schnell"
STANDARD_MODEL = "@cf/bytedance/stable-diffusion-xl-lightning"
TRANSLATE_MODEL = "@cf/qwen/qwen1.5-14b-chat-awq"

ACCOUNTS = [
    {"account_id": "acc-1", "token": "token-1"},
    {"account_id": "acc-2", "token": "token-2"},
]


class FirstChoice:
    """Deterministic stand-in for random: always the first credential."""

    def choice(self, seq):
        return seq[0]


class UpstreamRecorder:
    """Routes requests by model id (the URL tail after /ai/run/) and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, model: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handlers[model] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        model = request.url.path.split("/ai/run/", 1)[1]
        handler = self.handlers.get(model)
        if handler is None:
            return httpx.Response(404, text=f"no mock for {model}")
        return handler(request)

    def calls_to(self, model: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(f"/ai/run/{model}")]

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content)


def make_settings(**overrides) -> Settings:
    values = {
        "account_list": ACCOUNTS,
        "is_translate": False,
        "translate_model": TRANSLATE_MODEL,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def recorder() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def mock_client(recorder: UpstreamRecorder) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder))
