"""
Workers AI REST client: random account pick, authenticated JSON POST, error classification.
No retries. Callers decode the returned response (raw bytes or JSON).
"""

from __future__ import annotations

import logging
import random
from typing import Any, Protocol, Sequence

import httpx

from image_gateway.config import AccountCredential, Settings
from image_gateway.errors import TransportError, UpstreamError, UpstreamHttpError

logger = logging.getLogger(__name__)

CONNECTION_CHECK_PROMPT = "Hello, world!"


class Chooser(Protocol):
    def choice(self, seq: Sequence[AccountCredential]) -> AccountCredential: ...


def pick_credential(
    pool: Sequence[AccountCredential],
    rng: Chooser | None = None,
) -> AccountCredential:
    """Uniform random draw from the credential pool. Pass rng for deterministic tests."""
    if not pool:
        raise ValueError("Credential pool is empty. Set CF_ACCOUNT_LIST.")
    return (rng or random).choice(pool)


class CloudflareAIClient:
    """
    Thin async client over POST {api_base}/accounts/{account_id}/ai/run/{model}.
    One httpx.AsyncClient per instance, created on first use.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        rng: Chooser | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._rng = rng
        # Injected clients belong to the caller and are left open on close().
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.request_timeout_seconds),
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Release resources. Safe to call multiple times."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def build_url(self, account: AccountCredential, model: str) -> str:
        base = self._settings.api_base.rstrip("/")
        return f"{base}/accounts/{account.account_id}/ai/run/{model}"

    async def run(self, model: str, body: dict[str, Any]) -> httpx.Response:
        """
        POST body to model using a randomly picked account.
        Raises UpstreamHttpError on non-2xx, TransportError when the call cannot complete.
        """
        account = pick_credential(self._settings.account_list, self._rng)
        url = self.build_url(account, model)
        headers = {
            "Authorization": f"Bearer {account.token.get_secret_value()}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._get_client().post(url, json=body, headers=headers)
            if not response.is_success:
                error_text = response.text
                logger.error(
                    "Upstream AI API request failed: %s %s",
                    response.status_code,
                    error_text,
                )
                raise UpstreamHttpError(response.status_code, error_text)
            return response
        except UpstreamError:
            raise
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Upstream AI API call to %s failed: %s", model, e)
            raise TransportError("Failed to connect to upstream AI API") from e

    async def check_connection(self) -> None:
        """Minimal chat call against the translation model; body discarded."""
        await self.run(
            self._settings.translate_model,
            {"messages": [{"role": "user", "content": CONNECTION_CHECK_PROMPT}]},
        )
        logger.info("Upstream AI API reachable (model=%s)", self._settings.translate_model)
