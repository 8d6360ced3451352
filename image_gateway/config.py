"""
Image gateway configuration. All settings from environment (prefix CF_).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MODEL_MAP: dict[str, str] = {
    "DS-8-CF": "@cf/lykon/dreamshaper-8-lcm",
    "SD-XL-Bash-CF": "@cf/stabilityai/stable-diffusion-xl-base-1.0",
    "SD-XL-Lightning-CF": "@cf/bytedance/stable-diffusion-xl-lightning",
    "FLUX.1-Schnell-CF": "@cf/black-forest-labs/flux-1-schnell",
}


class AccountCredential(BaseModel):
    """One Workers AI account: id used in the URL, token sent as bearer."""

    model_config = ConfigDict(frozen=True)

    account_id: str = Field(..., min_length=1)
    token: SecretStr


class Settings(BaseSettings):
    """Image gateway settings. Complex values (lists, dicts) are read as JSON."""

    model_config = SettingsConfigDict(
        env_prefix="CF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
        protected_namespaces=("settings_",),
    )

    # Upstream
    api_base: str = Field(default="https://api.cloudflare.com/client/v4")
    account_list: list[AccountCredential] = Field(
        default_factory=list,
        description='JSON list, e.g. [{"account_id": "...", "token": "..."}]',
    )
    request_timeout_seconds: float = Field(default=120.0, ge=1.0, le=600.0)

    # Prompt translation
    is_translate: bool = Field(default=True)
    translate_model: str = Field(default="@cf/qwen/qwen1.5-14b-chat-awq")

    # Models
    model_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MODEL_MAP))
    fast_model_key: str = Field(
        default="FLUX.1-Schnell-CF",
        description="Alias in model_map whose upstream id uses the fast (Flux) request shape.",
    )
    default_model: str = Field(default="SD-XL-Lightning-CF")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=7002, ge=1, le=65535)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @property
    def fast_model(self) -> str:
        return self.model_map.get(self.fast_model_key, self.fast_model_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
