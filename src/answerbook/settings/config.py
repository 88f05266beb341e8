"""Configuration loader for answerbook using Pydantic settings.

Config precedence (highest wins):
  1. CLI flags (where applicable)
  2. Environment variables (ANSWERBOOK_* with __ for nesting)
  3. settings.local.toml
  4. settings.<env>.toml
  5. settings.default.toml
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("ANSWERBOOK_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "ANSWERBOOK_ENV"
DEFAULT_ENV = "local"

DEFAULT_PROMPT_TEXT = "在心中默念你的问题，等待答案之书给你答案。"


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class BrowserSettings(BaseSettings):
    """Playwright browser settings.

    A timeout of ``0`` means "wait forever", which is how the answer page
    has historically been driven.
    """

    model_config = SettingsConfigDict(env_prefix="ANSWERBOOK_BROWSER__")

    headless: bool = True
    executable_path: str = ""
    extra_args: list[str] = Field(default_factory=list)
    viewport_width: int = Field(default=1200, ge=1)
    viewport_height: int = Field(default=800, ge=1)
    timeout_ms: int = Field(default=0, ge=0)
    result_timeout_ms: int = Field(default=0, ge=0)


class RetrySettings(BaseSettings):
    """Bounded exponential-backoff retry for network steps."""

    model_config = SettingsConfigDict(env_prefix="ANSWERBOOK_RETRY__")

    max_attempts: int = Field(default=3, ge=1)
    base_delay_ms: int = Field(default=500, ge=0)


class PageSettings(BaseSettings):
    """Where the answer page lives and how to find things on it."""

    model_config = SettingsConfigDict(env_prefix="ANSWERBOOK_PAGE__")

    url: str = "https://www.myanswersbook.com/zh-cn.html"
    trigger_selector: str = "a.book-box"
    result_selector: str = ".content-en"
    container_selector: str = ".content-box"
    hide_selectors: list[str] = Field(
        default_factory=lambda: [".layui-layer-content.layui-layer-padding"]
    )


class DiagnosticsSettings(BaseSettings):
    """Quote service polled when a network step has to be retried."""

    model_config = SettingsConfigDict(env_prefix="ANSWERBOOK_DIAGNOSTICS__")

    quote_url: str = "https://v1.hitokoto.cn/"
    quote_field: str = "hitokoto"
    timeout_sec: float = Field(default=10.0, gt=0)


class AnswerSettings(BaseSettings):
    """Presentation of the answer returned to the caller."""

    model_config = SettingsConfigDict(env_prefix="ANSWERBOOK_ANSWER__")

    mode: str = "image"
    prompt_text: str = DEFAULT_PROMPT_TEXT
    send_prompt: bool = True
    wait_time: float = Field(default=0.0, ge=0)
    image_compression: bool = True
    picture_quality: int = Field(default=80, ge=1, le=100)
    max_width: int = Field(default=0, ge=0)
    max_height: int = Field(default=0, ge=0)


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="ANSWERBOOK_API__")

    host: str = "0.0.0.0"
    port: int = 8100


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root answerbook settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="ANSWERBOOK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(default_factory=_resolve_env)

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    page: PageSettings = Field(default_factory=PageSettings)
    diagnostics: DiagnosticsSettings = Field(default_factory=DiagnosticsSettings)
    answer: AnswerSettings = Field(default_factory=AnswerSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="before")
    @classmethod
    def _merge_toml_files(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer TOML config files before env var overrides."""
        defaults = _load_toml(CONFIG_DIR / "settings.default.toml")
        env_name = (values.get("env") or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()
        env_overrides = _load_toml(CONFIG_DIR / f"settings.{env_name}.toml")
        local_overrides = _load_toml(CONFIG_DIR / "settings.local.toml")

        # Merge: defaults < env-specific < local < explicit values
        merged: dict[str, Any] = {}
        for layer in (defaults, env_overrides, local_overrides, values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
