"""
Run configuration for llmscan.

The configuration lives in a JSON file (llms-config.json by default) and is
validated into an LLMScanConfig.  The resulting object is passed explicitly
to every component; nothing reads configuration from module globals.

API keys are kept out of the config file.  Each backend points at its own
key file in dotenv format:

    api_key=sk-...

If no key file is configured, the backend's environment variable
(OPENAI_API_KEY / DEEPSEEK_API_KEY) is used instead.
"""

import os
from pathlib import Path
from typing import Literal, Optional, Union

from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .llm_client import Backend
from .logger import get_module_logger

logger = get_module_logger("config")

DEFAULT_CONFIG_FILE = "llms-config.json"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; llmscan/1.0; +https://llmstxt.org)"


class LLMScanConfig(BaseModel):
    """Validated contents of llms-config.json."""

    # --- Source ---
    sitemap_url: str
    user_agent: str = DEFAULT_USER_AGENT

    # --- Backend ---
    ai_engine: Backend = Backend.OPENAI
    openai_api_key_file: Optional[Path] = None
    deepseek_api_key_file: Optional[Path] = None

    # --- Output ---
    llms_output_dir: Path
    web_root: Path
    project_name: str
    project_summary: str = ""
    site_url: str = ""
    use_absolute_urls: bool = False

    # --- Cache ---
    regenerate_after_days: int = Field(default=0, ge=0)   # 0 disables the freshness cache
    skip_non_technical_cache: bool = True                 # write .not_technical markers

    # --- Logging ---
    log_mode: Literal["none", "console", "file", "both"] = "both"
    log_file: Optional[Path] = None

    @field_validator("sitemap_url", "user_agent", "project_name", "project_summary", mode="before")
    @classmethod
    def _strip(cls, v):
        # Hidden whitespace in hand-edited config files breaks URLs and headers
        return v.strip() if isinstance(v, str) else v

    @field_validator("site_url", mode="before")
    @classmethod
    def _strip_site_url(cls, v):
        return v.strip().rstrip("/") if isinstance(v, str) else v

    @field_validator("ai_engine", mode="before")
    @classmethod
    def _normalize_engine(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def api_key_file(self) -> Optional[Path]:
        """Key file for the selected backend."""
        if self.ai_engine == Backend.DEEPSEEK:
            return self.deepseek_api_key_file
        return self.openai_api_key_file

    @property
    def logs_to_file(self) -> bool:
        return self.log_mode in ("file", "both") and self.log_file is not None

    def ensure_directories(self) -> None:
        """Create the output, web root and log directories if missing."""
        dirs = [self.llms_output_dir, self.web_root]
        if self.logs_to_file:
            dirs.append(self.log_file.parent)

        for d in dirs:
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ConfigError(f"Cannot create directory: {d}", details={"error": str(e)})
            if not os.access(d, os.W_OK):
                raise ConfigError(f"Directory is not writable: {d}")


def load_config(path: Union[str, Path, None] = None) -> LLMScanConfig:
    """
    Load and validate a JSON config file.

    Args:
        path: Config file path (defaults to $LLMSCAN_CONFIG or ./llms-config.json)

    Returns:
        Validated configuration

    Raises:
        ConfigError: if the file is missing, unreadable or invalid
    """
    if path is None:
        path = os.getenv("LLMSCAN_CONFIG", DEFAULT_CONFIG_FILE)
    path = Path(path)

    if not path.is_file():
        raise ConfigError(f"Config file missing: {path}")

    try:
        return LLMScanConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {path}", details={"error": str(e)})
    except ValidationError as e:
        raise ConfigError(
            f"Invalid config file {path}: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)}
        )


def load_api_key(config: LLMScanConfig) -> str:
    """
    Load the API key for the configured backend.

    Raises:
        ConfigError: if the key file is missing or the key is empty
    """
    backend = config.ai_engine
    key_file = config.api_key_file

    if key_file is None:
        key = os.getenv(backend.api_key_env, "").strip()
        if not key:
            raise ConfigError(
                f"API key missing: set {backend.api_key_env} or {backend.value}_api_key_file"
            )
        return key

    if not key_file.is_file():
        raise ConfigError(f"API key file not found: {key_file}")

    values = dotenv_values(key_file)
    key = (values.get("api_key") or values.get("API_KEY") or "").strip()
    if not key:
        raise ConfigError(f"API key missing in {key_file}")

    logger.debug(f"Loaded {backend.value} API key from {key_file}")
    return key
