"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from mdlogseq.core.models import DEFAULT_MAX_NESTING, ParseConfig
from mdlogseq.core.parse import check_preset


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDLOGSEQ_"


class Settings(BaseModel):
    app_name:    str = "mdlogseq"
    api_url:     str = Field(default="http://127.0.0.1:12315", pattern="^https?://", description="Logseq HTTP API base URL")
    api_token:   str = Field(default="",   description="Bearer token configured in Logseq's API server")
    timeout:     float = Field(default=10.0, ge=1, le=60, description="Request timeout in seconds")
    max_retries: int = Field(default=3,    ge=0, le=5, description="Retries for connection errors and 5xx responses")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    allow_html:    bool = Field(default=True, description="Keep raw HTML blocks")
    sanitize_html: bool = Field(default=True, description="Strip scripts and event handlers from HTML")
    preserve_logseq_syntax: bool = Field(default=True, description="Attach page links, refs, tags, properties")
    max_nesting_level: int = Field(default=DEFAULT_MAX_NESTING, description="Deepest list level; deeper items are flattened")
    log_level:   str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator("parser_config")
    @classmethod
    def _known_preset(cls, v: str) -> str:
        return check_preset(v)

    def parse_config(self) -> ParseConfig:
        return ParseConfig(
            allow_html=self.allow_html,
            sanitize_html=self.sanitize_html,
            preserve_logseq_syntax=self.preserve_logseq_syntax,
            max_nesting_level=self.max_nesting_level,
        )


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDLOGSEQ_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
