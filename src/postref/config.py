"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "POSTREF_"

DEFAULT_KNOWN_KEYS = (
    "layout", "title", "description", "tag", "tags", "date",
    "permalink", "slug", "categories", "published",
)


class Settings(BaseModel):
    app_name:           str = "postref"
    source_extensions:  list[str] = Field(default=[".md", ".markdown", ".html"], description="Source file suffixes to load")
    default_layout:     str = Field(default="default", description="Layout used when front matter names none")
    layouts:            list[str] = Field(default=[], description="Layouts the renderer recognizes; empty disables the check")
    strict_frontmatter: bool = Field(default=False, description="Reject front matter keys outside known_keys")
    known_keys:         list[str] = Field(default=list(DEFAULT_KNOWN_KEYS), description="Keys accepted in strict mode")
    permalink:          str = Field(default="/:year/:month/:day/:title.html", description="Public path template")
    parser_config:      str = Field(default="gfm-like", description="MarkdownIt preset used for excerpts")
    output_dir:         str = Field(default="_site", description="Directory for rendered documents + manifest")
    log_level:          str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("source_extensions", "layouts", "known_keys", mode="before")
    @classmethod
    def _split_csv(cls, value):
        """Accept comma-separated strings (as supplied through env vars) for list fields."""
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, value):
        return value.upper() if isinstance(value, str) else value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then POSTREF_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
