"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "mdsite"
    mode:             str = Field(default="development", pattern="^(development|production)$",
                                  description="production hides drafts and drops compiler diagnostics")
    docs_dir:         str = Field(default="docs",    description="Root directory of the docs collection")
    content_dir:      str = Field(default="content", description="Parent of every other collection root")
    extension:        str = Field(default=".mdx",    description="File extension of content documents")
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    words_per_minute: int = Field(default=200, ge=1, description="Reading speed for reading-time estimates")
    output_dir:       str = Field(default="dist",    description="Directory for built HTML + JSON files")
    log_level:        str = Field(default="WARNING", pattern="^(?i:debug|info|warning|error|critical)$",
                                  description="Logging level used by the CLI")

    @property
    def is_production(self) -> bool:
        return self.mode == "production"


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
