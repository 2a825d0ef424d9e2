"""Application configuration: settings schema and notecheck.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from notecheck.core.models import Metadata


CONFIG_FILE = "notecheck.yaml"
ENV_FIELDS = ("corpus_root",)


class Settings(BaseModel):
    app_name:         str = "notecheck"
    corpus_root:      str = Field(default=".",  description="Directory of note files to validate")
    assets_dir:       Optional[str] = Field(default=None, description="Image asset directory; defaults to corpus_root")
    extensions:       list[str] = Field(default=[".md"], min_length=1, description="Note file extensions")
    asset_extensions: list[str] = Field(
        default=[".png", ".jpg", ".jpeg", ".gif", ".svg", ".heic", ".webp"],
        description="File extensions counted as image assets",
    )
    required_fields:  list[str] = Field(
        default=["title_heading", "page_kind", "call_to_action"],
        description="Metadata fields every note must define",
    )
    page_kinds:       list[str] = Field(default=["article", "sampleCode"], description="Allowed page kinds; empty = any")
    require_fence_language: bool = Field(default=False, description="Report code fences without a language tag")
    output_format:    str = Field(default="text", pattern="^(text|json)$", description="text or json")
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")

    @field_validator("required_fields")
    @classmethod
    def _known_fields(cls, v: list[str]) -> list[str]:
        unknown = [name for name in v if name not in Metadata.model_fields]
        if unknown:
            raise ValueError(f"Unknown required metadata field(s): {', '.join(unknown)}")
        return v

    @property
    def assets_root(self) -> Path:
        if self.assets_dir:
            return Path(self.assets_dir)
        root = Path(self.corpus_root)
        return root.parent if root.is_file() else root


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from notecheck.yaml, then NOTECHECK_CORPUS_ROOT, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in ENV_FIELDS:
        if val := os.getenv(f"NOTECHECK_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
