"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    parser_config:      str = Field(default="commonmark", description="MarkdownIt parser preset name")
    buffer_size:        int = Field(default=4096, ge=1, description="Output buffer capacity in bytes")
    hr_width:           int = Field(default=30, ge=0, description="Underscores drawn for a horizontal rule")
    bullet_char:        int = Field(default=0xA5, ge=0x20, le=0xFF, description="Target byte used as list bullet")
    softbreak_as_space: bool = Field(default=False, description="Write a space for soft line breaks")
    strip_frontmatter:  bool = Field(default=True, description="Drop a leading YAML frontmatter block")
    heading_sizes:      list[Annotated[int, Field(ge=1, le=255)]] = Field(
        default=[36, 30, 27, 24, 20, 18], min_length=6, max_length=6,
        description="Point sizes for heading levels 1-6",
    )
    text_size:          int = Field(default=12, ge=1, le=255, description="Point size of body and quote text")
    code_size:          int = Field(default=12, ge=1, le=255, description="Point size of code")

    @field_validator("heading_sizes", mode="before")
    @classmethod
    def _split_sizes(cls, v):
        # env vars arrive as "36,30,27,24,20,18"
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDTEACH_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDTEACH_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
