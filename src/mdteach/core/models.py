"""Intermediate data models for the parse and convert pipeline"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class ConversionResult(BaseModel):
    """Summary of one converted document."""
    source: str
    output: str
    text_length: int                # bytes of document text
    run_count: int                  # style runs written
    file_size: int                  # container bytes written
    frontmatter: dict[str, Any] = {}


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:         Path
    raw_markdown: str          # full file content (includes frontmatter)
    markdown:     str          # body only (frontmatter stripped)
    frontmatter:  dict[str, Any]
    tokens:       list         # markdown-it Token objects
