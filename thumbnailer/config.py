"""Configuration models and loader for the thumbnail extractor."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class PathsConfig(BaseModel):
    movie_root: Path = Field(Path("/movies"), description="Root of the sharded film master tree.")
    output_dir: Path = Field(Path("./new_thumbnails"), description="Root folder for thumbnail output.")


class ExtractConfig(BaseModel):
    fps: int = Field(24, gt=0, description="Frame rate used for seconds->frames conversion.")
    n_frames: int = Field(1, ge=1, description="Number of frames to extract at each timecode.")
    offset: float = Field(0.0, ge=0, description="Seconds between the marked timecode and the extracted frame.")
    offset_direction: str = Field("before", description="'before' lands ahead of the mark, 'after' past it.")
    image_as_default: bool = Field(True, description="Copy the image 1 frame to the default %06d.jpg slot.")
    dry_run: bool = Field(False, description="Print actions instead of performing them.")
    ffmpeg: str = Field("ffmpeg", description="Frame extraction binary.")
    timeout: Optional[float] = Field(None, gt=0, description="Seconds before an extraction is abandoned.")

    @field_validator("offset_direction")
    @classmethod
    def validate_offset_direction(cls, value: str) -> str:
        value = value.lower()
        if value not in {"before", "after"}:
            raise ValueError("offset_direction must be 'before' or 'after'")
        return value

    @property
    def signed_offset(self) -> float:
        return -self.offset if self.offset_direction == "before" else self.offset


class LocatorConfig(BaseModel):
    shard_scheme: str = Field("hundreds", description="'hundreds' (id // 100) or 'leading_digits'.")
    shard_digits: int = Field(1, ge=1, description="Digits of the id used by the leading_digits scheme.")
    extensions: List[str] = Field(default_factory=lambda: ["mp4"], description="Video file extensions to consider.")

    @field_validator("shard_scheme")
    @classmethod
    def validate_shard_scheme(cls, value: str) -> str:
        value = value.lower().replace("-", "_")
        if value not in {"hundreds", "leading_digits"}:
            raise ValueError("shard_scheme must be 'hundreds' or 'leading_digits'")
        return value

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, value: List[str]) -> List[str]:
        cleaned = [ext.strip().lstrip(".").lower() for ext in value if ext.strip().lstrip(".")]
        if not cleaned:
            raise ValueError("extensions must name at least one file extension")
        return cleaned


class AppConfig(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    extract: ExtractConfig = Field(default_factory=ExtractConfig)
    locator: LocatorConfig = Field(default_factory=LocatorConfig)


def load_config(path: Path | str) -> AppConfig:
    """Load configuration from YAML, falling back to defaults when missing."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        return AppConfig()
    data = yaml.safe_load(cfg_path.read_text()) or {}
    return AppConfig.model_validate(data)
