"""Deterministic output paths for extracted thumbnails."""
from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from .effects import Effects
from .timecode import Timecode


class ThumbnailKind(str, Enum):
    TITLE_CARD = "titlecard"
    IMAGE = "image"


def timecode_token(seek: str) -> str:
    return re.sub(r"[:.]", "_", seek)


def frame_suffix(n_frames: int) -> str:
    # ffmpeg expands %02d into one numbered file per frame, starting at 1
    return ".jpg" if n_frames == 1 else "_%02d.jpg"


def build_filename(film_id: int, kind: ThumbnailKind, timecode: Timecode, n_frames: int = 1) -> str:
    token = timecode_token(timecode.with_frames_as_fraction())
    suffix = frame_suffix(n_frames)
    if kind is ThumbnailKind.TITLE_CARD:
        return f"{film_id}_titlecard_{token}{suffix}"
    return f"{film_id}_{token}{suffix}"


class OutputPaths:
    """Lays out ``root/<film id>/<filename>`` and creates folders on demand."""

    def __init__(self, root: Path, effects: Effects, n_frames: int = 1) -> None:
        self.root = Path(root)
        self.effects = effects
        self.n_frames = n_frames

    def _ensure(self, path: Path) -> None:
        if not path.exists():
            self.effects.make_dir(path)

    def film_folder(self, film_id: int) -> Path:
        self._ensure(self.root)
        folder = self.root / str(film_id)
        self._ensure(folder)
        return folder

    def thumbnail_path(self, film_id: int, kind: ThumbnailKind, timecode: Timecode) -> Path:
        return self.film_folder(film_id) / build_filename(film_id, kind, timecode, self.n_frames)

    def default_path(self, film_id: int) -> Path:
        return self.film_folder(film_id) / ("%06d.jpg" % film_id)

    def first_frame(self, path: Path) -> Path:
        if self.n_frames == 1:
            return path
        return path.with_name(path.name % 1)
