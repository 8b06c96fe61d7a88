"""Turn one raw timecode into one ffmpeg frame extraction."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config import ExtractConfig
from .effects import Effects
from .paths import OutputPaths, ThumbnailKind
from .timecode import Invalid, apply_offset, parse_timecode


class SourceFileError(RuntimeError):
    pass


class ThumbnailExtractor:
    def __init__(self, config: ExtractConfig, paths: OutputPaths, effects: Effects) -> None:
        self.config = config
        self.paths = paths
        self.effects = effects

    def build_command(self, source: Path, seek: str, output: Path) -> List[str]:
        return [
            self.config.ffmpeg,
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            str(source),
            "-y",
            "-ss",
            seek,
            "-vframes",
            str(self.config.n_frames),
            str(output),
        ]

    def extract(
        self,
        source: Optional[Path],
        raw_timecode: object,
        offset: float,
        film_id: int,
        kind: ThumbnailKind = ThumbnailKind.IMAGE,
        as_default: bool = False,
    ) -> Optional[Path]:
        """Extract the frame(s) at ``raw_timecode`` shifted by ``offset`` seconds.

        Returns the output path (a ``%02d`` pattern when several frames are
        requested), or ``None`` when the timecode does not parse. A missing
        source file raises ``SourceFileError``.
        """
        parsed = parse_timecode(raw_timecode, self.config.fps)
        if isinstance(parsed, Invalid):
            logger.debug("Skipping timecode {!r} for film {}: {}", parsed.raw, film_id, parsed.reason)
            return None
        if source is None or not Path(source).exists():
            raise SourceFileError(f"Source file {source} for film id {film_id} does not exist")

        adjusted = apply_offset(parsed.timecode, offset)
        seek = adjusted.with_frames_as_fraction()
        output = self.paths.thumbnail_path(film_id, kind, adjusted)

        logger.info("Extracting {} thumbnail for film {} from {} at {} (seek {})", kind.value, film_id, source, adjusted, seek)
        self.effects.run(self.build_command(Path(source), seek, output), timeout=self.config.timeout)
        if as_default:
            self.effects.copy(self.paths.first_frame(output), self.paths.default_path(film_id))
        return output
