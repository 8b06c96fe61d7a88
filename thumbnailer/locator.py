"""Resolve a film id to its master video file on disk."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from .config import LocatorConfig


def _as_film_id(film_id: Union[int, str]) -> Optional[int]:
    try:
        value = int(str(film_id).strip())
    except ValueError:
        return None
    return value if value > 0 else None


def shard_for(film_id: int, scheme: str = "hundreds", digits: int = 1) -> str:
    """Name of the shard directory holding ``film_id``.

    ``hundreds`` groups ids by ``id // 100``; ``leading_digits`` uses the first
    ``digits`` characters of the decimal id.
    """
    if scheme == "hundreds":
        return str(film_id // 100)
    if scheme == "leading_digits":
        return str(film_id)[:digits]
    raise ValueError(f"Unknown shard scheme '{scheme}'")


class FilmLocator:
    def __init__(
        self,
        movie_root: Path,
        shard_scheme: str = "hundreds",
        shard_digits: int = 1,
        extensions: Sequence[str] = ("mp4",),
    ) -> None:
        self.movie_root = Path(movie_root)
        self.shard_scheme = shard_scheme
        self.shard_digits = shard_digits
        self.extensions = list(extensions)

    @classmethod
    def from_config(cls, movie_root: Path, config: LocatorConfig) -> "FilmLocator":
        return cls(movie_root, config.shard_scheme, config.shard_digits, config.extensions)

    def film_dir(self, film_id: int) -> Path:
        shard = shard_for(film_id, self.shard_scheme, self.shard_digits)
        return self.movie_root / shard / str(film_id)

    def candidates(self, film_id: int) -> List[Path]:
        directory = self.film_dir(film_id)
        if not directory.is_dir():
            return []
        found: List[Path] = []
        for ext in self.extensions:
            found.extend(p for p in directory.glob(f"*.{ext}") if p.is_file())
        return sorted(set(found))

    def locate(self, film_id: Union[int, str]) -> Optional[Path]:
        """Return the largest video file for ``film_id``, presumably the best master."""
        fid = _as_film_id(film_id)
        if fid is None:
            return None
        files = self.candidates(fid)
        if not files:
            logger.debug("No video files under {}", self.film_dir(fid))
            return None
        return max(files, key=lambda p: p.stat().st_size)
