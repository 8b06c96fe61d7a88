"""CSV input: one extraction request per film row."""
from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from loguru import logger

from .paths import ThumbnailKind

FILM_ID = "film_id"
TITLE_CARD = "title_card_timecode"
IMAGE_COLUMNS = ("image_1_timecode", "image_2_timecode", "image_3_timecode")
DONE = "done"
PUBLISHED = "published"

# fewer characters than this across all four slots cannot hold a timecode
MIN_TIMECODE_CHARS = 5


class TableError(ValueError):
    pass


def normalize_header(name: str) -> str:
    """``"Title card timecode"`` -> ``"title_card_timecode"``."""
    name = re.sub(r"\s+", "_", name.strip().lower())
    return re.sub(r"\W+", "", name)


@dataclass(frozen=True)
class ExtractionRequest:
    film_id_raw: str
    title_card: str = ""
    image_1: str = ""
    image_2: str = ""
    image_3: str = ""
    done: str = ""
    published: str = ""
    line: int = 0

    @classmethod
    def from_row(cls, row: Dict[str, Optional[str]], line: int = 0) -> "ExtractionRequest":
        def cell(key: str) -> str:
            return (row.get(key) or "").strip()

        return cls(
            film_id_raw=cell(FILM_ID),
            title_card=cell(TITLE_CARD),
            image_1=cell(IMAGE_COLUMNS[0]),
            image_2=cell(IMAGE_COLUMNS[1]),
            image_3=cell(IMAGE_COLUMNS[2]),
            done=cell(DONE),
            published=cell(PUBLISHED),
            line=line,
        )

    @classmethod
    def single(cls, film_id: int, timecode: str, titlecard: bool = False) -> "ExtractionRequest":
        if titlecard:
            return cls(film_id_raw=str(film_id), title_card=timecode or "")
        return cls(film_id_raw=str(film_id), image_1=timecode or "")

    @property
    def film_id(self) -> Optional[int]:
        try:
            value = int(self.film_id_raw)
        except ValueError:
            return None
        return value if value > 0 else None

    @property
    def is_done(self) -> bool:
        return self.done.lower() == "x"

    @property
    def is_published(self) -> bool:
        return self.published.upper() == "TRUE"

    def timecodes(self) -> List[Tuple[str, ThumbnailKind]]:
        return [
            (self.title_card, ThumbnailKind.TITLE_CARD),
            (self.image_1, ThumbnailKind.IMAGE),
            (self.image_2, ThumbnailKind.IMAGE),
            (self.image_3, ThumbnailKind.IMAGE),
        ]

    def has_timecodes(self) -> bool:
        return sum(len(raw) for raw, _ in self.timecodes()) >= MIN_TIMECODE_CHARS


def _check_headers(headers: Sequence[str], csv_path: Path) -> None:
    if FILM_ID not in headers:
        raise TableError(f"{csv_path} has no 'Film ID' column (found: {', '.join(headers) or 'none'})")


def _read_text(csv_path: Path) -> str:
    data = csv_path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        # spreadsheet exports are often Windows-1252
        logger.warning("{} is not valid UTF-8 ({}); reading it as cp1252", csv_path, exc.reason)
        return data.decode("cp1252", errors="replace")


def read_headers(csv_path: Path) -> List[str]:
    """Normalized header names of ``csv_path``; raises ``TableError`` without a film id column."""
    first = next(csv.reader(StringIO(_read_text(csv_path), newline="")), [])
    headers = [normalize_header(h) for h in first]
    _check_headers(headers, csv_path)
    return headers


def read_requests(csv_path: Path) -> Iterator[ExtractionRequest]:
    reader = csv.reader(StringIO(_read_text(csv_path), newline=""))
    headers = [normalize_header(h) for h in next(reader, [])]
    _check_headers(headers, csv_path)
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        row = dict(zip(headers, values))
        yield ExtractionRequest.from_row(row, line=reader.line_num)
