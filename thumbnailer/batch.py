"""Sequential batch pass over a film table or a single film/timecode pair."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger
from tqdm import tqdm

from .config import AppConfig
from .effects import make_effects
from .extract import SourceFileError, ThumbnailExtractor
from .io import FFmpegError
from .locator import FilmLocator
from .paths import OutputPaths, ThumbnailKind
from .table import ExtractionRequest, read_requests


@dataclass
class BatchSummary:
    rows: int = 0
    skipped: int = 0
    extracted: int = 0
    failed: int = 0

    def as_dict(self) -> dict:
        return {"rows": self.rows, "skipped": self.skipped, "extracted": self.extracted, "failed": self.failed}


class BatchDriver:
    def __init__(self, config: AppConfig, locator: FilmLocator, extractor: ThumbnailExtractor) -> None:
        self.config = config
        self.locator = locator
        self.extractor = extractor

    @property
    def offset(self) -> float:
        return self.config.extract.signed_offset

    def _extract(
        self,
        summary: BatchSummary,
        source: Path,
        raw: str,
        film_id: int,
        kind: ThumbnailKind,
        as_default: bool = False,
    ) -> None:
        try:
            output = self.extractor.extract(source, raw, self.offset, film_id, kind, as_default)
        except (SourceFileError, FFmpegError):
            logger.exception("Extraction failed for film id {} at {!r}", film_id, raw)
            summary.failed += 1
            return
        if output is not None:
            summary.extracted += 1

    def process_request(self, request: ExtractionRequest, summary: BatchSummary) -> None:
        summary.rows += 1
        if request.is_done:
            logger.info("Skipping film id {} on line {}: marked done", request.film_id_raw, request.line)
            summary.skipped += 1
            return
        if not request.has_timecodes():
            summary.skipped += 1
            return

        film_id = request.film_id
        if film_id is None:
            logger.warning("id {} is not valid! (line {})", request.film_id_raw or "<blank>", request.line)
            summary.skipped += 1
            return

        source = self.locator.locate(film_id)
        if source is None:
            status = "published" if request.is_published else "unpublished"
            logger.warning("could not find movie file for {} film id {} (line {})", status, film_id, request.line)
            summary.skipped += 1
            return

        as_default = self.config.extract.image_as_default
        for slot, (raw, kind) in enumerate(request.timecodes()):
            if not raw:
                continue
            self._extract(summary, source, raw, film_id, kind, as_default=as_default and slot == 1)

    def run_table(self, csv_path: Path) -> BatchSummary:
        summary = BatchSummary()
        logger.info("Extracting thumbnails listed in {}", csv_path)
        for request in tqdm(read_requests(csv_path), desc="films", unit="row", leave=False):
            self.process_request(request, summary)
        logger.info("Finished {}: {}", csv_path, summary.as_dict())
        return summary

    def run_single(self, film_id: int, timecode: Optional[str], titlecard: bool = False) -> BatchSummary:
        summary = BatchSummary(rows=1)
        request = ExtractionRequest.single(film_id, timecode or "", titlecard)
        fid = request.film_id
        if fid is None:
            logger.warning("id {} is not valid!", film_id)
            summary.skipped += 1
            return summary
        if not timecode:
            logger.warning("No timecode given for film id {}", fid)
            summary.skipped += 1
            return summary

        source = self.locator.locate(fid)
        if source is None:
            logger.warning("could not find movie file for film id {}", fid)
            summary.skipped += 1
            return summary

        kind = ThumbnailKind.TITLE_CARD if titlecard else ThumbnailKind.IMAGE
        self._extract(summary, source, timecode, fid, kind)
        logger.info("Finished film id {}: {}", fid, summary.as_dict())
        return summary


def build_driver(config: AppConfig) -> BatchDriver:
    effects = make_effects(config.extract.dry_run)
    paths = OutputPaths(config.paths.output_dir, effects, config.extract.n_frames)
    extractor = ThumbnailExtractor(config.extract, paths, effects)
    locator = FilmLocator.from_config(config.paths.movie_root, config.locator)
    return BatchDriver(config, locator, extractor)
