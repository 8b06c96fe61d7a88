"""Filesystem and process side effects, live or printed for a dry run."""
from __future__ import annotations

import shlex
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from .io import ensure_dir, run_command


class Effects(ABC):
    """Everything the extractor does to the outside world goes through here."""

    @abstractmethod
    def make_dir(self, path: Path) -> None:
        raise NotImplementedError

    @abstractmethod
    def run(self, cmd: Sequence[str], timeout: Optional[float] = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def copy(self, src: Path, dst: Path) -> None:
        raise NotImplementedError


class LiveEffects(Effects):
    def make_dir(self, path: Path) -> None:
        ensure_dir(path)

    def run(self, cmd: Sequence[str], timeout: Optional[float] = None) -> None:
        # ffmpeg's exit status is advisory; a failed extraction shows up as a missing file.
        result = run_command(cmd, check=False, timeout=timeout)
        if result.returncode != 0:
            logger.warning("{} exited with code {}", cmd[0], result.returncode)

    def copy(self, src: Path, dst: Path) -> None:
        if not src.exists():
            logger.warning("Cannot copy {} to {}: frame was not produced", src, dst)
            return
        shutil.copyfile(src, dst)


class DryRunEffects(Effects):
    """Prints each action instead of performing it and keeps a record for inspection."""

    def __init__(self) -> None:
        self.actions: List[str] = []

    def _emit(self, line: str) -> None:
        self.actions.append(line)
        print(line)

    def make_dir(self, path: Path) -> None:
        self._emit(f"mkdir {path}")

    def run(self, cmd: Sequence[str], timeout: Optional[float] = None) -> None:
        self._emit(shlex.join(str(part) for part in cmd))

    def copy(self, src: Path, dst: Path) -> None:
        self._emit(f"cp {src} {dst}")


def make_effects(dry_run: bool) -> Effects:
    return DryRunEffects() if dry_run else LiveEffects()
