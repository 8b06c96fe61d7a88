"""Subprocess helpers for running ffmpeg."""
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger


class FFmpegError(RuntimeError):
    pass


def run_command(
    cmd: Sequence[str], *, check: bool = True, timeout: Optional[float] = None
) -> subprocess.CompletedProcess:
    """Run a subprocess command logging the invocation."""

    logger.debug("Running command: {}", " ".join(cmd))
    try:
        result = subprocess.run(list(cmd), capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        raise FFmpegError(f"Command timed out after {timeout}s: {' '.join(cmd)}") from exc
    if check and result.returncode != 0:
        raise FFmpegError(f"Command failed with code {result.returncode}: {' '.join(cmd)}\n{result.stderr}")
    if result.stderr:
        logger.debug(result.stderr.strip())
    return result


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
