"""Frame-counted timecodes and a forgiving parser for spreadsheet input."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

DEFAULT_FPS = 24

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_ANY_DIGIT = re.compile(r"\d")


class TimecodeRangeError(ValueError):
    pass


@dataclass(frozen=True)
class Timecode:
    """A point in a film as hours, minutes, seconds and frames at a fixed rate."""

    hours: int
    minutes: int
    seconds: int
    frames: int = 0
    fps: int = DEFAULT_FPS

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise TimecodeRangeError(f"fps must be positive, got {self.fps}")
        if self.hours < 0:
            raise TimecodeRangeError(f"hours must be >= 0, got {self.hours}")
        if not 0 <= self.minutes < 60:
            raise TimecodeRangeError(f"minutes out of range 0-59: {self.minutes}")
        if not 0 <= self.seconds < 60:
            raise TimecodeRangeError(f"seconds out of range 0-59: {self.seconds}")
        if not 0 <= self.frames < self.fps:
            raise TimecodeRangeError(f"frames out of range 0-{self.fps - 1}: {self.frames}")

    @classmethod
    def from_frames(cls, total: int, fps: int = DEFAULT_FPS) -> "Timecode":
        if total < 0:
            raise TimecodeRangeError(f"frame count must be >= 0, got {total}")
        secs, frames = divmod(int(total), fps)
        mins, secs = divmod(secs, 60)
        hours, mins = divmod(mins, 60)
        return cls(hours, mins, secs, frames, fps)

    @classmethod
    def zero(cls, fps: int = DEFAULT_FPS) -> "Timecode":
        return cls(0, 0, 0, 0, fps)

    @property
    def total_frames(self) -> int:
        return ((self.hours * 60 + self.minutes) * 60 + self.seconds) * self.fps + self.frames

    def _frames_of(self, other: Union[int, "Timecode"]) -> int:
        if isinstance(other, Timecode):
            if other.fps != self.fps:
                raise ValueError(f"cannot combine timecodes at {self.fps} and {other.fps} fps")
            return other.total_frames
        return other

    def __add__(self, other: Union[int, "Timecode"]) -> "Timecode":
        if not isinstance(other, (int, Timecode)):
            return NotImplemented
        return Timecode.from_frames(self.total_frames + self._frames_of(other), self.fps)

    def __sub__(self, other: Union[int, "Timecode"]) -> "Timecode":
        if not isinstance(other, (int, Timecode)):
            return NotImplemented
        return Timecode.from_frames(self.total_frames - self._frames_of(other), self.fps)

    def with_frames_as_fraction(self) -> str:
        """Render as ``H:MM:SS.f`` with the frame count as a decimal fraction of a second."""
        millis = min(round(self.frames * 1000 / self.fps), 999)
        fraction = f"{millis:03d}".rstrip("0") or "0"
        return f"{self.hours}:{self.minutes:02d}:{self.seconds:02d}.{fraction}"

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}:{self.frames:02d}"


def apply_offset(timecode: Timecode, offset_seconds: float) -> Timecode:
    """Shift ``timecode`` by a signed number of seconds, clamping at the start of the file."""
    delta = round(offset_seconds * timecode.fps)
    if timecode.total_frames + delta < 0:
        return Timecode.zero(timecode.fps)
    return timecode + delta


@dataclass(frozen=True)
class Parsed:
    timecode: Timecode


@dataclass(frozen=True)
class Invalid:
    raw: object
    reason: str


ParseResult = Union[Parsed, Invalid]


def _leading_int(field: str) -> int:
    match = _LEADING_INT.match(field)
    return int(match.group(1)) if match else 0


def parse_timecode(value: object, fps: int = DEFAULT_FPS) -> ParseResult:
    """Parse a loosely formatted ``h:mm:ss`` / ``hh:mm:ss`` string.

    Spreadsheet cells are flaky: missing or non-numeric fields read as zero,
    and anything that still cannot form a timecode comes back as ``Invalid``.
    """
    if not isinstance(value, str):
        return Invalid(value, f"expected a string, got {type(value).__name__}")
    if not _ANY_DIGIT.search(value):
        return Invalid(value, "no digits")
    fields = value.split(":")[:3]
    fields += ["0"] * (3 - len(fields))
    hours, minutes, seconds = (_leading_int(field) for field in fields)
    try:
        return Parsed(Timecode(hours, minutes, seconds, 0, fps))
    except TimecodeRangeError as exc:
        return Invalid(value, str(exc))
