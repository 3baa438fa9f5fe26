from __future__ import annotations
import logging
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from . import decode, exceptions
from .config import DecodeConfig
from .types import MeasurementEvent

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Path, Optional[exceptions.VoltLogicError]], None]


def failure_reason(error: exceptions.VoltLogicError) -> str:
    if isinstance(error, exceptions.FileUnreadable):
        return "Failed to open"
    return "Invalid"


@dataclass
class FileFailure:
    path: Path
    error: exceptions.VoltLogicError

    @property
    def reason(self) -> str:
        return failure_reason(self.error)


@dataclass
class BatchResult:
    """Outcome of decoding many dumps; failures do not stop the batch."""

    events: list[MeasurementEvent] = field(default_factory=list)
    processed: list[Path] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.processed)


def prepare(events: Iterable[MeasurementEvent]) -> list[MeasurementEvent]:
    """
    Sort events chronologically and drop repeated timestamps.

    Dumps taken from the same logger overlap, so the same minute can appear
    in several files. The sort is stable and the first occurrence is kept.
    """
    out: list[MeasurementEvent] = []
    for event in sorted(events, key=lambda e: e.timestamp):
        if out and out[-1].timestamp == event.timestamp:
            continue
        out.append(event)
    return out


def load_file(
    path: Union[str, PathLike], *, config: Optional[DecodeConfig] = None
) -> list[MeasurementEvent]:
    return decode.decode_file(path, config=config)


def load_files(
    paths: Iterable[Union[str, PathLike]],
    *,
    config: Optional[DecodeConfig] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchResult:
    """Decode each file in turn, recording failures and continuing.

    ``progress`` is called once per file with the path and the error, or
    None when the file decoded.
    """
    result = BatchResult()
    for p in paths:
        path = Path(p)
        try:
            events = load_file(path, config=config)
        except exceptions.VoltLogicError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            result.failures.append(FileFailure(path=path, error=exc))
            if progress:
                progress(path, exc)
            continue
        logger.info("Decoded %d events from %s", len(events), path)
        result.events.extend(events)
        result.processed.append(path)
        if progress:
            progress(path, None)
    return result


def list_input_files(directory: Union[str, PathLike]) -> list[Path]:
    """Regular files directly inside ``directory``, sorted by name."""
    root = Path(directory)
    if not root.is_dir():
        raise exceptions.FileUnreadable(f"Not a directory: {root}", path=str(root))
    return sorted(p for p in root.iterdir() if p.is_file())


def load_directory(
    directory: Union[str, PathLike],
    *,
    config: Optional[DecodeConfig] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchResult:
    return load_files(list_input_files(directory), config=config, progress=progress)
