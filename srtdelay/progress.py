"""Pluggable per-file progress reporting."""

import logging
import threading
from abc import ABC, abstractmethod

from tqdm import tqdm

logger = logging.getLogger(__name__)

BAR_FORMAT = "{desc:<30} | {elapsed} {bar:30} {percentage:3.0f}% [{n_fmt}/{total_fmt}] [ETA: {remaining}]"


class FileProgress(ABC):
    """Progress handle for a single file."""

    @abstractmethod
    def advance(self, n: int = 1) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class ProgressObserver(ABC):
    """Abstract base class for batch progress reporters."""

    @abstractmethod
    def start_file(self, label: str, total: int) -> FileProgress:
        """
        Opens a progress handle for one file.

        Args:
            label: Text shown next to the bar, usually the input path.
            total: Number of lines that will be processed.

        Returns:
            A FileProgress that receives one advance() call per line.
        """
        pass


class _NullFileProgress(FileProgress):
    def advance(self, n: int = 1) -> None:
        pass

    def close(self) -> None:
        pass


class NullProgress(ProgressObserver):
    """Reports nothing. Default when the caller does not ask for progress."""

    def start_file(self, label: str, total: int) -> FileProgress:
        return _NullFileProgress()


class _TqdmFileProgress(FileProgress):
    def __init__(self, bar: tqdm):
        self._bar = bar

    def advance(self, n: int = 1) -> None:
        self._bar.update(n)

    def close(self) -> None:
        self._bar.close()


class TqdmProgress(ProgressObserver):
    """One tqdm bar per file, stacked in the order files start."""

    def __init__(self, disable: bool = False):
        self.disable = disable
        self._lock = threading.Lock()
        self._next_position = 0

    def start_file(self, label: str, total: int) -> FileProgress:
        with self._lock:
            position = self._next_position
            self._next_position += 1
        bar = tqdm(
            total=total,
            desc=label[-30:],
            unit="line",
            position=position,
            leave=True,
            bar_format=BAR_FORMAT,
            disable=self.disable,
        )
        return _TqdmFileProgress(bar)
