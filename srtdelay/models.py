"""Data models for srtdelay."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class FileJob:
    """One unit of work: shift a single input file into the output directory."""
    input_path: str
    delay_ms: int
    output_dir: str

@dataclass
class FileResult:
    """Terminal outcome of a FileJob. `error` is None on success."""
    input_path: str
    output_path: Optional[str] = None
    error: Optional[Exception] = None
    lines_total: int = 0
    lines_shifted: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

@dataclass
class BatchSummary:
    """Counts over a batch result list, for the reporting layer."""
    succeeded: int = 0
    failed: int = 0
    failures: List[Tuple[str, Exception]] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: List[FileResult]) -> "BatchSummary":
        summary = cls()
        for result in results:
            if result.ok:
                summary.succeeded += 1
            else:
                summary.failed += 1
                summary.failures.append((result.input_path, result.error))
        return summary
