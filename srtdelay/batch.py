"""Runs one SubtitleShifter job per input file concurrently and collects every outcome."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Sequence

from .exceptions import SrtDelayError
from .models import FileJob, FileResult
from .progress import ProgressObserver
from .subtitle_shifter import SubtitleShifter, DEFAULT_ENCODING, DEFAULT_EXTENSION
from .utils import find_output_collisions

logger = logging.getLogger(__name__)


class BatchShifter:
    """
    Fans a list of input files out onto worker threads, one per file.

    Every job runs to completion; a failing file never cancels or alters
    the result of another. Results come back in input order.
    """

    def __init__(self, shifter: SubtitleShifter):
        self.shifter = shifter

    def make_jobs(self, input_paths: Sequence[str]) -> List[FileJob]:
        return [self.shifter.make_job(path) for path in input_paths]

    def _run_job(self, job: FileJob) -> FileResult:
        return self.shifter.shift_job(job)

    def run(self, input_paths: Sequence[str]) -> List[FileResult]:
        """
        Shifts every file in `input_paths`.

        Args:
            input_paths: Files to process, in the order results should be returned.

        Returns:
            One FileResult per input path, with results[i] belonging to input_paths[i].
        """
        jobs = self.make_jobs(input_paths)
        if not jobs:
            logger.warning("No input files given. Nothing to do.")
            return []

        for name, paths in find_output_collisions([job.input_path for job in jobs]).items():
            logger.warning(
                f"{len(paths)} input files share the output name '{name}' and will overwrite each other: {', '.join(paths)}"
            )

        batch_start_time = time.time()
        logger.info(f"--- Shifting {len(jobs)} files by {self.shifter.delay_ms} ms ---")

        results: List[Optional[FileResult]] = [None] * len(jobs)
        with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="srtdelay") as executor:
            futures = {executor.submit(self._run_job, job): index for index, job in enumerate(jobs)}
            for future in as_completed(futures):
                index = futures[future]
                job = jobs[index]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.critical(f"Unexpected error while processing {job.input_path}: {e}", exc_info=True)
                    error = SrtDelayError(f"Unexpected error: {e}")
                    error.__cause__ = e
                    results[index] = FileResult(input_path=job.input_path, error=error)

        failed = sum(1 for result in results if not result.ok)
        logger.info(f"--- Batch finished in {time.time() - batch_start_time:.2f} seconds ---")
        logger.info(f"Succeeded: {len(results) - failed}/{len(results)} files, failed: {failed}/{len(results)}")
        return results


def shift_batch(
    input_paths: Sequence[str],
    delay_ms: int,
    output_dir: str,
    encoding: str = DEFAULT_ENCODING,
    extension: str = DEFAULT_EXTENSION,
    progress: Optional[ProgressObserver] = None,
) -> List[FileResult]:
    """Convenience wrapper: builds a SubtitleShifter and runs a BatchShifter over `input_paths`."""
    shifter = SubtitleShifter(
        delay_ms=delay_ms,
        output_dir=output_dir,
        encoding=encoding,
        extension=extension,
        progress=progress,
    )
    return BatchShifter(shifter).run(input_paths)
