"""Shifts the timing lines of a single subtitle file."""

import logging
import os
from typing import Optional

from .exceptions import (
    DelayUnderflowError,
    FileSystemError,
    InvalidFileError,
    InvalidTimestampError,
)
from .models import FileJob, FileResult
from .progress import NullProgress, ProgressObserver
from .timestamp import TimestampRange

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".srt"
DEFAULT_ENCODING = "utf-8"


def try_shift_line(line: str, delay_ms: int) -> Optional[str]:
    """Returns the shifted timing line, or None if `line` is not a timing line."""
    try:
        timestamp_range = TimestampRange.parse(line)
    except InvalidTimestampError:
        return None
    return timestamp_range.delay(delay_ms).to_string()


def shift_line(line: str, delay_ms: int) -> str:
    """
    Shifts a single line if it is a ``start --> end`` timing line.

    Anything else, including lines that only look like timestamps, is
    returned unchanged.

    Raises:
        DelayUnderflowError: If the delay moves either endpoint before zero.
    """
    shifted = try_shift_line(line, delay_ms)
    return line if shifted is None else shifted


def split_lines(content: str):
    """Splits text on ``\\n`` the way a line reader would, without a trailing empty entry."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def shift_content(content: str, delay_ms: int) -> str:
    """Shifts every timing line in `content`; each output line ends with ``\\n``."""
    return "".join(f"{shift_line(line, delay_ms)}\n" for line in split_lines(content))


class SubtitleShifter:
    """
    Applies one delay to whole subtitle files, writing results into an output directory.

    Per-file problems are returned inside the FileResult, never raised, so a
    batch can run many of these side by side without one file affecting another.
    """

    def __init__(
        self,
        delay_ms: int,
        output_dir: str,
        encoding: str = DEFAULT_ENCODING,
        extension: str = DEFAULT_EXTENSION,
        progress: Optional[ProgressObserver] = None,
    ):
        """
        Args:
            delay_ms: Signed shift in milliseconds; negative moves subtitles earlier.
            output_dir: Existing directory that receives the shifted copies.
            encoding: Text encoding used to read and write files.
            extension: Required input file extension, including the dot.
            progress: Observer notified once per file and once per line.
        """
        self.delay_ms = delay_ms
        self.output_dir = os.fspath(output_dir)
        self.encoding = encoding
        self.extension = extension
        self.progress = progress if progress is not None else NullProgress()


    def get_output_path(self, input_path: str, output_dir: Optional[str] = None) -> str:
        if output_dir is None:
            output_dir = self.output_dir
        return os.path.join(os.fspath(output_dir), os.path.basename(input_path))

    def _read(self, input_path: str) -> str:
        # newline="" keeps a lone "\r" inside its line; split_lines only strips "\r\n".
        try:
            with open(input_path, "r", encoding=self.encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Failed to read subtitle file {input_path}: {e}")
            raise FileSystemError(e) from e

    def _write(self, output_path: str, content: str) -> None:
        try:
            with open(output_path, "w", encoding=self.encoding, newline="\n") as f:
                f.write(content)
        except (OSError, UnicodeEncodeError) as e:
            logger.debug(f"Failed to write subtitle file {output_path}: {e}")
            raise FileSystemError(e) from e

    def make_job(self, input_path) -> FileJob:
        return FileJob(input_path=os.fspath(input_path), delay_ms=self.delay_ms, output_dir=self.output_dir)

    def shift_file(self, input_path) -> FileResult:
        """Shifts one subtitle file using this shifter's delay and output directory."""
        return self.shift_job(self.make_job(input_path))

    def shift_job(self, job: FileJob) -> FileResult:
        """
        Shifts one subtitle file into the job's output directory.

        Args:
            job: The input path, delay and output directory to use.

        Returns:
            A FileResult. On failure `error` holds an InvalidFileError,
            FileSystemError or DelayUnderflowError and nothing else is raised.
        """
        input_path = os.fspath(job.input_path)
        result = FileResult(input_path=input_path)

        if os.path.splitext(input_path)[1] != self.extension:
            logger.debug(f"Skipping {input_path}: not a {self.extension} file")
            result.error = InvalidFileError(input_path, self.extension)
            return result

        output_path = self.get_output_path(input_path, job.output_dir)
        if os.path.exists(output_path) and os.path.exists(input_path) and os.path.samefile(input_path, output_path):
            logger.debug(f"Refusing to overwrite {input_path} in place")
            result.error = FileSystemError(
                FileExistsError(f"Output file {output_path} is the input file; refusing to overwrite it")
            )
            return result

        try:
            content = self._read(input_path)
        except FileSystemError as e:
            result.error = e
            return result

        lines = split_lines(content)
        result.lines_total = len(lines)
        file_progress = self.progress.start_file(input_path, len(lines))
        shifted_parts = []
        try:
            for line in lines:
                shifted = try_shift_line(line, job.delay_ms)
                if shifted is None:
                    shifted_parts.append(line)
                else:
                    shifted_parts.append(shifted)
                    result.lines_shifted += 1
                shifted_parts.append("\n")
                file_progress.advance(1)
        except DelayUnderflowError as e:
            logger.debug(f"Cannot shift {input_path}: {e}")
            result.error = e
            return result
        finally:
            file_progress.close()

        try:
            self._write(output_path, "".join(shifted_parts))
        except FileSystemError as e:
            # A partial file may be left behind; it is reported, not removed.
            result.error = e
            return result

        result.output_path = output_path
        logger.info(
            f"Shifted {result.lines_shifted} timing lines by {job.delay_ms} ms: {input_path} -> {output_path}"
        )
        return result
