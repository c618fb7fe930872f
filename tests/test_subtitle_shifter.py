"""
Tests for line shifting and the single-file job.
"""
import logging
import os
import tempfile
import unittest

from srtdelay.exceptions import (
    DelayUnderflowError,
    FileSystemError,
    InvalidFileError,
)
from srtdelay.models import FileJob
from srtdelay.progress import FileProgress, ProgressObserver
from srtdelay.subtitle_shifter import SubtitleShifter, shift_content, shift_line, split_lines


SAMPLE_SRT = (
    "1\n"
    "00:00:01,500 --> 00:00:03,000\n"
    "Hello there\n"
    "\n"
    "42\n"
    "00:01:00,000 --> 00:01:02,250\n"
    "Second caption 00:00:01,000 --> 00:00:02,000 inline\n"
)

SHIFTED_SAMPLE_SRT = (
    "1\n"
    "00:00:03,500 --> 00:00:05,000\n"
    "Hello there\n"
    "\n"
    "42\n"
    "00:01:02,000 --> 00:01:04,250\n"
    "Second caption 00:00:01,000 --> 00:00:02,000 inline\n"
)


class RecordingProgress(ProgressObserver):
    """Collects start_file/advance calls for assertions"""

    def __init__(self):
        self.files = []
        self.advanced = {}
        self.closed = []

    def start_file(self, label, total):
        self.files.append((label, total))
        self.advanced[label] = 0
        observer = self

        class _Handle(FileProgress):
            def advance(self, n=1):
                observer.advanced[label] += n

            def close(self):
                observer.closed.append(label)

        return _Handle()


class TestShiftLine(unittest.TestCase):
    """Per-line policy"""

    def test_timing_line_is_shifted(self):
        self.assertEqual(
            shift_line("00:00:01,500 --> 00:00:03,000", 2000),
            "00:00:03,500 --> 00:00:05,000",
        )
        self.assertEqual(
            shift_line("00:00:01,000 --> 00:00:02,000", -500),
            "00:00:00,500 --> 00:00:01,500",
        )

    def test_other_lines_pass_through(self):
        for line in ["42", "", "Some caption", "00:00:01,000", "00:00:01.000 --> 00:00:02.000",
                     "0:00:01,000 --> 00:00:02,000", "00:00:01,000 --> 00:00:02,000 "]:
            for delay in [0, 1500, -100000]:
                with self.subTest(line=line, delay=delay):
                    self.assertEqual(shift_line(line, delay), line)

    def test_zero_delay_normalizes(self):
        self.assertEqual(
            shift_line("00:75:00,000 --> 00:75:01,000", 0),
            "01:15:00,000 --> 01:15:01,000",
        )

    def test_underflow_propagates(self):
        with self.assertRaises(DelayUnderflowError):
            shift_line("00:00:00,100 --> 00:00:01,000", -500)


class TestShiftContent(unittest.TestCase):
    """Whole-text transformation"""

    def test_sample(self):
        self.assertEqual(shift_content(SAMPLE_SRT, 2000), SHIFTED_SAMPLE_SRT)

    def test_trailing_newline_added(self):
        self.assertEqual(shift_content("1\n00:00:01,000 --> 00:00:02,000", 0),
                         "1\n00:00:01,000 --> 00:00:02,000\n")

    def test_crlf_normalized(self):
        self.assertEqual(
            shift_content("1\r\n00:00:01,000 --> 00:00:02,000\r\nHi\r\n", 500),
            "1\n00:00:01,500 --> 00:00:02,500\nHi\n",
        )

    def test_empty_content(self):
        self.assertEqual(shift_content("", 1000), "")
        self.assertEqual(split_lines(""), [])

    def test_blank_lines_kept(self):
        self.assertEqual(split_lines("a\n\n\nb\n"), ["a", "", "", "b"])
        self.assertEqual(shift_content("\n\n", 1000), "\n\n")


class TestSubtitleShifter(unittest.TestCase):
    """Single file job: read, shift, write"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.input_dir = os.path.join(self._tmp.name, "in")
        self.output_dir = os.path.join(self._tmp.name, "out")
        os.mkdir(self.input_dir)
        os.mkdir(self.output_dir)

    def _write_input(self, name, content, mode="w"):
        path = os.path.join(self.input_dir, name)
        if mode == "wb":
            with open(path, "wb") as f:
                f.write(content)
        else:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        return path

    def _read_output(self, name):
        with open(os.path.join(self.output_dir, name), "r", encoding="utf-8", newline="") as f:
            return f.read()

    def test_shift_file_writes_same_name_in_output_dir(self):
        path = self._write_input("episode.srt", SAMPLE_SRT)
        result = SubtitleShifter(2000, self.output_dir).shift_file(path)

        self.assertTrue(result.ok)
        self.assertIsNone(result.error)
        self.assertEqual(result.output_path, os.path.join(self.output_dir, "episode.srt"))
        self.assertEqual(result.lines_total, 7)
        self.assertEqual(result.lines_shifted, 2)
        self.assertEqual(self._read_output("episode.srt"), SHIFTED_SAMPLE_SRT)
        # Input untouched
        with open(path, encoding="utf-8", newline="") as f:
            self.assertEqual(f.read(), SAMPLE_SRT)

    def test_crlf_input_written_with_lf(self):
        path = self._write_input("crlf.srt", "1\r\n00:00:01,000 --> 00:00:02,000\r\nHi")
        result = SubtitleShifter(-1000, self.output_dir).shift_file(path)
        self.assertTrue(result.ok)
        self.assertEqual(self._read_output("crlf.srt"), "1\n00:00:00,000 --> 00:00:01,000\nHi\n")

    def test_wrong_extension_fails_without_io(self):
        missing = os.path.join(self.input_dir, "notes.txt")
        for path in [missing, os.path.join(self.input_dir, "upper.SRT"), os.path.join(self.input_dir, "srt")]:
            with self.subTest(path=path):
                result = SubtitleShifter(1000, self.output_dir).shift_file(path)
                self.assertFalse(result.ok)
                self.assertIsInstance(result.error, InvalidFileError)
                self.assertEqual(result.error.path, path)
                self.assertEqual(str(result.error), f"Input file must end in .srt (received {path})")
        self.assertEqual(os.listdir(self.output_dir), [])

    def test_custom_extension(self):
        path = self._write_input("episode.sub", "00:00:01,000 --> 00:00:02,000\n")
        result = SubtitleShifter(1000, self.output_dir, extension=".sub").shift_file(path)
        self.assertTrue(result.ok)
        self.assertEqual(self._read_output("episode.sub"), "00:00:02,000 --> 00:00:03,000\n")

    def test_missing_file_is_io_failure(self):
        path = os.path.join(self.input_dir, "missing.srt")
        result = SubtitleShifter(1000, self.output_dir).shift_file(path)
        self.assertIsInstance(result.error, FileSystemError)
        self.assertIsInstance(result.error.cause, FileNotFoundError)
        self.assertTrue(str(result.error).startswith("IO: "))
        self.assertEqual(os.listdir(self.output_dir), [])

    def test_invalid_encoding_is_io_failure(self):
        path = self._write_input("binary.srt", b"\xff\xfe\xfa not utf-8", mode="wb")
        result = SubtitleShifter(1000, self.output_dir).shift_file(path)
        self.assertIsInstance(result.error, FileSystemError)
        self.assertIsInstance(result.error.cause, UnicodeDecodeError)

    def test_other_encoding(self):
        path = self._write_input("latin.srt", "00:00:01,000 --> 00:00:02,000\nCaf\xe9\n".encode("latin-1"), mode="wb")
        result = SubtitleShifter(500, self.output_dir, encoding="latin-1").shift_file(path)
        self.assertTrue(result.ok)
        with open(os.path.join(self.output_dir, "latin.srt"), "rb") as f:
            self.assertEqual(f.read(), "00:00:01,500 --> 00:00:02,500\nCaf\xe9\n".encode("latin-1"))

    def test_missing_output_dir_is_io_failure(self):
        path = self._write_input("episode.srt", SAMPLE_SRT)
        result = SubtitleShifter(1000, os.path.join(self._tmp.name, "nope")).shift_file(path)
        self.assertIsInstance(result.error, FileSystemError)
        self.assertIsNone(result.output_path)

    def test_underflow_is_reported_and_nothing_written(self):
        path = self._write_input("early.srt", "1\n00:00:00,200 --> 00:00:01,000\nHi\n")
        result = SubtitleShifter(-500, self.output_dir).shift_file(path)
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, DelayUnderflowError)
        self.assertEqual(os.listdir(self.output_dir), [])

    def test_progress_observer_called_per_file_and_line(self):
        path = self._write_input("episode.srt", SAMPLE_SRT)
        progress = RecordingProgress()
        SubtitleShifter(0, self.output_dir, progress=progress).shift_file(path)
        self.assertEqual(progress.files, [(path, 7)])
        self.assertEqual(progress.advanced[path], 7)
        self.assertEqual(progress.closed, [path])

    def test_accepts_path_objects(self):
        from pathlib import Path
        path = Path(self._write_input("episode.srt", SAMPLE_SRT))
        result = SubtitleShifter(2000, Path(self.output_dir)).shift_file(path)
        self.assertTrue(result.ok)
        self.assertEqual(result.input_path, str(path))

    def test_input_inside_output_dir_is_not_overwritten(self):
        path = os.path.join(self.output_dir, "movie.srt")
        original = "1\n00:00:01,000 --> 00:00:02,000\nHi\n"
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(original)

        result = SubtitleShifter(1000, self.output_dir).shift_file(path)

        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, FileSystemError)
        self.assertIsInstance(result.error.cause, FileExistsError)
        self.assertIsNone(result.output_path)
        with open(path, encoding="utf-8", newline="") as f:
            self.assertEqual(f.read(), original)

    def test_lone_carriage_return_is_not_a_line_break(self):
        content = "1\r00:00:01,000 --> 00:00:02,000\rHi\n"
        path = self._write_input("cr.srt", content)
        result = SubtitleShifter(1000, self.output_dir).shift_file(path)
        self.assertTrue(result.ok)
        self.assertEqual(result.lines_total, 1)
        self.assertEqual(result.lines_shifted, 0)
        self.assertEqual(self._read_output("cr.srt"), content)

    def test_shift_job_uses_job_settings(self):
        other_dir = os.path.join(self._tmp.name, "other")
        os.mkdir(other_dir)
        path = self._write_input("episode.srt", "00:00:01,000 --> 00:00:02,000\n")
        shifter = SubtitleShifter(0, self.output_dir)

        result = shifter.shift_job(FileJob(input_path=path, delay_ms=3000, output_dir=other_dir))

        self.assertTrue(result.ok)
        self.assertEqual(result.output_path, os.path.join(other_dir, "episode.srt"))
        with open(result.output_path, encoding="utf-8") as f:
            self.assertEqual(f.read(), "00:00:04,000 --> 00:00:05,000\n")
        self.assertEqual(os.listdir(self.output_dir), [])

    def test_failures_are_logged_at_debug_only(self):
        shifter = SubtitleShifter(-5000, self.output_dir)
        paths = [
            os.path.join(self.input_dir, "notes.txt"),
            os.path.join(self.input_dir, "missing.srt"),
            self._write_input("early.srt", "00:00:01,000 --> 00:00:02,000\n"),
        ]
        with self.assertLogs("srtdelay.subtitle_shifter", level="DEBUG") as logs:
            results = [shifter.shift_file(path) for path in paths]

        self.assertTrue(all(not r.ok for r in results))
        self.assertTrue(all(record.levelno == logging.DEBUG for record in logs.records))


if __name__ == "__main__":
    unittest.main()
