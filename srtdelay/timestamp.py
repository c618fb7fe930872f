"""Parsing, shifting and formatting of SRT timestamps and timestamp ranges."""

import re
from dataclasses import dataclass

from .exceptions import InvalidTimestampError, DelayUnderflowError

MILLISECONDS_PER_SECOND = 1000
MILLISECONDS_PER_MINUTE = 60_000
MILLISECONDS_PER_HOUR = 3_600_000
SECONDS_PER_MINUTE = 60
MINUTES_PER_HOUR = 60

RANGE_SEPARATOR = " --> "

# Compiled once at import; matched with fullmatch so a trailing newline never slips through.
TIMESTAMP_REGEX = re.compile(
    r"(?P<hours>\d{2}):(?P<minutes>\d{2}):(?P<seconds>\d{2}),(?P<milliseconds>\d{3})",
    re.ASCII,
)
TIMESTAMP_RANGE_REGEX = re.compile(
    r"(?P<start>\d{2}:\d{2}:\d{2},\d{3}) --> (?P<end>\d{2}:\d{2}:\d{2},\d{3})",
    re.ASCII,
)


@dataclass(frozen=True, order=True)
class Timestamp:
    """A point in a subtitle file, stored as whole milliseconds from zero."""
    total_ms: int

    def __post_init__(self):
        if self.total_ms < 0:
            raise ValueError(f"Timestamp cannot be negative: {self.total_ms} ms")

    @classmethod
    def parse(cls, text: str) -> "Timestamp":
        """
        Parses ``HH:MM:SS,mmm`` into a Timestamp.

        Fields are not range-checked: ``00:75:00,000`` is read as 75 minutes
        and comes back out as ``01:15:00,000``.

        Raises:
            InvalidTimestampError: If the text does not match the format exactly.
        """
        match = TIMESTAMP_REGEX.fullmatch(text)
        if match is None:
            raise InvalidTimestampError(text)

        hours = int(match.group("hours"))
        minutes = int(match.group("minutes"))
        seconds = int(match.group("seconds"))
        milliseconds = int(match.group("milliseconds"))

        return cls(
            milliseconds
            + seconds * MILLISECONDS_PER_SECOND
            + minutes * MILLISECONDS_PER_MINUTE
            + hours * MILLISECONDS_PER_HOUR
        )

    def components(self):
        """Returns (hours, minutes, seconds, milliseconds); hours are unbounded."""
        milliseconds = self.total_ms % MILLISECONDS_PER_SECOND
        seconds = (self.total_ms // MILLISECONDS_PER_SECOND) % SECONDS_PER_MINUTE
        minutes = (self.total_ms // MILLISECONDS_PER_MINUTE) % MINUTES_PER_HOUR
        hours = self.total_ms // MILLISECONDS_PER_HOUR
        return hours, minutes, seconds, milliseconds

    def to_string(self) -> str:
        hours, minutes, seconds, milliseconds = self.components()
        return f"{hours:02d}:{minutes:02d}:{seconds:02d},{milliseconds:03d}"

    def __str__(self) -> str:
        return self.to_string()

    def delay(self, delay_ms: int) -> "Timestamp":
        """
        Returns a new Timestamp shifted by ``delay_ms`` (negative shifts earlier).

        Raises:
            DelayUnderflowError: If the result would fall before 00:00:00,000.
        """
        shifted = self.total_ms + delay_ms
        if shifted < 0:
            raise DelayUnderflowError(self, delay_ms)
        return Timestamp(shifted)


@dataclass(frozen=True)
class TimestampRange:
    """The ``start --> end`` timing line of a subtitle block. Ordering is not enforced."""
    start: Timestamp
    end: Timestamp

    @classmethod
    def parse(cls, text: str) -> "TimestampRange":
        """
        Parses a full ``HH:MM:SS,mmm --> HH:MM:SS,mmm`` line.

        Raises:
            InvalidTimestampError: Carrying the whole line, if either side is invalid.
        """
        match = TIMESTAMP_RANGE_REGEX.fullmatch(text)
        if match is None:
            raise InvalidTimestampError(text)
        try:
            start = Timestamp.parse(match.group("start"))
            end = Timestamp.parse(match.group("end"))
        except InvalidTimestampError as e:
            raise InvalidTimestampError(text) from e
        return cls(start, end)

    def to_string(self) -> str:
        return f"{self.start}{RANGE_SEPARATOR}{self.end}"

    def __str__(self) -> str:
        return self.to_string()

    def delay(self, delay_ms: int) -> "TimestampRange":
        return TimestampRange(self.start.delay(delay_ms), self.end.delay(delay_ms))
