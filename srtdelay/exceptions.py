"""Custom Exceptions for the srtdelay application."""

class SrtDelayError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(SrtDelayError):
    """Exception raised for errors in configuration loading."""
    pass

class InvalidFileError(SrtDelayError):
    """Exception raised when an input file does not carry the subtitle extension."""

    def __init__(self, path, extension: str = ".srt"):
        self.path = path
        self.extension = extension
        super().__init__(f"Input file must end in {extension} (received {path})")

class InvalidTimestampError(SrtDelayError):
    """Exception raised when text does not match the timestamp grammar."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid timestamp received ({text})")

class DelayUnderflowError(SrtDelayError):
    """Exception raised when a delay would move a timestamp before zero."""

    def __init__(self, timestamp, delay_ms: int):
        self.timestamp = timestamp
        self.delay_ms = delay_ms
        super().__init__(f"Delay of {delay_ms} ms moves timestamp {timestamp} before 00:00:00,000")

class FileSystemError(SrtDelayError):
    """Exception raised for file system related errors (permissions, not found etc)."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"IO: {cause}")
