"""Command-Line Interface handler for srtdelay."""

import argparse
import logging
import sys
from typing import List, Optional

from .batch import BatchShifter
from .config_loader import ConfigLoader, DEFAULT_CONFIG_PATH
from .exceptions import SrtDelayError, ConfigurationError, FileSystemError
from .log_setup import setup_logging
from .models import BatchSummary
from .progress import NullProgress, TqdmProgress
from .subtitle_shifter import SubtitleShifter
from .utils import check_output_dir

logger = logging.getLogger(__name__) # Get logger for this module

class CLIHandler:
    """Parses arguments and runs a batch of subtitle shifts."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            prog="srtdelay",
            description="srtdelay: Shift every timestamp in one or more .srt files by a fixed delay.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "delay_ms",
            type=int,
            help="Delay in milliseconds. Negative values move subtitles earlier."
        )
        parser.add_argument(
            "input_files",
            nargs="+",
            help="One or more .srt files to shift."
        )
        parser.add_argument(
            "output_directory",
            help="Existing directory that receives the shifted files (same file names)."
        )
        parser.add_argument(
            "-c", "--config",
            default=None,
            help=f"Path to a YAML configuration file. '{DEFAULT_CONFIG_PATH}' is used if present."
        )
        parser.add_argument(
            "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        parser.add_argument(
            "--encoding",
            default=None, # Default taken from config
            help="Override the text encoding used to read and write subtitle files."
        )
        parser.add_argument(
            "--no-progress",
            action="store_true",
            help="Do not draw per-file progress bars."
        )
        return parser

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the batch. Always exits."""
        args = self.parser.parse_args(argv)

        log_level = getattr(logging, args.log_level.upper(), logging.WARNING)
        setup_logging(log_level=log_level)

        # --- Load Configuration ---
        try:
            config_loader = ConfigLoader()
            if args.config:
                config = config_loader.load_config(args.config, required=True)
            else:
                config = config_loader.load_config(DEFAULT_CONFIG_PATH)
        except (ConfigurationError, FileNotFoundError) as e:
            logger.critical(f"Failed to load configuration: {e}")
            sys.exit(1)

        if config.get('log_to_file'):
            setup_logging(
                log_level=log_level,
                log_dir=config.get('log_dir', 'logs'),
                log_file=config.get('log_file', 'srtdelay.log'),
                log_to_file=True,
            )

        # --- Apply CLI Overrides ---
        if args.encoding:
            logger.info(f"Overriding encoding from config with CLI argument: {args.encoding}")
            config['encoding'] = args.encoding
        if args.no_progress:
            config['show_progress'] = False

        # --- Validate Output Directory ---
        try:
            check_output_dir(args.output_directory)
        except FileSystemError as e:
            logger.critical(str(e))
            sys.exit(1)

        try:
            progress = TqdmProgress() if config.get('show_progress', True) else NullProgress()
            shifter = SubtitleShifter(
                delay_ms=args.delay_ms,
                output_dir=args.output_directory,
                encoding=config.get('encoding', 'utf-8'),
                extension=config.get('extension', '.srt'),
                progress=progress,
            )
            results = BatchShifter(shifter).run(args.input_files)

            for input_file, result in zip(args.input_files, results):
                if not result.ok:
                    logger.error(f"An error occurred while processing file {input_file}: {result.error}")

            summary = BatchSummary.from_results(results)
            logger.info(f"srtdelay finished: {summary.succeeded} succeeded, {summary.failed} failed.")
            # Per-file failures are reported above but do not change the exit status.
            sys.exit(0)

        except SrtDelayError as e:
            logger.error(f"An srtdelay error occurred: {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            sys.exit(1)
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            sys.exit(2) # Use a different exit code for unexpected crashes


def main() -> None:
    CLIHandler().run()
