"""Utility functions for srtdelay."""

import os
import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Only used for the log directory; the output directory is never created.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(NotADirectoryError(f"Path exists but is not a directory: {dir_path}"))
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(e) from e

def check_output_dir(dir_path: str) -> None:
    """
    Checks that the output directory already exists.

    Raises:
        FileSystemError: If the path is missing or is not a directory.
    """
    if not os.path.exists(dir_path):
        raise FileSystemError(FileNotFoundError(f"Output directory not found: {dir_path}"))
    if not os.path.isdir(dir_path):
        raise FileSystemError(NotADirectoryError(f"Output path is not a directory: {dir_path}"))

def find_output_collisions(input_paths: Sequence[str]) -> Dict[str, List[str]]:
    """
    Groups input paths that would be written to the same output file name.

    Returns:
        Mapping of base name to the colliding input paths, only for names used more than once.
    """
    by_name = defaultdict(list)
    for path in input_paths:
        by_name[os.path.basename(path)].append(path)
    return {name: paths for name, paths in by_name.items() if len(paths) > 1}
