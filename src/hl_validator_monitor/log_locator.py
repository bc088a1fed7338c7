#!/usr/bin/env python3
"""Discovery of the current validator log file.

The node writes its logs as ``<base_path>/<date>/<n>``: one directory per
date and one or more files inside it. The newest directory wins by name and
the newest file wins by the numeric-if-possible ordering below.
"""

import functools
import logging
import re
from pathlib import Path

# Get logger for this module
logger = logging.getLogger(__name__)

_INTEGER_NAME = re.compile(r"[+-]?[0-9]+")

# Names outside the signed 64-bit range are not treated as integers
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


class LogLocatorError(FileNotFoundError):
    """Base class for failures to locate the current log file."""


class NoDirectoriesFound(LogLocatorError):
    """Raised when the base path has no subdirectories."""


class NoFilesFound(LogLocatorError):
    """Raised when the latest directory has no files."""


def _parse_int(name: str) -> int | None:
    if _INTEGER_NAME.fullmatch(name) is None:
        return None
    value = int(name)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def compare_log_file_names(a: str, b: str) -> int:
    """Compare two log file names.

    Names that both parse fully as integers compare numerically; any other
    pair compares as plain strings. The same comparator is used for the whole
    list, so a mix of numeric and non-numeric names is ordered pairwise only.

    Returns:
        Negative, zero or positive like a classic ``cmp`` function
    """
    a_int = _parse_int(a)
    b_int = _parse_int(b)
    if a_int is not None and b_int is not None:
        return (a_int > b_int) - (a_int < b_int)
    return (a > b) - (a < b)


def find_latest_dir(base_path: str | Path) -> Path:
    """Return the subdirectory of ``base_path`` with the greatest name.

    Raises:
        NoDirectoriesFound: If ``base_path`` contains no subdirectories
        OSError: If ``base_path`` cannot be listed
    """
    base = Path(base_path)
    dirs = [entry.name for entry in base.iterdir() if entry.is_dir()]

    if not dirs:
        raise NoDirectoriesFound(f"no directories found in {base}")

    return base / max(dirs)


def find_latest_file(dir_path: str | Path) -> Path:
    """Return the newest file inside ``dir_path``.

    Raises:
        NoFilesFound: If ``dir_path`` contains no files
        OSError: If ``dir_path`` cannot be listed
    """
    directory = Path(dir_path)
    files = [entry.name for entry in directory.iterdir() if not entry.is_dir()]

    if not files:
        raise NoFilesFound(f"no files found in {directory}")

    files.sort(key=functools.cmp_to_key(compare_log_file_names))
    return directory / files[-1]


def find_latest_log_file(base_path: str | Path) -> Path:
    """Locate the current log file under ``base_path``.

    Args:
        base_path: Root directory holding the per-date log directories

    Returns:
        Path to the newest log file in the newest directory

    Raises:
        LogLocatorError: If no directory or no file could be found
    """
    latest_dir = find_latest_dir(base_path)
    logger.debug(f"Latest log directory: {latest_dir}")

    latest_file = find_latest_file(latest_dir)
    logger.debug(f"Latest log file: {latest_file}")

    return latest_file
