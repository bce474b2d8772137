"""
File operations for loco.

Collects candidate source files under a root, reads them as text and sniffs
their encoding. None of this is part of the classification core; the engine
receives the reader as a collaborator.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from .config import AnalysisConfig, default_config
from .exceptions import InvalidConfigError, InvalidPathError, UnreadableFileError
from .logging_config import get_logger
from .scanning.languages import RuleRegistry, default_registry

logger = get_logger(__name__)

_ENCODING_SAMPLE_BYTES = 1024


def collect_files(
    root: Path,
    config: Optional[AnalysisConfig] = None,
    registry: Optional[RuleRegistry] = None,
) -> list[Path]:
    """
    Walk ``root`` and return the files worth analyzing, sorted.

    Directories named in ``config.default_excludes`` are pruned. A file is
    kept when its full path does not match ``config.exclude_pattern``, its
    extension is in ``config.include_extensions`` (or, without that list,
    has a language rule), and it is no larger than the size limit.

    Args:
        root: Directory (or single file) to scan
        config: Analysis configuration
        registry: Rule registry deciding which extensions are known

    Returns:
        Sorted list of file paths

    Raises:
        InvalidPathError: If root does not exist or is not readable
        LocoError: If the exclude pattern is not a valid regex
    """
    config = config or default_config
    registry = registry or default_registry

    if not root.exists():
        raise InvalidPathError(root, "path does not exist")
    if not os.access(root, os.R_OK):
        raise InvalidPathError(root, "path is not readable")

    exclude_regex = _compile_exclude(config.exclude_pattern)
    include = None
    if config.include_extensions:
        include = {ext.strip().lower().lstrip(".") for ext in config.include_extensions}
    excluded_dirs = set(config.default_excludes)
    max_bytes = config.max_file_size_bytes

    if root.is_file():
        candidates = [root]
    else:
        candidates = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded_dirs)
            for name in filenames:
                candidates.append(Path(dirpath) / name)

    files = []
    skipped = 0
    for path in candidates:
        if not _wanted(path, include, registry):
            continue
        if exclude_regex is not None and exclude_regex.search(str(path)):
            skipped += 1
            logger.debug(f"Skipped (pattern): {path}")
            continue
        try:
            size = path.stat().st_size
        except OSError as e:
            skipped += 1
            logger.debug(f"Cannot stat {path}: {e}")
            continue
        if size > max_bytes:
            skipped += 1
            logger.debug(f"Skipped (size): {path} ({size} bytes)")
            continue
        files.append(path)

    files.sort()
    logger.info(f"Collected {len(files)} files under {root} ({skipped} skipped)")
    return files


def _wanted(path: Path, include: Optional[set[str]], registry: RuleRegistry) -> bool:
    ext = path.suffix.lower().lstrip(".")
    if not ext:
        return False
    if include is not None:
        return ext in include
    return registry.is_known(ext)


def _compile_exclude(pattern: Optional[str]) -> Optional[re.Pattern]:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidConfigError("exclude_pattern", pattern, str(e))


def read_source(path: Path) -> str:
    """
    Read a source file as UTF-8 text.

    A leading byte-order mark is dropped. Invalid UTF-8 is an error rather
    than being replaced, so binary files never reach the classifier.

    Raises:
        UnreadableFileError: If the file cannot be opened or decoded
    """
    try:
        return path.read_bytes().decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnreadableFileError(path, f"Encoding error: {e}")
    except OSError as e:
        raise UnreadableFileError(path, f"OS error: {e}")


def detect_encoding(path: Path) -> str:
    """Best-effort encoding label from the BOM and the first kilobyte."""
    try:
        with open(path, "rb") as f:
            sample = f.read(_ENCODING_SAMPLE_BYTES)
    except OSError:
        return "Unreadable"

    if not sample:
        return "Empty"
    if sample.startswith(b"\xef\xbb\xbf"):
        return "UTF-8 BOM"
    if sample.startswith(b"\xff\xfe"):
        return "UTF-16 LE"
    if sample.startswith(b"\xfe\xff"):
        return "UTF-16 BE"
    if all(b < 0x80 for b in sample):
        return "ASCII"
    try:
        sample.decode("utf-8")
        return "UTF-8"
    except UnicodeDecodeError as e:
        # The sample may cut a multi-byte sequence in half
        if e.start >= len(sample) - 3 and e.reason == "unexpected end of data":
            return "UTF-8"
        return "Binary/Unknown"
