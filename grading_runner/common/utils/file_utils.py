from pathlib import Path
from typing import Optional, List, Union, Iterator
import os
import shutil
import stat

from grading_runner.common.config.constants import IGNORED_DIRECTORIES
from grading_runner.common.config.logging_config import get_logger


logger = get_logger(__name__)


def safe_read_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    default: Optional[str] = None,
    max_chars: Optional[int] = None,
) -> Optional[str]:
    file_path = Path(file_path)

    try:
        if not file_path.is_file():
            logger.debug(f"Not a readable file: {file_path}")
            return default

        with open(file_path, "r", encoding=encoding, errors="replace") as f:
            return f.read(max_chars) if max_chars else f.read()
    except PermissionError:
        logger.error(f"Permission denied reading file: {file_path}")
        return default
    except OSError as e:
        logger.error(f"Unexpected error reading file {file_path}: {e}")
        return default


def iter_files(
    root: Union[str, Path],
    pattern: str,
    ignored_dirs: tuple = IGNORED_DIRECTORIES,
) -> Iterator[Path]:
    root = Path(root)
    for path in root.rglob(pattern):
        relative_parts = path.relative_to(root).parts
        if any(part in ignored_dirs for part in relative_parts[:-1]):
            continue
        if path.is_file():
            yield path


def find_files(
    root: Union[str, Path],
    pattern: str,
) -> List[Path]:
    return sorted(iter_files(root, pattern))


def has_any_file(root: Union[str, Path], pattern: str) -> bool:
    return next(iter_files(root, pattern), None) is not None


def ensure_directory(path: Union[str, Path]) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def reset_directory(path: Union[str, Path]) -> Path:
    path = Path(path)
    if path.exists():
        logger.debug(f"Removing stale directory: {path}")
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def remove_directory(path: Union[str, Path]) -> None:
    path = Path(path)
    if path.exists():
        shutil.rmtree(path)


def make_executable(file_path: Union[str, Path]) -> None:
    file_path = Path(file_path)
    mode = os.stat(file_path).st_mode
    os.chmod(file_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
