from grading_runner.common.utils.file_utils import (
    safe_read_file,
    iter_files,
    find_files,
    has_any_file,
    ensure_directory,
    reset_directory,
    remove_directory,
    make_executable,
)
from grading_runner.common.utils.time_utils import (
    utc_now,
    to_iso_format,
    format_duration,
    seconds_to_millis,
    Timer,
)

__all__ = [
    "safe_read_file",
    "iter_files",
    "find_files",
    "has_any_file",
    "ensure_directory",
    "reset_directory",
    "remove_directory",
    "make_executable",
    "utc_now",
    "to_iso_format",
    "format_duration",
    "seconds_to_millis",
    "Timer",
]
