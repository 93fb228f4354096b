from grading_runner.common import config
from grading_runner.common import dto
from grading_runner.common import exceptions
from grading_runner.common import utils

__all__ = [
    "config",
    "dto",
    "exceptions",
    "utils",
]
