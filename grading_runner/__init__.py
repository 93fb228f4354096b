from grading_runner.common import config
from grading_runner.common import dto
from grading_runner.common import exceptions
from grading_runner.common import utils
from grading_runner import builder
from grading_runner import orchestrator

__version__ = "1.0.0"
__all__ = [
    "config",
    "dto",
    "exceptions",
    "utils",
    "builder",
    "orchestrator",
]
