from grading_runner.common.dto.base import WireModel
from grading_runner.common.dto.code_file import CodeFile
from grading_runner.common.dto.compilation import CompilationRecord
from grading_runner.common.dto.execution_log import ExecutionLogEntry
from grading_runner.common.dto.job import GradingJob, JobResult
from grading_runner.common.dto.test_result import TestCaseResult, TestRunSummary

__all__ = [
    "WireModel",
    "CodeFile",
    "CompilationRecord",
    "ExecutionLogEntry",
    "GradingJob",
    "JobResult",
    "TestCaseResult",
    "TestRunSummary",
]
