from grading_runner.builder.command_runner import CommandRunner, CommandResult
from grading_runner.builder.context import JobContext
from grading_runner.builder.repository import RepositoryAcquirer
from grading_runner.builder.toolchain_detector import ToolchainDetector
from grading_runner.builder.toolchains import ToolchainProfile, MANIFEST_PROFILES
from grading_runner.builder.build_executor import BuildExecutor
from grading_runner.builder.report_parser import JUnitReportParser
from grading_runner.builder.test_runner import TestExecutor
from grading_runner.builder.code_extractor import CodeExtractor

__all__ = [
    "CommandRunner",
    "CommandResult",
    "JobContext",
    "RepositoryAcquirer",
    "ToolchainDetector",
    "ToolchainProfile",
    "MANIFEST_PROFILES",
    "BuildExecutor",
    "JUnitReportParser",
    "TestExecutor",
    "CodeExtractor",
]
