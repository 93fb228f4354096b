from abc import ABC, abstractmethod
from typing import Dict, Optional

from grading_runner.builder.command_runner import CommandRunner, CommandResult
from grading_runner.builder.context import JobContext
from grading_runner.builder.toolchains import MANIFEST_PROFILES, ToolchainProfile
from grading_runner.common.config.constants import JAVA_SOURCE_GLOB, ToolchainVariant
from grading_runner.common.config.logging_config import get_logger
from grading_runner.common.dto.compilation import CompilationRecord
from grading_runner.common.exceptions.job_exceptions import (
    CompilationFailed,
    NoSourceFound,
    UnsupportedToolchain,
)
from grading_runner.common.utils.file_utils import find_files, make_executable, reset_directory


logger = get_logger(__name__)


class BuildStrategy(ABC):
    def __init__(self, runner: CommandRunner):
        self._runner = runner

    @abstractmethod
    async def compile(self, context: JobContext) -> CompilationRecord:
        ...

    def _raise_on_failure(
        self,
        context: JobContext,
        result: CommandResult,
        label: str,
    ) -> None:
        if result.succeeded:
            return
        if result.timed_out:
            context.error(f"{label} compilation timed out after {context.job.timeout_seconds} seconds")
        else:
            context.error(f"{label} compilation failed")
        raise CompilationFailed(
            variant=context.variant.value if context.variant else None,
            exit_code_of_command=result.exit_code,
            timed_out=result.timed_out,
            transcript=result.output,
        )


class ManifestBuildStrategy(BuildStrategy):
    def __init__(self, runner: CommandRunner, profile: ToolchainProfile):
        super().__init__(runner)
        self._profile = profile

    async def compile(self, context: JobContext) -> CompilationRecord:
        profile = self._profile
        context.info(f"Building with {profile.display_name}")

        if profile.wrapper and (context.repo_dir / profile.wrapper).is_file():
            make_executable(context.repo_dir / profile.wrapper)

        result = await self._runner.run(
            profile.compile_command(context.repo_dir),
            cwd=context.repo_dir,
            timeout=context.job.timeout_seconds,
        )
        record = CompilationRecord(success=result.succeeded, transcript=result.output)
        context.record_compilation(record)

        self._raise_on_failure(context, result, profile.display_name)
        context.info(f"{profile.display_name} build successful")
        return record


class PlainJavaBuildStrategy(BuildStrategy):
    async def compile(self, context: JobContext) -> CompilationRecord:
        context.info("Building plain Java files")

        sources = find_files(context.repo_dir, JAVA_SOURCE_GLOB)
        if not sources:
            raise NoSourceFound(search_root=str(context.repo_dir))

        relative = [str(path.relative_to(context.repo_dir)) for path in sources]
        context.info(f"Found Java files: {' '.join(relative)}")

        output_dir = reset_directory(context.classes_dir)
        result = await self._runner.run(
            ["javac", "-d", str(output_dir), *relative],
            cwd=context.repo_dir,
            timeout=context.job.timeout_seconds,
        )
        record = CompilationRecord(
            success=result.succeeded,
            transcript=result.output,
            output_dir=output_dir,
            source_files=sources,
        )
        context.record_compilation(record)

        if not result.succeeded:
            context.error(f"Compilation output: {result.output}")
        self._raise_on_failure(context, result, "Java")
        context.info("Plain Java compilation successful")
        return record


class BuildExecutor:
    def __init__(self, runner: CommandRunner):
        self._strategies: Dict[ToolchainVariant, BuildStrategy] = {
            variant: ManifestBuildStrategy(runner, profile)
            for variant, profile in MANIFEST_PROFILES.items()
        }
        self._strategies[ToolchainVariant.PLAIN_JAVA] = PlainJavaBuildStrategy(runner)

    def strategy_for(self, variant: Optional[ToolchainVariant]) -> BuildStrategy:
        strategy = self._strategies.get(variant) if variant else None
        if strategy is None:
            name = variant.value if variant else ToolchainVariant.UNSUPPORTED.value
            raise UnsupportedToolchain(f"Unsupported build system: {name}", variant=name)
        return strategy

    async def compile(self, context: JobContext) -> CompilationRecord:
        strategy = self.strategy_for(context.variant)
        logger.debug(f"Compiling job {context.job.job_id} with {type(strategy).__name__}")
        return await strategy.compile(context)
