import inspect
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from grading_runner.builder.command_runner import CommandResult
from grading_runner.builder.context import JobContext
from grading_runner.common.config.settings import Settings
from grading_runner.common.dto.job import GradingJob
from grading_runner.orchestrator.emitter import ResultEmitter
from grading_runner.orchestrator.pipeline import GradingPipeline


REPO_URL = "https://git.example.com/student/calculator.git"

Effect = Callable[[List[str], Optional[Path]], Any]


@dataclass
class ScriptedResponse:
    prefix: Tuple[str, ...]
    exit_code: int = 0
    output: str = ""
    timed_out: bool = False
    duration_seconds: float = 0.01
    effect: Optional[Effect] = None


class ScriptedRunner:
    """Stands in for CommandRunner: answers commands by prefix, records calls."""

    def __init__(self):
        self.calls: List[Tuple[List[str], Optional[Path], Optional[float]]] = []
        self._responses: List[ScriptedResponse] = []

    def on(self, prefix: Sequence[str], **kwargs: Any) -> "ScriptedRunner":
        self._responses.append(ScriptedResponse(prefix=tuple(prefix), **kwargs))
        return self

    @property
    def commands(self) -> List[List[str]]:
        return [command for command, _, _ in self.calls]

    def find(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.commands if tuple(c[:len(prefix)]) == prefix]

    async def run(
        self,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        command = [str(part) for part in cmd]
        self.calls.append((command, cwd, timeout))

        for response in self._responses:
            if tuple(command[:len(response.prefix)]) != response.prefix:
                continue
            if response.effect is not None:
                outcome = response.effect(command, cwd)
                if inspect.isawaitable(outcome):
                    await outcome
            return CommandResult(
                command=command,
                exit_code=None if response.timed_out else response.exit_code,
                output=response.output,
                timed_out=response.timed_out,
                duration_seconds=response.duration_seconds,
            )

        return CommandResult(command=command, exit_code=0, output="")


def write_tree(root: Path, files: Dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def clone_with(files: Dict[str, str]) -> Effect:
    def effect(command: List[str], cwd: Optional[Path]) -> None:
        target = Path(command[-1])
        target.mkdir(parents=True, exist_ok=True)
        write_tree(target, files)

    return effect


def junit_report(suite: str, cases: Sequence[Tuple[str, Optional[str]]]) -> str:
    body = []
    for name, failure in cases:
        if failure is None:
            body.append(f'  <testcase name="{name}" classname="{suite}" time="0.012"/>')
        else:
            body.append(
                f'  <testcase name="{name}" classname="{suite}" time="0.003">\n'
                f'    <failure message="{failure}" type="java.lang.AssertionError">{failure}</failure>\n'
                f"  </testcase>"
            )
    failures = sum(1 for _, failure in cases if failure is not None)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<testsuite name="{suite}" tests="{len(cases)}" failures="{failures}">\n'
        + "\n".join(body)
        + "\n</testsuite>\n"
    )


def reports_in(report_dir: str, reports: Dict[str, str]) -> Effect:
    def effect(command: List[str], cwd: Optional[Path]) -> None:
        target = Path(cwd) / report_dir
        target.mkdir(parents=True, exist_ok=True)
        for name, content in reports.items():
            (target / name).write_text(content)

    return effect


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        grading_job_id="42",
        repo_url=REPO_URL,
        workspace_dir=tmp_path / "workspace",
        log_json=False,
    )


@pytest.fixture
def job(settings: Settings) -> GradingJob:
    return settings.to_grading_job()


@pytest.fixture
def context(settings: Settings, job: GradingJob) -> JobContext:
    settings.repo_dir.mkdir(parents=True, exist_ok=True)
    return JobContext(job, repo_dir=settings.repo_dir, classes_dir=settings.classes_dir)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def emitter(output: io.StringIO) -> ResultEmitter:
    return ResultEmitter(stream=output)


@pytest.fixture
def pipeline(settings: Settings, runner: ScriptedRunner, emitter: ResultEmitter) -> GradingPipeline:
    return GradingPipeline(settings, runner=runner, emitter=emitter)
