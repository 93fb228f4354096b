import asyncio
import json
from pathlib import Path

import pytest

from grading_runner.common.config.constants import JobStatus, PipelineState
from grading_runner.common.exceptions import ConfigError
from grading_runner.orchestrator.emitter import ResultEmitter
from grading_runner.orchestrator.pipeline import GradingPipeline
from tests.conftest import REPO_URL, clone_with, junit_report, reports_in


CALCULATOR = """package com.example;

public class Calculator {
    public int add(int a, int b) { return a + b; }
    public int divide(int a, int b) { return a / b; }
}
"""

CALCULATOR_TEST = """package com.example;

public class CalculatorTest {
    public static void main(String[] args) {
        System.out.println("2 + 3 = " + new Calculator().add(2, 3));
    }
}
"""

MAVEN_PROJECT = {
    "pom.xml": "<project><modelVersion>4.0.0</modelVersion></project>",
    "src/main/java/com/example/Calculator.java": CALCULATOR,
    "src/test/java/com/example/CalculatorTest.java": CALCULATOR_TEST,
}


def _documents(output):
    return [json.loads(line) for line in output.getvalue().splitlines() if line.strip()]


def _messages(document, entry_type=None):
    return [
        e["message"] for e in document["executionLogs"]
        if entry_type is None or e["type"] == entry_type
    ]


def _compile_classes(*class_names):
    def effect(command, cwd):
        out_dir = Path(command[command.index("-d") + 1])
        for name in class_names:
            path = out_dir / (name.replace(".", "/") + ".class")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"\xca\xfe\xba\xbe")

    return effect


class TestSuccessfulJobs:
    @pytest.mark.asyncio
    async def test_maven_submission(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))
        runner.on(["mvn", "clean"], output="[INFO] BUILD SUCCESS")
        runner.on(
            ["mvn", "test"],
            exit_code=1,
            effect=reports_in("target/surefire-reports", {
                "TEST-com.example.CalculatorTest.xml": junit_report(
                    "com.example.CalculatorTest",
                    [("testAdd", None), ("testDivideByZero", "Division by zero")],
                ),
            }),
        )

        result = await pipeline.run(job)

        assert result.status == JobStatus.COMPLETED
        assert result.exit_code == 0
        assert pipeline.context.state == PipelineState.EMITTED

        (document,) = _documents(output)
        assert document["status"] == "COMPLETED"
        assert document["exitCode"] == 0
        assert document["errorMessage"] is None
        assert [(t["testName"], t["passed"]) for t in document["testResults"]] == [
            ("testAdd", True),
            ("testDivideByZero", False),
        ]
        assert document["testResults"][1]["errorOutput"] == "Division by zero"
        assert document["compilationOutput"] == "[INFO] BUILD SUCCESS"
        assert "Detected build system: maven" in _messages(document, "INFO")

        assert runner.find("git", "clone") == [["git", "clone", REPO_URL, str(pipeline.context.repo_dir)]]
        assert runner.find("git", "checkout") == []

    @pytest.mark.asyncio
    async def test_plain_java_submission(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], effect=clone_with({
            "Calculator.java": CALCULATOR,
            "CalculatorTest.java": CALCULATOR_TEST,
        }))
        runner.on(["javac"], effect=_compile_classes("com.example.Calculator", "com.example.CalculatorTest"))
        runner.on(["java"], output="2 + 3 = 5")

        result = await pipeline.run(job)

        assert result.exit_code == 0
        assert runner.find("java") == [[
            "java", "-cp", str(pipeline.context.classes_dir), "com.example.CalculatorTest",
        ]]
        (document,) = _documents(output)
        assert document["testResults"][0]["testName"] == "com.example.CalculatorTest"
        assert document["testResults"][0]["passed"] is True
        assert "Detected build system: plain-java" in _messages(document, "INFO")

    @pytest.mark.asyncio
    async def test_specific_revision_is_checked_out(self, settings, runner, output):
        settings = settings.model_copy(update={"git_commit_hash": "3f2a9c1"})
        pipeline = GradingPipeline(settings, runner=runner, emitter=ResultEmitter(stream=output))
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))

        await pipeline.run(settings.to_grading_job())

        (checkout,) = runner.find("git", "checkout")
        assert checkout == ["git", "checkout", "3f2a9c1"]

    @pytest.mark.asyncio
    async def test_non_numeric_job_id(self, settings, runner, output):
        settings = settings.model_copy(update={"grading_job_id": "job-7"})
        pipeline = GradingPipeline(settings, runner=runner, emitter=ResultEmitter(stream=output))
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))

        await pipeline.run(settings.to_grading_job())

        (document,) = _documents(output)
        assert document["gradingJobId"] == 0
        assert any("job-7" in m for m in _messages(document, "WARNING"))

    @pytest.mark.asyncio
    async def test_code_extraction(self, settings, runner, output):
        settings = settings.model_copy(update={"include_code": True})
        pipeline = GradingPipeline(
            settings,
            runner=runner,
            emitter=ResultEmitter(stream=output, include_code=True),
        )
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))

        await pipeline.run(settings.to_grading_job())

        (document,) = _documents(output)
        assert document["extractedCode"] == CALCULATOR
        assert [f["filePath"] for f in document["codeFiles"]] == [
            "src/main/java/com/example/Calculator.java",
        ]
        assert any(m.startswith("```java") for m in _messages(document, "CODE"))


class TestFailedJobs:
    @pytest.mark.asyncio
    async def test_clone_failure(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], exit_code=128, output="fatal: repository not found")

        result = await pipeline.run(job)

        assert result.exit_code == 1
        (document,) = _documents(output)
        assert document["status"] == "FAILED"
        assert document["errorMessage"] == "Failed to clone repository within 300 seconds"
        assert document["testResults"] == []
        assert runner.find("mvn") == []

    @pytest.mark.asyncio
    async def test_clone_timeout(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], timed_out=True)

        result = await pipeline.run(job)

        assert result.exit_code == 1
        assert result.error_message == "Failed to clone repository within 300 seconds"

    @pytest.mark.asyncio
    async def test_missing_revision(self, settings, runner, output):
        settings = settings.model_copy(update={"git_commit_hash": "deadbeef"})
        pipeline = GradingPipeline(settings, runner=runner, emitter=ResultEmitter(stream=output))
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))
        runner.on(["git", "checkout"], exit_code=1, output="error: pathspec 'deadbeef' did not match")

        result = await pipeline.run(settings.to_grading_job())

        assert result.exit_code == 1
        assert result.error_message == "Failed to checkout commit: deadbeef"

    @pytest.mark.asyncio
    async def test_unsupported_toolchain(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], effect=clone_with({"README.md": "# Nothing to build"}))

        result = await pipeline.run(job)

        assert result.exit_code == 1
        (document,) = _documents(output)
        assert document["errorMessage"] == "Unsupported build system: unknown"
        assert "Detected build system: unknown" in _messages(document, "INFO")
        assert document["testResults"] == []

    @pytest.mark.asyncio
    async def test_compilation_failure(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], effect=clone_with({"Broken.java": "public class Broken {"}))
        runner.on(["javac"], exit_code=1, output="Broken.java:1: error: reached end of file while parsing")

        result = await pipeline.run(job)

        assert result.exit_code == 2
        assert runner.find("java") == []
        (document,) = _documents(output)
        assert document["status"] == "FAILED"
        assert document["exitCode"] == 2
        assert document["errorMessage"] == "Compilation failed"
        assert "reached end of file" in document["compilationOutput"]
        assert document["testResults"] == []

    @pytest.mark.asyncio
    async def test_maven_compilation_failure(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))
        runner.on(
            ["mvn", "clean"],
            exit_code=1,
            output="[ERROR] COMPILATION ERROR\n[ERROR] Calculator.java:[4,5] cannot find symbol",
        )

        result = await pipeline.run(job)

        assert result.exit_code == 2
        assert result.status == JobStatus.FAILED
        assert runner.find("mvn", "test") == []
        (document,) = _documents(output)
        assert document["exitCode"] == 2
        assert document["errorMessage"] == "Compilation failed"
        assert "cannot find symbol" in document["compilationOutput"]
        assert document["testResults"] == []
        assert "Maven compilation failed" in _messages(document, "ERROR")

    @pytest.mark.asyncio
    async def test_missing_repository_url(self, settings, runner, output):
        settings = settings.model_copy(update={"repo_url": None})
        pipeline = GradingPipeline(settings, runner=runner, emitter=ResultEmitter(stream=output))

        result = await pipeline.run(settings.to_grading_job())

        assert result.exit_code == 1
        assert result.error_message == "Repository URL is required"
        assert runner.commands == []

    @pytest.mark.asyncio
    async def test_configuration_error_is_reported(self, pipeline, runner, job, output):
        error = ConfigError("Invalid configuration: timeout_seconds: Input should be greater than 0")

        result = await pipeline.run(job, config_error=error)

        assert result.exit_code == 1
        assert result.error_message.startswith("Invalid configuration")
        assert runner.commands == []
        assert len(_documents(output)) == 1


class TestInterruption:
    @pytest.mark.asyncio
    async def test_interrupt_mid_test_emits_once(self, pipeline, runner, settings, job, output):
        unit_started = asyncio.Event()

        async def hang(command, cwd):
            unit_started.set()
            await asyncio.sleep(30)

        runner.on(["git", "clone"], effect=clone_with({
            "AddTest.java": "public class AddTest {}",
            "SlowTest.java": "public class SlowTest {}",
        }))
        runner.on(["javac"], effect=_compile_classes("AddTest", "SlowTest"))
        runner.on(["java", "-cp", str(settings.classes_dir), "AddTest"], output="ok")
        runner.on(["java", "-cp", str(settings.classes_dir), "SlowTest"], effect=hang)

        task = asyncio.create_task(pipeline.run(job))
        await asyncio.wait_for(unit_started.wait(), timeout=5)
        assert pipeline.interrupt("SIGINT") is True

        result = await asyncio.wait_for(task, timeout=5)

        assert result.exit_code == 130
        assert result.status == JobStatus.FAILED
        assert result.error_message == "Test runner interrupted"
        assert [t.test_name for t in result.test_results] == ["AddTest"]
        assert len(_documents(output)) == 1

    @pytest.mark.asyncio
    async def test_interrupt_after_emission_is_ignored(self, pipeline, runner, job, output):
        runner.on(["git", "clone"], effect=clone_with(MAVEN_PROJECT))

        await pipeline.run(job)

        assert pipeline.interrupt("SIGTERM") is False
        assert len(_documents(output)) == 1
