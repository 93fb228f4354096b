from typing import Optional, Dict, List, Sequence
from dataclasses import dataclass
from pathlib import Path
import asyncio
import os
import shlex

from grading_runner.common.config.logging_config import get_logger
from grading_runner.common.utils.time_utils import Timer


logger = get_logger(__name__)

SPAWN_FAILURE_EXIT_CODE = 127
PIPE_GRACE_SECONDS = 5.0


@dataclass(frozen=True)
class CommandResult:
    command: List[str]
    exit_code: Optional[int]
    output: str
    timed_out: bool = False
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.timed_out and self.exit_code == 0

    @property
    def duration_ms(self) -> int:
        return int(round(self.duration_seconds * 1000))

    @property
    def display_command(self) -> str:
        return shlex.join(self.command)


class CommandRunner:
    def __init__(self, env: Optional[Dict[str, str]] = None):
        self._env = self._setup_environment(env)

    def _setup_environment(self, overrides: Optional[Dict[str, str]]) -> Dict[str, str]:
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        if overrides:
            env.update(overrides)
        return env

    async def run(
        self,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        command = [str(part) for part in cmd]
        logger.debug(f"Running command: {shlex.join(command)} (timeout={timeout})")

        timer = Timer().start()
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(cwd) if cwd else None,
                env=self._env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            logger.warning(f"Failed to spawn {command[0]}: {exc}")
            return CommandResult(
                command=command,
                exit_code=SPAWN_FAILURE_EXIT_CODE,
                output=str(exc),
                duration_seconds=timer.stop(),
            )

        chunks: List[bytes] = []

        async def consume_output() -> None:
            assert process.stdout is not None
            while True:
                chunk = await process.stdout.read(65536)
                if not chunk:
                    break
                chunks.append(chunk)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None
        reader = asyncio.create_task(consume_output())
        timed_out = False

        try:
            await asyncio.wait_for(process.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            # wait() also blocks on the pipes, so the child may already be gone
            if process.returncode is None:
                timed_out = True
                await self._kill(process)
        except asyncio.CancelledError:
            await self._kill(process)
            reader.cancel()
            raise

        if deadline is None or timed_out:
            drain_timeout = PIPE_GRACE_SECONDS
        else:
            drain_timeout = max(0.0, deadline - loop.time())

        try:
            await asyncio.wait_for(reader, timeout=drain_timeout)
        except asyncio.TimeoutError:
            # a background grandchild still holds the pipe open
            reader.cancel()

        output = b"".join(chunks).decode("utf-8", errors="replace")
        result = CommandResult(
            command=command,
            exit_code=process.returncode,
            output=output,
            timed_out=timed_out,
            duration_seconds=timer.stop(),
        )

        if timed_out:
            logger.warning(f"Command timed out after {timeout}s: {result.display_command}")
        else:
            logger.debug(f"Command exited with {result.exit_code}: {result.display_command}")

        return result

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        try:
            await asyncio.wait_for(process.wait(), timeout=PIPE_GRACE_SECONDS)
        except asyncio.TimeoutError:
            logger.warning(f"Process {process.pid} output still open after kill")
