"""Runs one of the permitted ClamAV executables and streams its output.

The command line is built deterministically: caller arguments and default
arguments are merged as a set, sorted, and prefixed with the executable
path. stdout and stderr are drained by two tasks feeding a single
consumer, and all of them are joined before the exit status is reported.
"""

import asyncio
import logging
import sys
from datetime import datetime
from typing import Callable, List, Optional, Set, TextIO, Union

from .models import (
    ClamConfig,
    Executable,
    OutputLevel,
    RunResult,
    StreamEvent,
    StreamSource,
)
from .tool_manager import ToolManager

logger = logging.getLogger(__name__)

LineCallback = Callable[[StreamEvent], None]


class CommandRunner:
    """Spawns ClamAV executables with a validated, sorted argument list.

    Args:
        config: Configuration snapshot.
        tool_manager: Resolves executable paths; built from *config* if omitted.
        stdout: Sink for echoed output lines (defaults to sys.stdout).
        stderr: Sink for echoed error lines (defaults to sys.stderr).
    """

    def __init__(
        self,
        config: Optional[ClamConfig] = None,
        tool_manager: Optional[ToolManager] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.config = config or ClamConfig()
        self.tool_manager = tool_manager or ToolManager(self.config)
        self.stdout = stdout
        self.stderr = stderr
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def default_args(self) -> List[str]:
        args = []
        if self.config.daemonize and self.config.config_file:
            args.append(f"--config-file={self.config.config_file}")
        if self.config.output_level == OutputLevel.LOW:
            args.append("--quiet")
        elif self.config.output_level == OutputLevel.HIGH:
            args.append("--verbose")
        return args

    def build_command(self, executable: Union[str, Executable], *args: str) -> List[str]:
        """Build the full command line without running it.

        Raises:
            ConfigurationError: If *executable* is not permitted.
        """
        executable_path = self.tool_manager.resolve(executable)
        merged = set(args) | set(self.default_args())
        return [executable_path] + sorted(merged)

    async def run(
        self,
        executable: Union[str, Executable],
        *args: str,
        on_line: Optional[LineCallback] = None,
    ) -> RunResult:
        """Run *executable* with *args* and wait for it to finish.

        Launch failures and timeouts are recorded on the result with
        ``return_code=None``; they are never raised.
        """
        cmd = self.build_command(executable, *args)
        result = RunResult(executable=ToolManager.validate(executable), command=cmd)
        self.logger.info(f"Running {' '.join(cmd)}")

        result.started_at = datetime.now()
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            result.error_message = f"Failed to launch {cmd[0]}: {e}"
            self.logger.error(result.error_message)
            self._finish(result)
            return result

        result.launched = True
        try:
            result.return_code = await asyncio.wait_for(
                self._communicate(process, on_line),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError:
            result.timed_out = True
            result.error_message = f"{cmd[0]} timed out after {self.config.timeout}s"
            self.logger.error(result.error_message)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

        self._finish(result)
        self.logger.info(
            f"{result.executable.value} finished with exit code {result.return_code} "
            f"in {result.duration_seconds:.2f}s"
        )
        return result

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        on_line: Optional[LineCallback],
    ) -> int:
        queue: asyncio.Queue = asyncio.Queue()
        consumer = asyncio.create_task(self._consume(queue, on_line))
        try:
            _, _, return_code = await asyncio.gather(
                self._drain(process.stdout, StreamSource.OUTPUT, queue),
                self._drain(process.stderr, StreamSource.ERROR, queue),
                process.wait(),
            )
            await queue.put(None)
            await consumer
        finally:
            if not consumer.done():
                consumer.cancel()
        return return_code

    async def _drain(
        self,
        reader: Optional[asyncio.StreamReader],
        source: StreamSource,
        queue: asyncio.Queue,
    ) -> None:
        if reader is None:
            return
        while True:
            try:
                raw = await reader.readline()
            except ValueError as e:
                # readline already discarded the overlong line
                self.logger.debug(f"Skipped overlong {source.value} line: {e}")
                continue
            except OSError as e:
                self.logger.debug(f"Stopped reading {source.value} stream: {e}")
                return
            if not raw:
                return
            line = raw.decode("utf-8", errors="replace")
            await queue.put(StreamEvent(source=source, line=line))

    async def _consume(self, queue: asyncio.Queue, on_line: Optional[LineCallback]) -> None:
        broken_sinks: Set[StreamSource] = set()
        while True:
            event = await queue.get()
            if event is None:
                return
            self._echo(event, broken_sinks)
            if on_line is not None:
                on_line(event)

    def _echo(self, event: StreamEvent, broken_sinks: Set[StreamSource]) -> None:
        if self.config.output_level == OutputLevel.OFF or event.source in broken_sinks:
            return
        if event.source == StreamSource.OUTPUT:
            sink = self.stdout or sys.stdout
        else:
            sink = self.stderr or sys.stderr
        try:
            sink.write(event.line if event.line.endswith("\n") else event.line + "\n")
        except (OSError, ValueError) as e:
            # Echo errors only silence this sink; callbacks still run
            broken_sinks.add(event.source)
            self.logger.debug(f"Stopped echoing {event.source.value} stream: {e}")

    @staticmethod
    def _finish(result: RunResult) -> None:
        result.completed_at = datetime.now()
        if result.started_at:
            result.duration_seconds = (
                result.completed_at - result.started_at
            ).total_seconds()
