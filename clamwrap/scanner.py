"""ClamAV scanner: runs clamscan/clamdscan/freshclam and interprets the results.

clamscan and clamdscan return 0 when nothing is found and 1 when a virus is
found. clamdscan also returns 2 for any client error. For backward
compatibility, exit code 2 and launch failures count as a detection unless
``error_clamscan_client_error`` is enabled in daemon mode.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO, Union

from .exceptions import ClamscanMissing, FileNotFound, TransportError, VirusDetected
from .models import (
    ClamConfig,
    Executable,
    RunResult,
    ScanResult,
    ScanStatus,
    StreamEvent,
    StreamSource,
    VersionInfo,
)
from .result_parser import ResultParser
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class SignatureCollector:
    """Line callback that remembers the last signature reported on stdout."""

    def __init__(self):
        self.virus_type: Optional[str] = None

    def __call__(self, event: StreamEvent) -> None:
        if event.source != StreamSource.OUTPUT:
            return
        virus_type = ResultParser.match_signature(event.line)
        if virus_type:
            self.virus_type = virus_type


class ClamAVScanner:
    """Scan files, check the version and update definitions via the ClamAV CLI."""

    def __init__(
        self,
        config: Optional[ClamConfig] = None,
        runner: Optional[CommandRunner] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.config = config or ClamConfig()
        self.runner = runner or CommandRunner(self.config, stdout=stdout, stderr=stderr)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._checked = False

    async def scan(self, path: Union[str, Path]) -> ScanResult:
        """Scan *path* and interpret the outcome.

        Raises:
            FileNotFound: If *path* is missing and ``error_file_missing`` is set.
            VirusDetected: If a virus is found and ``error_file_virus`` is set.
            TransportError: On a clamdscan client error in strict daemon mode.
            ClamscanMissing: If the availability check fails.
        """
        path = str(path)
        if not self.file_exists(path):
            return ScanResult(path=path, status=ScanStatus.SKIPPED)

        await self._ensure_available()

        collector = SignatureCollector()
        run = await self.runner.run(
            self.config.scan_executable,
            *self.scan_args(path),
            on_line=collector,
        )
        return self.interpret_scan(path, run.return_code, collector.virus_type)

    def scan_args(self, path: str) -> List[str]:
        args = [path, "--no-summary"]
        if self.config.daemonize:
            if self.config.fdpass:
                args.append("--fdpass")
            if self.config.stream:
                args.append("--stream")
        if self.config.datadir:
            args.append(f"--database={self.config.datadir}")
        return args

    def interpret_scan(
        self,
        path: str,
        return_code: Optional[int],
        virus_type: Optional[str] = None,
    ) -> ScanResult:
        """Map an exit code and captured signature to a ScanResult.

        ``return_code`` is None when the scanner could not be run at all.
        """
        if return_code == 0:
            return ScanResult(path=path, status=ScanStatus.CLEAN, return_code=0)

        if return_code is None or return_code == 2:
            if self.config.daemonize and self.config.error_clamscan_client_error:
                raise TransportError("Clamscan client error")
            self.logger.warning(
                f"Scanner could not complete on {path} (exit code {return_code}), "
                f"reporting as found"
            )
            return ScanResult(
                path=path,
                status=ScanStatus.EXECUTION_ISSUE,
                virus_type=virus_type,
                return_code=return_code,
            )

        if self.config.error_file_virus:
            raise VirusDetected(path=path, virus_type=virus_type or "")

        self.logger.warning(f"Virus detected in {path}: {virus_type}")
        return ScanResult(
            path=path,
            status=ScanStatus.INFECTED,
            virus_type=virus_type,
            return_code=return_code,
        )

    async def freshclam(self) -> RunResult:
        """Update the virus definitions. The exit status is the only signal."""
        args = []
        if self.config.datadir:
            args.append(f"--datadir={self.config.datadir}")
        result = await self.runner.run(Executable.FRESHCLAM, *args)
        if not result.success:
            self.logger.warning(f"freshclam exited with code {result.return_code}")
        return result

    async def version(self) -> Optional[str]:
        """Return the ClamAV version line, or None if it cannot be determined."""
        last_line: Optional[str] = None

        def capture(event: StreamEvent) -> None:
            nonlocal last_line
            if event.source == StreamSource.OUTPUT:
                last_line = event.line

        result = await self.runner.run(
            self.config.scan_executable, "--version", on_line=capture
        )
        if last_line is not None and result.success:
            return last_line.rstrip("\r\n")
        return None

    async def version_info(self) -> Optional[VersionInfo]:
        return ResultParser.parse_version(await self.version())

    def file_exists(self, path: str) -> bool:
        if Path(path).exists():
            return True

        if self.config.error_file_missing:
            raise FileNotFound(f"File not found: {path}")
        self.logger.warning(f"FILE NOT FOUND on {datetime.now()}: {path}")
        return False

    async def _ensure_available(self) -> None:
        if not self.config.check or self._checked:
            return
        self._checked = True
        if await self.version():
            return

        if self.config.error_clamscan_missing:
            raise ClamscanMissing("Clamscan application not found. Check your installation and path.")
        self.logger.warning("ClamAV not found, continuing without availability check")
