"""Pydantic v2 models for clamwrap."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Executable(str, Enum):
    CLAMSCAN = "clamscan"
    CLAMDSCAN = "clamdscan"
    FRESHCLAM = "freshclam"


class OutputLevel(str, Enum):
    OFF = "off"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StreamSource(str, Enum):
    OUTPUT = "output"
    ERROR = "error"


class ScanStatus(str, Enum):
    CLEAN = "clean"
    INFECTED = "infected"
    EXECUTION_ISSUE = "execution_issue"
    SKIPPED = "skipped"


class ClamConfig(BaseModel):
    """Configuration snapshot handed to the runner and scanner."""

    check: bool = True
    daemonize: bool = False
    fdpass: bool = False
    stream: bool = False
    datadir: Optional[str] = None
    config_file: Optional[str] = None
    output_level: OutputLevel = OutputLevel.MEDIUM

    error_clamscan_missing: bool = True
    error_clamscan_client_error: bool = False
    error_file_missing: bool = True
    error_file_virus: bool = False

    executable_path_clamscan: str = "clamscan"
    executable_path_clamdscan: str = "clamdscan"
    executable_path_freshclam: str = "freshclam"

    timeout: Optional[float] = None  # seconds; None waits forever
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def scan_executable(self) -> Executable:
        return Executable.CLAMDSCAN if self.daemonize else Executable.CLAMSCAN

    def executable_path(self, executable: Executable) -> str:
        return getattr(self, f"executable_path_{executable.value}")


class ToolInfo(BaseModel):
    """Resolved location of one of the ClamAV executables."""

    name: str
    display_name: str
    exe_name: str
    path: Optional[Path] = None
    installed: bool = False


class StreamEvent(BaseModel):
    """A single line read from the subprocess, tagged with its stream."""

    source: StreamSource
    line: str

    model_config = ConfigDict(frozen=True)


class RunResult(BaseModel):
    """Exit outcome of a single executable invocation.

    ``return_code`` is None when the process could not be launched or was
    killed after a timeout.
    """

    executable: Executable
    command: List[str] = Field(default_factory=list)
    return_code: Optional[int] = None
    launched: bool = False
    timed_out: bool = False
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.return_code == 0


class ScanResult(BaseModel):
    """Interpreted result of a scan."""

    path: str
    status: ScanStatus
    virus_type: Optional[str] = None
    return_code: Optional[int] = None

    @property
    def is_virus(self) -> Optional[bool]:
        """True for detections and tolerated execution issues, None if skipped."""
        if self.status == ScanStatus.SKIPPED:
            return None
        return self.status != ScanStatus.CLEAN


class VersionInfo(BaseModel):
    """Parsed ``clamscan --version`` output."""

    engine: str
    database: Optional[str] = None
    database_date: Optional[str] = None
    raw: str
