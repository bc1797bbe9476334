"""clamwrap: run the ClamAV command-line tools and interpret their results.

The module-level functions are synchronous wrappers around
:class:`ClamAVScanner`. Each call takes an explicit :class:`ClamConfig`
(defaults are used when omitted); nothing is stored at module level.
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

from .config import ConfigManager
from .exceptions import (
    ClamError,
    ClamscanMissing,
    ConfigurationError,
    FileNotFound,
    TransportError,
    VirusDetected,
)
from .models import (
    ClamConfig,
    Executable,
    OutputLevel,
    RunResult,
    ScanResult,
    ScanStatus,
    StreamEvent,
    StreamSource,
    ToolInfo,
    VersionInfo,
)
from .result_parser import ResultParser
from .runner import CommandRunner
from .scanner import ClamAVScanner
from .tool_manager import ToolManager

__all__ = [
    "ClamAVScanner",
    "ClamConfig",
    "ClamError",
    "ClamscanMissing",
    "CommandRunner",
    "ConfigManager",
    "ConfigurationError",
    "Executable",
    "FileNotFound",
    "OutputLevel",
    "ResultParser",
    "RunResult",
    "ScanResult",
    "ScanStatus",
    "StreamEvent",
    "StreamSource",
    "ToolInfo",
    "ToolManager",
    "TransportError",
    "VersionInfo",
    "VirusDetected",
    "freshclam",
    "safe",
    "scan",
    "version",
    "virus",
]


def scan(path: Union[str, Path], config: Optional[ClamConfig] = None) -> Optional[bool]:
    """Return True if *path* is (treated as) infected, False if clean, None if skipped."""
    result = asyncio.run(ClamAVScanner(config).scan(path))
    return result.is_virus


virus = scan


def safe(path: Union[str, Path], config: Optional[ClamConfig] = None) -> Optional[bool]:
    """Inverse of :func:`scan`; None when the file was skipped."""
    value = scan(path, config)
    if value is None:
        return None
    return not value


def freshclam(config: Optional[ClamConfig] = None) -> RunResult:
    return asyncio.run(ClamAVScanner(config).freshclam())


def version(config: Optional[ClamConfig] = None) -> Optional[str]:
    return asyncio.run(ClamAVScanner(config).version())
