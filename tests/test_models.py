"""Tests for clamwrap Pydantic models."""

import pytest
from pydantic import ValidationError

from clamwrap.models import (
    ClamConfig,
    Executable,
    OutputLevel,
    RunResult,
    ScanResult,
    ScanStatus,
    StreamEvent,
    StreamSource,
)


class TestClamConfig:
    def test_defaults(self):
        config = ClamConfig()
        assert config.check is True
        assert config.daemonize is False
        assert config.output_level == OutputLevel.MEDIUM
        assert config.error_file_missing is True
        assert config.error_file_virus is False
        assert config.error_clamscan_missing is True
        assert config.error_clamscan_client_error is False
        assert config.timeout is None

    def test_scan_executable(self):
        assert ClamConfig().scan_executable == Executable.CLAMSCAN
        assert ClamConfig(daemonize=True).scan_executable == Executable.CLAMDSCAN

    def test_executable_path(self):
        config = ClamConfig(executable_path_freshclam="/usr/local/bin/freshclam")
        assert config.executable_path(Executable.FRESHCLAM) == "/usr/local/bin/freshclam"
        assert config.executable_path(Executable.CLAMSCAN) == "clamscan"

    def test_string_coercion(self):
        config = ClamConfig(daemonize="true", timeout="2.5", output_level="off")
        assert config.daemonize is True
        assert config.timeout == 2.5
        assert config.output_level == OutputLevel.OFF

    def test_invalid_output_level(self):
        with pytest.raises(ValidationError):
            ClamConfig(output_level="loud")


class TestScanResult:
    @pytest.mark.parametrize(
        "status, expected",
        [
            (ScanStatus.CLEAN, False),
            (ScanStatus.INFECTED, True),
            (ScanStatus.EXECUTION_ISSUE, True),
            (ScanStatus.SKIPPED, None),
        ],
    )
    def test_is_virus(self, status, expected):
        assert ScanResult(path="/f", status=status).is_virus is expected


class TestRunResult:
    def test_success(self):
        assert RunResult(executable=Executable.CLAMSCAN, return_code=0).success is True
        assert RunResult(executable=Executable.CLAMSCAN, return_code=1).success is False
        assert RunResult(executable=Executable.CLAMSCAN).success is False


class TestStreamEvent:
    def test_frozen(self):
        event = StreamEvent(source=StreamSource.OUTPUT, line="x\n")
        with pytest.raises(ValidationError):
            event.line = "y\n"
