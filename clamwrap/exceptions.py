"""Exception hierarchy for clamwrap."""

from datetime import datetime


class ClamError(Exception):
    """Base exception for all clamwrap errors."""


class ConfigurationError(ClamError):
    """Raised when asked to run an executable outside the permitted set."""


class ClamscanMissing(ClamError):
    """Raised when the ClamAV executables cannot be run at all."""


class TransportError(ClamError):
    """Raised when clamdscan reports a client error (exit code 2).

    Only raised in daemon mode with ``error_clamscan_client_error`` enabled.
    """


class FileNotFound(ClamError):
    """Raised when the scan target does not exist."""


class VirusDetected(ClamError):
    """Raised when a scan finds a virus and ``error_file_virus`` is enabled.

    ``virus_type`` is an empty string when no signature line was reported.
    """

    def __init__(self, path: str, virus_type: str = ""):
        self.path = path
        self.virus_type = virus_type
        super().__init__(f"VIRUS DETECTED on {datetime.now()}: {path}")
