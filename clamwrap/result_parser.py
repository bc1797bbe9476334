"""Parsing utilities for ClamAV output formats."""

import logging
import re
from typing import Optional

from .models import VersionInfo

logger = logging.getLogger(__name__)

# Detection lines: "/path/to/file: Win.Test.EICAR FOUND"
SIGNATURE_PATTERN = re.compile(r": ([\w.-]+) FOUND\Z")


class ResultParser:
    """Utility functions for parsing clamscan/clamdscan output."""

    @staticmethod
    def match_signature(line: str) -> Optional[str]:
        """Return the signature name if *line* is a detection line."""
        match = SIGNATURE_PATTERN.search(line.rstrip("\r\n"))
        if match:
            return match.group(1)
        return None

    @staticmethod
    def parse_version(text: Optional[str]) -> Optional[VersionInfo]:
        """Parse "ClamAV 1.0.0/26934/Mon Jun  5 07:23:50 2023" style strings."""
        if not text:
            return None
        text = text.strip()
        if not text.startswith("ClamAV "):
            logger.debug(f"Unrecognized version string: {text!r}")
            return None

        parts = text[len("ClamAV "):].split("/", 2)
        return VersionInfo(
            engine=parts[0].strip(),
            database=parts[1].strip() if len(parts) > 1 else None,
            database_date=parts[2].strip() if len(parts) > 2 else None,
            raw=text,
        )
