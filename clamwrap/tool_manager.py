"""Registry of the permitted ClamAV executables and their resolved locations."""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ConfigurationError
from .models import ClamConfig, Executable, ToolInfo

logger = logging.getLogger(__name__)

# Static metadata for the permitted executables. Paths come from
# ClamConfig.executable_path_<name>.
DEFAULT_TOOLS: list[dict[str, Any]] = [
    {
        "name": Executable.CLAMSCAN.value,
        "display_name": "ClamAV scanner",
        "exe_name": "clamscan",
    },
    {
        "name": Executable.CLAMDSCAN.value,
        "display_name": "ClamAV daemon client",
        "exe_name": "clamdscan",
    },
    {
        "name": Executable.FRESHCLAM.value,
        "display_name": "FreshClam",
        "exe_name": "freshclam",
    },
]


class ToolManager:
    """Resolves ClamAV executables.

    Only members of :class:`Executable` are known; any other name raises
    ConfigurationError. The configured path is used as-is when launching,
    so a bare command name is looked up on PATH by the OS.
    """

    def __init__(self, config: Optional[ClamConfig] = None):
        self.config = config or ClamConfig()
        self._tools: Dict[str, ToolInfo] = {}
        self._register_default_tools()

    def _register_default_tools(self) -> None:
        for tool_def in DEFAULT_TOOLS:
            self._tools[tool_def["name"]] = ToolInfo(**tool_def)

    @staticmethod
    def validate(executable: Union[str, Executable]) -> Executable:
        """Return the Executable member for *executable* or raise ConfigurationError."""
        try:
            return Executable(executable)
        except ValueError:
            raise ConfigurationError(f"`{executable}` is not permitted") from None

    def resolve(self, executable: Union[str, Executable]) -> str:
        """Return the configured path for a permitted executable."""
        return self.config.executable_path(self.validate(executable))

    def check_tool(self, tool_name: Union[str, Executable]) -> ToolInfo:
        """Check if a tool is installed and resolve its path."""
        executable = self.validate(tool_name)
        tool = self._tools[executable.value]
        configured = self.config.executable_path(executable)

        candidate = Path(configured)
        if candidate.is_file():
            tool.path = candidate.resolve()
            tool.installed = True
            logger.debug(f"{tool.display_name}: found at configured path {tool.path}")
            return tool

        system_path = shutil.which(configured)
        if system_path:
            tool.path = Path(system_path).resolve()
            tool.installed = True
            logger.debug(f"{tool.display_name}: found on PATH at {tool.path}")
            return tool

        tool.installed = False
        tool.path = None
        logger.debug(f"{tool.display_name}: not found ({configured})")
        return tool

    def check_all_tools(self) -> Dict[str, ToolInfo]:
        """Check all registered tools. Returns dict of name -> ToolInfo."""
        return {name: self.check_tool(name) for name in self._tools}
