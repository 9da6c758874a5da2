"""Locate development tools on PATH and read their versions."""

import shutil
import subprocess
from typing import Callable, List, Optional

from loguru import logger
from pydantic import BaseModel

DEFAULT_TOOLS = ["git", "curl", "unzip", "java", "flutter", "dart", "adb", "sdkmanager"]


class ToolStatus(BaseModel):
    name: str
    path: Optional[str] = None
    version: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.path is not None


class ToolProbe:
    """Checks for executables with shutil.which and asks each for its version."""

    def __init__(
        self,
        which: Callable[[str], Optional[str]] = shutil.which,
        timeout: float = 15.0,
    ):
        self.which = which
        self.timeout = timeout

    def version_of(self, path: str) -> Optional[str]:
        """First non-empty line of `<tool> --version` (stdout, else stderr)."""
        try:
            completed = subprocess.run(
                [path, "--version"], capture_output=True, text=True, timeout=self.timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Could not read version from {path}: {e}")
            return None
        for stream in (completed.stdout, completed.stderr):
            for line in (stream or "").splitlines():
                if line.strip():
                    return line.strip()
        return None

    def probe(self, name: str, with_version: bool = True) -> ToolStatus:
        path = self.which(name)
        if path is None:
            return ToolStatus(name=name)
        version = self.version_of(path) if with_version else None
        return ToolStatus(name=name, path=path, version=version)

    def probe_all(self, names: Optional[List[str]] = None) -> List[ToolStatus]:
        return [self.probe(name) for name in (names or DEFAULT_TOOLS)]
