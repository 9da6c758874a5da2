"""External command execution with a dry-run mode."""

import shlex
import subprocess
from typing import Dict, List, Optional, Sequence

from loguru import logger
from pydantic import BaseModel


class CommandResult(BaseModel):
    """Outcome of one external command."""

    command: List[str]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def display(self) -> str:
        return shlex.join(self.command)


class CommandError(Exception):
    """A command exited non-zero, could not be started, or timed out."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(
            f"Command failed with exit code {returncode}: {shlex.join(self.command)}{detail}"
        )


class CommandRunner:
    """
    Runs commands through subprocess and keeps a history of what was run.

    In dry-run mode commands are logged and recorded with exit code 0 but
    never executed.
    """

    def __init__(
        self,
        dry_run: bool = False,
        timeout: float = 900.0,
        env: Optional[Dict[str, str]] = None,
    ):
        self.dry_run = dry_run
        self.timeout = timeout
        self.env = env
        self.history: List[CommandResult] = []

    def run(
        self,
        command: Sequence[str],
        input: Optional[str] = None,
        cwd: Optional[str] = None,
        check: bool = True,
    ) -> CommandResult:
        command = [str(part) for part in command]
        logger.info(f"$ {shlex.join(command)}")

        if self.dry_run:
            result = CommandResult(command=command, dry_run=True)
            self.history.append(result)
            return result

        try:
            completed = subprocess.run(
                command,
                input=input,
                cwd=cwd,
                env=self.env,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CommandError(command, 127, str(e))
        except subprocess.TimeoutExpired:
            raise CommandError(command, 124, f"timed out after {self.timeout:g}s")

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        self.history.append(result)
        if result.stdout.strip():
            logger.debug(result.stdout.strip())
        if check and not result.ok:
            raise CommandError(command, result.returncode, result.stderr)
        return result
