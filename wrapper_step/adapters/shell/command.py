"""
Shell command runner — execute external tools and capture output.

stdout and stderr are merged into one stream so a failure message
shows exactly what the tool printed, in order.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from wrapper_step.adapters.base import CommandRunner
from wrapper_step.core.models.command import EXIT_NOT_FOUND, EXIT_TIMEOUT, CommandResult

logger = logging.getLogger(__name__)


class ShellCommandRunner(CommandRunner):
    """Run commands with ``subprocess.run`` (no shell interpolation)."""

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self, program: str) -> bool:
        return shutil.which(program) is not None

    def run(
        self,
        command: list[str],
        *,
        cwd: str | Path | None = None,
        stdin: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        cwd_str = str(cwd) if cwd is not None else None
        logger.debug("Executing: %s (cwd=%s)", " ".join(command), cwd_str)
        start = time.monotonic()

        try:
            proc = subprocess.run(
                command,
                cwd=cwd_str,
                input=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            return CommandResult(
                command=command,
                cwd=cwd_str,
                exit_code=EXIT_NOT_FOUND,
                output=f"Command not found: {e}",
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=command,
                cwd=cwd_str,
                exit_code=EXIT_TIMEOUT,
                output=f"Command timed out after {timeout}s",
            )
        except OSError as e:
            return CommandResult(
                command=command,
                cwd=cwd_str,
                exit_code=EXIT_NOT_FOUND,
                output=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (proc.stdout or "").strip()
        logger.debug("Exit code %d after %dms", proc.returncode, elapsed_ms)

        return CommandResult(
            command=command,
            cwd=cwd_str,
            exit_code=proc.returncode,
            output=output,
            duration_ms=elapsed_ms,
        )
