"""
Command result model — the outcome of one external process run.

Every external tool the step touches (gradle, unzip, envman) goes
through the command runner, which hands back one of these.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Conventional shell exit codes for "could not run at all"
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class CommandResult(BaseModel):
    """Exit status and combined output of a finished command."""

    command: list[str] = Field(default_factory=list)
    cwd: str | None = None
    exit_code: int = 0
    output: str = ""                # stdout + stderr, trimmed
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0

    @classmethod
    def not_found(cls, command: list[str], cwd: str | None = None) -> CommandResult:
        """Result for an executable that is not installed."""
        return cls(
            command=command,
            cwd=cwd,
            exit_code=EXIT_NOT_FOUND,
            output=f"Command not found: {command[0]}",
        )

    @property
    def printable(self) -> str:
        """The command line as it would be typed in a shell."""
        return " ".join(self.command)
