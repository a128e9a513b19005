"""
Adapter base — the contract between the step and external tools.

The step never calls ``subprocess`` directly: gradle, unzip and envman
are all run through a ``CommandRunner``. Tests swap in
``MockCommandRunner``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from wrapper_step.core.models.command import CommandResult


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners run a command to completion and return a CommandResult.
    They NEVER raise for a failing command: a non-zero exit, a missing
    executable or a timeout all come back as a result with a non-zero
    ``exit_code``. Callers decide whether that is fatal.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self, program: str) -> bool:
        """Check if ``program`` can be executed by this runner."""

    @abstractmethod
    def run(
        self,
        command: list[str],
        *,
        cwd: str | Path | None = None,
        stdin: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run ``command`` synchronously and capture combined output."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
