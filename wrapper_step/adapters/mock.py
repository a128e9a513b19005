"""
Mock command runner — test double for every external tool.

Used by the test-suite to exercise the pipeline
without gradle, unzip or envman installed. Returns success by default;
responses and side effects can be configured per program name
(the basename of ``command[0]``).
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from wrapper_step.adapters.base import CommandRunner
from wrapper_step.core.models.command import CommandResult


@dataclass
class MockCall:
    """One recorded invocation."""

    command: list[str]
    cwd: str | None
    stdin: str | None

    @property
    def program(self) -> str:
        return os.path.basename(self.command[0]) if self.command else ""


SideEffect = Callable[[MockCall], None]


class MockCommandRunner(CommandRunner):
    """Universal mock runner for testing.

    By default every command exits 0 with ``default_output``.
    """

    def __init__(
        self,
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, tuple[int, str]] = {}
        self._side_effects: dict[str, SideEffect] = {}
        self._call_log: list[MockCall] = []
        self._missing: set[str] = set()

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[MockCall]:
        """All calls this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_to(self, program: str) -> list[MockCall]:
        """Recorded calls whose executable basename is ``program``."""
        return [c for c in self._call_log if c.program == program]

    def is_available(self, program: str) -> bool:
        if os.path.basename(program) in self._missing:
            return False
        return self._available

    def set_missing(self, program: str) -> None:
        """Report ``program`` as not installed."""
        self._missing.add(program)

    def set_response(self, program: str, exit_code: int = 0, output: str = "") -> None:
        """Set a canned exit code and output for ``program``."""
        self._responses[program] = (exit_code, output)

    def set_failure(self, program: str, output: str = "Mock failure", exit_code: int = 1) -> None:
        """Configure ``program`` to fail."""
        self._responses[program] = (exit_code, output)

    def set_side_effect(self, program: str, effect: SideEffect) -> None:
        """Run ``effect`` (e.g. create files) whenever ``program`` is called."""
        self._side_effects[program] = effect

    def reset(self) -> None:
        """Clear call log and configured responses."""
        self._responses.clear()
        self._side_effects.clear()
        self._missing.clear()
        self._call_log.clear()

    def run(
        self,
        command: list[str],
        *,
        cwd: str | Path | None = None,
        stdin: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        call = MockCall(
            command=list(command),
            cwd=str(cwd) if cwd is not None else None,
            stdin=stdin,
        )
        self._call_log.append(call)

        effect = self._side_effects.get(call.program)
        if effect is not None:
            effect(call)

        exit_code, output = self._responses.get(call.program, (0, self._default_output))
        return CommandResult(
            command=call.command,
            cwd=call.cwd,
            exit_code=exit_code,
            output=output,
        )
