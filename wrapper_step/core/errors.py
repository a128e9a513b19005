"""
Step errors — one exception type per failure category.

Services raise these; the CLI is the only place that catches them,
prints the message and exits non-zero. Nothing here is retried.
"""

from __future__ import annotations

from wrapper_step.core.models.command import CommandResult


class StepError(Exception):
    """Base class for every fatal step failure."""

    category = "step"


class ConfigError(StepError):
    """Missing or invalid step input."""

    category = "config"


class DiscoveryError(StepError):
    """A file or directory the step relies on could not be found."""

    category = "discovery"


class CommandFailedError(StepError):
    """An external command exited non-zero.

    The captured combined output is part of the message so that the
    pipeline log shows what the tool printed.
    """

    category = "command"

    def __init__(self, message: str, result: CommandResult):
        self.result = result
        super().__init__(
            f"{message}\n$ {result.printable}\n"
            f"exit code: {result.exit_code}, output:\n{result.output}"
        )


class DownloadError(StepError):
    """Fetching a distribution archive failed."""

    category = "download"


class PostconditionError(StepError):
    """A command reported success but its expected output is absent."""

    category = "postcondition"


class ExportError(StepError):
    """Publishing an output to the pipeline environment failed."""

    category = "export"
