"""
Output exporter — publishes values to later pipeline steps via envman.
"""

from __future__ import annotations

import logging

from wrapper_step.adapters.base import CommandRunner
from wrapper_step.core.errors import ExportError

logger = logging.getLogger(__name__)

ENVMAN_BIN = "envman"
GRADLEW_PATH_KEY = "GRADLEW_PATH"


def export_env(key: str, value: str, runner: CommandRunner) -> None:
    """Run ``envman add --key KEY`` with the value on stdin.

    Raises:
        ExportError: If envman cannot be run or exits non-zero.
    """
    if not runner.is_available(ENVMAN_BIN):
        raise ExportError(f"Failed to export {key}: {ENVMAN_BIN} not found")

    result = runner.run([ENVMAN_BIN, "add", "--key", key], stdin=value)
    if not result.ok:
        raise ExportError(
            f"Failed to export {key} with envman (exit code {result.exit_code}): {result.output}"
        )
    logger.info("Exported %s=%s", key, value)
