"""
Generate use case — the whole wrapper step, start to finish.

    validate inputs → locate root build file → wrapper present? done.
    → [fetch distribution] → generate (command | template) → export

Every failure surfaces as a ``StepError``; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from wrapper_step.adapters.base import CommandRunner
from wrapper_step.core.config.loader import validate_config
from wrapper_step.core.models.config import StepConfig
from wrapper_step.core.services.build_files import locate_root_build_file
from wrapper_step.core.services.distribution import fetch_distribution
from wrapper_step.core.services.envman import GRADLEW_PATH_KEY, export_env
from wrapper_step.core.services.wrapper_gen import (
    generate_from_template,
    generate_with_command,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Outcome of a step run."""

    gradlew_path: Path
    root_build_file: Path
    mode: str
    generated: bool = False
    exported: bool = False
    candidates: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "gradlew_path": str(self.gradlew_path),
            "root_build_file": str(self.root_build_file),
            "mode": self.mode,
            "generated": self.generated,
            "exported": self.exported,
            "candidates": [str(p) for p in self.candidates],
            "warnings": self.warnings,
        }


def run_generate(config: StepConfig, runner: CommandRunner) -> GenerateResult:
    """Ensure a Gradle wrapper exists for the configured project.

    Args:
        config: Step inputs; validated here before anything else happens.
        runner: Runs gradle, unzip and envman.

    Raises:
        StepError: Any fatal failure, see ``wrapper_step.core.errors``.
    """
    validate_config(config)

    project_root = Path(config.project_root_dir).resolve()
    located = locate_root_build_file(project_root)
    gradlew_path = located.gradlew_path

    result = GenerateResult(
        gradlew_path=gradlew_path,
        root_build_file=located.path,
        mode=config.generation_mode,
        candidates=located.candidates,
        warnings=list(located.warnings),
    )

    if gradlew_path.exists():
        logger.info("Gradle Wrapper exist at: %s", gradlew_path)
        return result

    if config.generation_mode == "template":
        generate_from_template(Path(config.android_home), gradlew_path, config.gradle_version)
    else:
        gradle_bin = config.gradle_bin
        if config.download_distribution:
            dist_dir = fetch_distribution(
                config.gradle_version, runner, timeout=config.download_timeout
            )
            gradle_bin = str(dist_dir / "bin" / "gradle")
        generate_with_command(
            runner,
            gradlew_path,
            config.gradle_version,
            gradle_bin=gradle_bin,
        )
    result.generated = True

    if config.export_outputs:
        export_env(GRADLEW_PATH_KEY, str(gradlew_path), runner)
        result.exported = True
    else:
        logger.info("Skipping %s export", GRADLEW_PATH_KEY)

    logger.info("Gradle Wrapper generated: %s", gradlew_path)
    return result
