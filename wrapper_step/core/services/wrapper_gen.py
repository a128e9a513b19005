"""
Gradle wrapper generation.

Two ways to produce ``gradlew`` and ``gradle/wrapper/*``:

- ``generate_with_command``: run ``gradle wrapper --gradle-version V``.
  Needs a working Gradle on the host.
- ``generate_from_template``: copy the wrapper template bundled with
  the Android SDK and point its distribution URL at version V. Needs
  only an SDK install (and its license files).
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from wrapper_step.adapters.base import CommandRunner
from wrapper_step.core.errors import (
    CommandFailedError,
    DiscoveryError,
    PostconditionError,
    StepError,
)
from wrapper_step.core.models.command import CommandResult
from wrapper_step.core.services.licenses import ensure_licenses

logger = logging.getLogger(__name__)

DISTRIBUTION_URL_KEY = "distributionUrl"
WRAPPER_DISTRIBUTION_URL_FORMAT = (
    r"distributionUrl=https\://services.gradle.org/distributions/gradle-{version}-all.zip"
)
WRAPPER_PROPERTIES = Path("gradle") / "wrapper" / "gradle-wrapper.properties"


def sdk_wrapper_template_dir(android_home: Path) -> Path:
    return Path(android_home) / "tools" / "templates" / "gradle" / "wrapper"


# ── Properties patching ─────────────────────────────────────────


def rewrite_distribution_url(content: str, version: str) -> str:
    """Point the ``distributionUrl`` line at the ``-all`` zip of ``version``.

    Only lines starting with the key are replaced. Every other line,
    including its line terminator, is kept as is.
    """
    new_line = WRAPPER_DISTRIBUTION_URL_FORMAT.format(version=version)
    updated: list[str] = []
    for line in content.splitlines(keepends=True):
        if line.startswith(DISTRIBUTION_URL_KEY):
            body = line.rstrip("\r\n")
            line = new_line + line[len(body):]
        updated.append(line)
    return "".join(updated)


def update_wrapper_properties(properties_path: Path, version: str) -> None:
    """Rewrite the distribution URL of a ``gradle-wrapper.properties`` file.

    Raises:
        StepError: If the file cannot be read or written.
    """
    try:
        content = properties_path.read_text(encoding="utf-8")
    except OSError as e:
        raise StepError(f"Failed to read {properties_path}, error: {e}") from e

    try:
        properties_path.write_text(rewrite_distribution_url(content, version), encoding="utf-8")
    except OSError as e:
        raise StepError(f"Failed to update gradle-wrapper.properties, error: {e}") from e

    logger.info("Set %s to gradle-%s-all.zip", DISTRIBUTION_URL_KEY, version)


# ── Command-driven generation ───────────────────────────────────


def generate_with_command(
    runner: CommandRunner,
    gradlew_path: Path,
    version: str,
    *,
    gradle_bin: str = "gradle",
) -> Path:
    """Run ``gradle wrapper`` next to the root build file.

    gradle writes the wrapper into its working directory, so it runs in
    ``gradlew_path.parent``.

    Raises:
        CommandFailedError: If gradle is missing or exits non-zero.
        PostconditionError: If gradle succeeded but ``gradlew_path`` is absent.
    """
    command = [gradle_bin, "wrapper", "--gradle-version", version]
    build_dir = gradlew_path.parent
    logger.info("$ %s", " ".join(command))

    if not runner.is_available(gradle_bin):
        raise CommandFailedError(
            "Failed to generate Gradle Wrapper",
            CommandResult.not_found(command, cwd=str(build_dir)),
        )

    result = runner.run(command, cwd=build_dir)
    if not result.ok:
        raise CommandFailedError("Failed to generate Gradle Wrapper", result)
    logger.debug("gradle output:\n%s", result.output)

    if not gradlew_path.exists():
        raise PostconditionError(
            f"gradle wrapper finished successfully but no gradlew found at: {gradlew_path}"
        )
    return gradlew_path


# ── Template-driven generation ──────────────────────────────────


def generate_from_template(android_home: Path, gradlew_path: Path, version: str) -> Path:
    """Assemble the wrapper from the Android SDK's bundled template.

    Creates ``gradle/`` next to ``gradlew_path``; an existing one is an
    error, this only ever generates from scratch.

    Raises:
        DiscoveryError: If the SDK has no wrapper template.
        StepError: On any copy or write failure.
    """
    template_dir = sdk_wrapper_template_dir(android_home)
    if not template_dir.is_dir():
        raise DiscoveryError(f"gradle wrapper template not exists at: {template_dir}")

    logger.info("Ensure Android SDK Licenses")
    ensure_licenses(android_home)

    logger.info("Generate Gradle Wrapper from %s", template_dir)
    root_dir = gradlew_path.parent

    for script in ("gradlew", "gradlew.bat"):
        src = template_dir / script
        if script == "gradlew.bat" and not src.exists():
            logger.debug("Template has no %s, skipping", script)
            continue
        dst = root_dir / script
        try:
            shutil.copy2(src, dst)
        except OSError as e:
            raise StepError(f"Failed to copy {script} from: {src} to: {dst}, error: {e}") from e

    gradle_dir = root_dir / "gradle"
    try:
        gradle_dir.mkdir(mode=0o777)
    except OSError as e:
        raise StepError(f"Failed to create: {gradle_dir}, error: {e}") from e

    wrapper_src = template_dir / "gradle" / "wrapper"
    try:
        shutil.copytree(wrapper_src, gradle_dir / "wrapper")
    except (OSError, shutil.Error) as e:
        raise StepError(f"Failed to copy: {wrapper_src} to {gradle_dir}, error: {e}") from e

    update_wrapper_properties(root_dir / WRAPPER_PROPERTIES, version)
    return gradlew_path
