"""
Gradle distribution fetch & unpack.

Downloads ``gradle-<version>-bin.zip`` from services.gradle.org into a
fresh temporary directory and unpacks it with ``unzip`` next to the
archive. The unpacked directory is named after the archive minus its
``-bin.zip`` suffix (``gradle-7.2-bin.zip`` → ``gradle-7.2``).
"""

from __future__ import annotations

import http.client
import logging
import shutil
import tempfile
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import urlparse

from wrapper_step.adapters.base import CommandRunner
from wrapper_step.core.errors import CommandFailedError, DownloadError
from wrapper_step.core.models.command import CommandResult

logger = logging.getLogger(__name__)

DISTRIBUTION_URL_FORMAT = "https://services.gradle.org/distributions/gradle-{version}-bin.zip"
TMP_DIR_PREFIX = "_generate_gradle_wrapper_"
UNZIP_BIN = "/usr/bin/unzip"

_CHUNK_SIZE = 64 * 1024

# Everything urlopen and reading its body can raise for a bad url or a broken transfer
_TRANSFER_ERRORS = (urllib.error.URLError, http.client.HTTPException, ValueError, OSError)


def distribution_url(version: str) -> str:
    """Download URL of the binary-only distribution for ``version``."""
    return DISTRIBUTION_URL_FORMAT.format(version=version)


def unpacked_dir_name(archive_name: str) -> str:
    """Strip the ``-bin`` + extension suffix from an archive file name.

    Names that do not follow the convention are returned unchanged.
    """
    suffix = "-bin" + Path(archive_name).suffix
    if archive_name.endswith(suffix):
        return archive_name[: -len(suffix)]
    return archive_name


def _close_quietly(resource, label: str) -> None:
    """Close ``resource``; a failure here is only worth a warning."""
    try:
        resource.close()
    except OSError as e:
        logger.warning("Failed to close (%s): %s", label, e)


def _remove_tmp_dir(tmp_dir: Path) -> None:
    try:
        shutil.rmtree(tmp_dir)
    except OSError as e:
        logger.warning("Failed to remove (%s): %s", tmp_dir, e)


def _fetch(url: str, tmp_path: Path, timeout: int) -> None:
    try:
        tmp_file = open(tmp_path, "wb")
    except OSError as e:
        raise DownloadError(f"failed to create ({tmp_path}), error: {e}") from e

    try:
        logger.info("Downloading %s", url)
        try:
            resp = urllib.request.urlopen(url, timeout=timeout)
        except _TRANSFER_ERRORS as e:
            raise DownloadError(f"failed to download from ({url}), error: {e}") from e

        try:
            shutil.copyfileobj(resp, tmp_file, _CHUNK_SIZE)
        except _TRANSFER_ERRORS as e:
            raise DownloadError(f"failed to download from ({url}), error: {e}") from e
        finally:
            _close_quietly(resp, f"{url} body")
    finally:
        _close_quietly(tmp_file, str(tmp_path))


def download_into_tmp_dir(url: str, *, timeout: int = 300) -> Path:
    """Fetch ``url`` into a new temporary directory.

    The directory is removed again when the download fails.

    Returns:
        Path of the downloaded file, named after the URL's last segment.

    Raises:
        DownloadError: On any network or local write failure.
    """
    name = Path(urlparse(url).path).name
    if not name:
        raise DownloadError(f"Cannot derive a file name from url: {url}")

    try:
        tmp_dir = Path(tempfile.mkdtemp(prefix=TMP_DIR_PREFIX))
    except OSError as e:
        raise DownloadError(f"failed to create tmp destination dir, error {e}") from e
    tmp_path = tmp_dir / name

    try:
        _fetch(url, tmp_path, timeout)
    except DownloadError:
        _remove_tmp_dir(tmp_dir)
        raise

    logger.info("Downloaded to %s", tmp_path)
    return tmp_path


def unzip_distribution(
    archive: Path,
    runner: CommandRunner,
    *,
    unzip_bin: str = UNZIP_BIN,
) -> Path:
    """Unpack ``archive`` in its own directory.

    Returns:
        Path of the unpacked distribution directory.

    Raises:
        CommandFailedError: If unzip is missing or exits non-zero.
    """
    parent_dir = archive.parent
    deploy_path = parent_dir / unpacked_dir_name(archive.name)

    command = [unzip_bin, archive.name]
    logger.info("$ %s", " ".join(command))
    if not runner.is_available(unzip_bin):
        raise CommandFailedError(
            f"Failed to unzip: {archive}",
            CommandResult.not_found(command, cwd=str(parent_dir)),
        )

    result = runner.run(command, cwd=parent_dir)
    if not result.ok:
        raise CommandFailedError(f"Failed to unzip: {archive}", result)

    logger.debug("Unpacked %s into %s", archive, deploy_path)
    return deploy_path


def fetch_distribution(
    version: str,
    runner: CommandRunner,
    *,
    timeout: int = 300,
) -> Path:
    """Download and unpack the Gradle distribution for ``version``."""
    archive = download_into_tmp_dir(distribution_url(version), timeout=timeout)
    return unzip_distribution(archive, runner)
