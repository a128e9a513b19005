"""
Android SDK license provisioner.

SDK tooling refuses to use some components until their license has
been accepted, which it records as a hash file under
``<ANDROID_HOME>/licenses``. Files are written once and never
overwritten: an existing file may hold a different, still valid hash.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from wrapper_step.core.errors import StepError

logger = logging.getLogger(__name__)

LICENSES_DIR_NAME = "licenses"

LICENSE_HASHES = MappingProxyType({
    "android-sdk-license": "\n8933bad161af4178b1185d1a37fbf41ea5269c55",
    "android-sdk-preview-license": "\n84831b9409646a918e30573bab4c9c91346d8abd",
    "intel-android-extra-license": "\nd975f751698a77b662f1254ddbeed3901e976f5a",
})


@dataclass
class LicenseReport:
    """Which acceptance files were written and which were already there."""

    licenses_dir: Path
    created: list[str] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "licenses_dir": str(self.licenses_dir),
            "created": self.created,
            "existing": self.existing,
        }


def ensure_licenses(android_home: Path) -> LicenseReport:
    """Make sure every known license acceptance file exists.

    Raises:
        StepError: If the directory or a file cannot be created.
    """
    licenses_dir = Path(android_home) / LICENSES_DIR_NAME
    report = LicenseReport(licenses_dir=licenses_dir)

    if not licenses_dir.is_dir():
        logger.info("licenses dir not exist, generating...")
        try:
            licenses_dir.mkdir(mode=0o777)
        except OSError as e:
            raise StepError(f"Failed to create dir at: {licenses_dir}, error: {e}") from e

    for license_id in sorted(LICENSE_HASHES):
        license_path = licenses_dir / license_id
        if license_path.exists():
            logger.info("%s exist", license_id)
            report.existing.append(license_id)
            continue

        logger.info("%s not exist, generating...", license_id)
        try:
            license_path.write_text(LICENSE_HASHES[license_id], encoding="utf-8")
        except OSError as e:
            raise StepError(f"Failed to write license {license_path}, error: {e}") from e
        logger.info("%s generated", license_id)
        report.created.append(license_id)

    return report
