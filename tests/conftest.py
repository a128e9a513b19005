"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from wrapper_step.core.config.loader import INPUT_KEYS

TEMPLATE_PROPERTIES = (
    "#Mon Dec 28 10:00:20 PST 2015\n"
    "distributionBase=GRADLE_USER_HOME\n"
    "distributionPath=wrapper/dists\n"
    "zipStoreBase=GRADLE_USER_HOME\n"
    "zipStorePath=wrapper/dists\n"
    "distributionUrl=https\\://services.gradle.org/distributions/gradle-2.10-all.zip\n"
)


@pytest.fixture(autouse=True)
def clean_step_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's step inputs out of every test."""
    for key in INPUT_KEYS:
        monkeypatch.delenv(key, raising=False)
    for key in ("WRAPPER_STEP_LOG_LEVEL", "WRAPPER_STEP_LOG_FILE", "WRAPPER_STEP_LOG_FILE_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def android_project(tmp_path: Path) -> Path:
    """A two-module Android project without a wrapper."""
    root = tmp_path / "project"
    (root / "app").mkdir(parents=True)
    (root / "lib" / "core").mkdir(parents=True)
    (root / "build.gradle").write_text("buildscript {}\n")
    (root / "settings.gradle").write_text("include ':app', ':lib:core'\n")
    (root / "app" / "build.gradle").write_text("apply plugin: 'com.android.application'\n")
    (root / "lib" / "core" / "build.gradle").write_text("apply plugin: 'java'\n")
    return root


@pytest.fixture
def sdk_home(tmp_path: Path) -> Path:
    """An Android SDK home carrying the gradle wrapper template."""
    home = tmp_path / "android-sdk"
    template = home / "tools" / "templates" / "gradle" / "wrapper"
    wrapper = template / "gradle" / "wrapper"
    wrapper.mkdir(parents=True)

    gradlew = template / "gradlew"
    gradlew.write_text("#!/usr/bin/env sh\nexec java -jar gradle/wrapper/gradle-wrapper.jar \"$@\"\n")
    gradlew.chmod(0o755)
    (template / "gradlew.bat").write_text("@rem gradle startup script for Windows\r\n")
    (wrapper / "gradle-wrapper.jar").write_bytes(b"PK\x03\x04fake-jar")
    (wrapper / "gradle-wrapper.properties").write_text(TEMPLATE_PROPERTIES)
    return home
