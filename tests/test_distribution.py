"""
Tests for Gradle distribution download and unpacking.
"""

import http.client
import io
import urllib.error
from pathlib import Path

import pytest

from wrapper_step.adapters.mock import MockCommandRunner
from wrapper_step.core.errors import CommandFailedError, DownloadError
from wrapper_step.core.services import distribution
from wrapper_step.core.services.distribution import (
    distribution_url,
    download_into_tmp_dir,
    fetch_distribution,
    unpacked_dir_name,
    unzip_distribution,
)


class _FakeResponse(io.BytesIO):
    """urlopen response stand-in that remembers being closed."""

    closed_count = 0

    def close(self) -> None:
        if not self.closed:
            _FakeResponse.closed_count += 1
        super().close()


def _tmp_dirs(root: Path) -> list[Path]:
    return sorted(root.glob("_generate_gradle_wrapper_*"))


@pytest.fixture
def tmp_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route tempfile.mkdtemp into the test's tmp_path."""
    monkeypatch.setattr(distribution.tempfile, "tempdir", str(tmp_path))
    return tmp_path


class TestNaming:
    def test_distribution_url(self):
        assert distribution_url("7.2") == "https://services.gradle.org/distributions/gradle-7.2-bin.zip"

    def test_strips_bin_suffix(self):
        assert unpacked_dir_name("gradle-7.2-bin.zip") == "gradle-7.2"

    def test_other_names_unchanged(self):
        assert unpacked_dir_name("gradle-7.2-all.zip") == "gradle-7.2-all.zip"


class TestDownload:
    def test_downloads_into_prefixed_tmp_dir(self, tmp_root: Path, monkeypatch: pytest.MonkeyPatch):
        _FakeResponse.closed_count = 0
        seen = {}

        def fake_urlopen(url, timeout=None):
            seen["url"], seen["timeout"] = url, timeout
            return _FakeResponse(b"zip-bytes")

        monkeypatch.setattr(distribution.urllib.request, "urlopen", fake_urlopen)

        path = download_into_tmp_dir(distribution_url("7.2"), timeout=42)

        assert path.name == "gradle-7.2-bin.zip"
        assert path.parent.name.startswith("_generate_gradle_wrapper_")
        assert path.read_bytes() == b"zip-bytes"
        assert seen["timeout"] == 42
        assert _FakeResponse.closed_count == 1

    def test_network_error(self, tmp_root: Path, monkeypatch: pytest.MonkeyPatch):
        def fake_urlopen(url, timeout=None):
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(distribution.urllib.request, "urlopen", fake_urlopen)

        with pytest.raises(DownloadError, match="failed to download"):
            download_into_tmp_dir(distribution_url("7.2"))
        assert _tmp_dirs(tmp_root) == []

    def test_body_closed_on_read_error(self, tmp_root: Path, monkeypatch: pytest.MonkeyPatch):
        _FakeResponse.closed_count = 0

        class _Broken(_FakeResponse):
            def read(self, *args):
                raise OSError("connection reset")

        monkeypatch.setattr(
            distribution.urllib.request, "urlopen", lambda url, timeout=None: _Broken(b"")
        )

        with pytest.raises(DownloadError):
            download_into_tmp_dir(distribution_url("7.2"))
        assert _FakeResponse.closed_count == 1
        assert _tmp_dirs(tmp_root) == []

    def test_truncated_body(self, tmp_root: Path, monkeypatch: pytest.MonkeyPatch):
        _FakeResponse.closed_count = 0

        class _Truncated(_FakeResponse):
            def read(self, *args):
                raise http.client.IncompleteRead(b"PK", 1024)

        monkeypatch.setattr(
            distribution.urllib.request, "urlopen", lambda url, timeout=None: _Truncated(b"")
        )

        with pytest.raises(DownloadError, match="bytes read"):
            download_into_tmp_dir(distribution_url("7.2"))
        assert _FakeResponse.closed_count == 1
        assert _tmp_dirs(tmp_root) == []

    def test_invalid_url(self, tmp_root: Path, monkeypatch: pytest.MonkeyPatch):
        def fake_urlopen(url, timeout=None):
            raise http.client.InvalidURL(f"URL can't contain control characters. {url!r}")

        monkeypatch.setattr(distribution.urllib.request, "urlopen", fake_urlopen)

        with pytest.raises(DownloadError, match="control characters"):
            download_into_tmp_dir(distribution_url("7 2"))
        assert _tmp_dirs(tmp_root) == []

    def test_unknown_url_type(self, tmp_root: Path):
        with pytest.raises(DownloadError, match="unknown url type"):
            download_into_tmp_dir("distributions/gradle-7.2-bin.zip")
        assert _tmp_dirs(tmp_root) == []

    def test_url_without_file_name(self, tmp_root: Path):
        with pytest.raises(DownloadError, match="Cannot derive"):
            download_into_tmp_dir("https://services.gradle.org/")


class TestUnzip:
    def test_runs_unzip_next_to_archive(self, tmp_path: Path):
        archive = tmp_path / "gradle-7.2-bin.zip"
        archive.write_bytes(b"")
        runner = MockCommandRunner()

        deploy = unzip_distribution(archive, runner)

        assert deploy == tmp_path / "gradle-7.2"
        call = runner.call_log[0]
        assert call.command == ["/usr/bin/unzip", "gradle-7.2-bin.zip"]
        assert call.cwd == str(tmp_path)

    def test_unzip_failure(self, tmp_path: Path):
        archive = tmp_path / "gradle-7.2-bin.zip"
        runner = MockCommandRunner()
        runner.set_failure("unzip", output="End-of-central-directory signature not found", exit_code=9)

        with pytest.raises(CommandFailedError, match="End-of-central-directory"):
            unzip_distribution(archive, runner)

    def test_unzip_missing(self, tmp_path: Path):
        archive = tmp_path / "gradle-7.2-bin.zip"
        runner = MockCommandRunner()
        runner.set_missing("unzip")

        with pytest.raises(CommandFailedError, match="Command not found: /usr/bin/unzip"):
            unzip_distribution(archive, runner)
        assert runner.call_count == 0

    def test_fetch_distribution(self, tmp_root: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(
            distribution.urllib.request, "urlopen", lambda url, timeout=None: _FakeResponse(b"z")
        )
        runner = MockCommandRunner()

        deploy = fetch_distribution("7.2", runner)

        assert deploy.name == "gradle-7.2"
        assert deploy.parent.name.startswith("_generate_gradle_wrapper_")
        assert runner.calls_to("unzip")
