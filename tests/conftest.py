"""
Pytest configuration and shared fixtures for leakskit tests.
"""

import io
import os
import tarfile
import zipfile
from pathlib import Path
from typing import Dict

import pytest

# Fake gitleaks: answers its version subcommand, records scan arguments in
# $FAKE_GITLEAKS_ARGS and exits with $FAKE_GITLEAKS_EXIT.
FAKE_GITLEAKS_SCRIPT = """#!/bin/sh
if [ "$1" = "version" ] || [ "$1" = "--version" ]; then
    echo "v0.0.0-fake"
    exit 0
fi
if [ -n "$FAKE_GITLEAKS_ARGS" ]; then
    printf '%s\\n' "$@" > "$FAKE_GITLEAKS_ARGS"
fi
exit "${FAKE_GITLEAKS_EXIT:-0}"
"""


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """
    Keep tests away from the real runner environment.

    Removes workflow and input variables, points LEAKSKIT_HOME into tmp_path
    and lets monkeypatch restore PATH after installers prepend to it.
    """
    for name in list(os.environ):
        if name.startswith(("INPUT_", "GITHUB_")) or name in (
            "GITLEAKS_CONFIG",
            "FAKE_GITLEAKS_ARGS",
            "FAKE_GITLEAKS_EXIT",
        ):
            monkeypatch.delenv(name, raising=False)

    monkeypatch.setenv("LEAKSKIT_HOME", str(tmp_path / "leakskit-home"))
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))

    yield


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from leakskit.core.platform import clear_platform_cache

    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))
    monkeypatch.delenv("LEAKSKIT_HOME", raising=False)

    return fake_home


# ============================================================================
# Release Artifacts
# ============================================================================


def make_tar_gz(files: Dict[str, bytes], mode: int = 0o755) -> bytes:
    """Build a gzipped tarball in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def make_zip(files: Dict[str, bytes]) -> bytes:
    """Build a zip archive in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def gitleaks_tarball() -> bytes:
    """8.x style release archive containing the fake gitleaks."""
    return make_tar_gz(
        {
            "gitleaks": FAKE_GITLEAKS_SCRIPT.encode(),
            "LICENSE": b"MIT",
            "README.md": b"gitleaks",
        }
    )


class FakeDownloader:
    """
    Stand-in for download_file serving canned payloads by URL.

    Unknown URLs raise DownloadError, like a 404 would.
    """

    def __init__(self, payloads: Dict[str, bytes]):
        self.payloads = payloads
        self.calls = []

    def __call__(self, url, destination, progress_callback=None, **kwargs):
        from leakskit.core.download import DownloadError

        self.calls.append(url)
        if url not in self.payloads:
            raise DownloadError(f"Download failed for {url}: 404 Not Found")

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.payloads[url])
        return destination


@pytest.fixture
def fake_downloader():
    """Factory for FakeDownloader instances."""
    return FakeDownloader


@pytest.fixture
def build_tar_gz():
    """Factory building .tar.gz payloads."""
    return make_tar_gz


@pytest.fixture
def build_zip():
    """Factory building .zip payloads."""
    return make_zip


@pytest.fixture
def fake_gitleaks_script() -> str:
    """Shell script impersonating gitleaks."""
    return FAKE_GITLEAKS_SCRIPT
