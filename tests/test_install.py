"""Tests for downloading and unpacking the bundled ffmpeg build."""

from __future__ import annotations

import io
import logging
import os
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Any

import pytest
import requests

from lumix_ffmpeg.binaries import binary_filename, bundled_ffmpeg_path
from lumix_ffmpeg.binaries import install as install_module
from lumix_ffmpeg.binaries.install import BinaryInstaller, platform_key
from lumix_ffmpeg.config import InstallConfig
from lumix_ffmpeg.core import InstallError

API_URL = InstallConfig().release_api_url
ARCHIVE_ROOT = "ffmpeg-master-latest-linux64-gpl"


class DummyResponse:
    def __init__(
        self,
        url: str,
        *,
        payload: Any = None,
        body: bytes = b"",
        status_code: int = 200,
    ) -> None:
        self.url = url
        self._payload = payload
        self._body = body
        self.status_code = status_code
        self.headers = {"content-length": str(len(body))}

    def json(self) -> Any:
        if self._payload is None:
            msg = "No JSON object could be decoded"
            raise ValueError(msg)
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            msg = f"HTTP {self.status_code}"
            raise requests.HTTPError(msg)

    def iter_content(self, chunk_size: int = 1) -> Any:
        for start in range(0, len(self._body), chunk_size):
            yield self._body[start : start + chunk_size]

    def __enter__(self) -> DummyResponse:
        return self

    def __exit__(self, *_exc: object) -> None:
        return None


class DummySession:
    """Maps requested URLs to canned responses or exceptions."""

    def __init__(self, routes: dict[str, DummyResponse | Exception]) -> None:
        self.routes = routes
        self.headers: dict[str, str] = {}
        self.max_redirects = 30
        self.requested: list[str] = []

    def get(self, url: str, **_kwargs: Any) -> DummyResponse:
        self.requested.append(url)
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        return route


def _tar_archive(mode: str) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tf:
        for name, data in [(f"{ARCHIVE_ROOT}/bin/ffmpeg", b"#!fake ffmpeg"), (f"{ARCHIVE_ROOT}/LICENSE.txt", b"GPL")]:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def _zip_archive() -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(f"{ARCHIVE_ROOT}/bin/{binary_filename()}", b"fake ffmpeg")
        zf.writestr(f"{ARCHIVE_ROOT}/doc/README.txt", b"docs")
    return buffer.getvalue()


def _installer(tmp_path: Path, routes: dict[str, DummyResponse | Exception], key: str = "linux-x64") -> BinaryInstaller:
    return BinaryInstaller(
        InstallConfig(),
        bin_dir=tmp_path / "bin",
        session=DummySession(routes),  # type: ignore[arg-type]
        key=key,
        show_progress=False,
    )


def _release(*names: str) -> dict[str, Any]:
    return {"assets": [{"name": n, "browser_download_url": f"https://example.test/{n}"} for n in names]}


@pytest.mark.parametrize(
    ("system", "machine", "expected"),
    [("Linux", "x86_64", "linux-x64"), ("Darwin", "arm64", "darwin-arm64"), ("Linux", "aarch64", "linux-arm64")],
)
def test_platform_key(monkeypatch: pytest.MonkeyPatch, system: str, machine: str, expected: str) -> None:
    monkeypatch.setattr(sys, "platform", system.lower())
    monkeypatch.setattr(install_module.platform, "system", lambda: system)
    monkeypatch.setattr(install_module.platform, "machine", lambda: machine)

    assert platform_key() == expected


def test_platform_key_windows(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setattr(install_module.platform, "machine", lambda: "AMD64")

    assert platform_key() == "win32-x64"


def test_find_download_url_matches_asset_name(tmp_path: Path) -> None:
    release = _release(
        "checksums.sha256",
        "ffmpeg-master-latest-win64-gpl.zip",
        "ffmpeg-master-latest-linux64-gpl.tar.xz",
    )
    installer = _installer(tmp_path, {API_URL: DummyResponse(API_URL, payload=release)})

    assert installer.find_download_url() == "https://example.test/ffmpeg-master-latest-linux64-gpl.tar.xz"


def test_find_download_url_uses_pattern_pass(tmp_path: Path) -> None:
    """Names without a plain matcher still hit the per-platform pattern."""
    release = _release("notes.txt", "ffmpeg-n7.1-win-x64-lgpl.zip")
    installer = _installer(tmp_path, {API_URL: DummyResponse(API_URL, payload=release)}, key="win32-x64")

    assert installer.find_download_url() == "https://example.test/ffmpeg-n7.1-win-x64-lgpl.zip"


def test_find_download_url_falls_back_on_api_error(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {API_URL: requests.ConnectionError("offline")})

    assert installer.find_download_url() == InstallConfig().fallback_urls["linux-x64"]


def test_find_download_url_falls_back_on_bad_json(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {API_URL: DummyResponse(API_URL, payload=None)})

    assert installer.find_download_url() == InstallConfig().fallback_urls["linux-x64"]


def test_find_download_url_falls_back_without_match(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {API_URL: DummyResponse(API_URL, payload=_release("checksums.sha256"))})

    assert installer.find_download_url() == InstallConfig().fallback_urls["linux-x64"]


def test_unknown_platform_installs_nothing(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {API_URL: DummyResponse(API_URL, payload=_release())}, key="sunos-sparc")

    assert installer.install() is None
    assert not installer.binary_path.exists()


def test_session_is_configured(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {})

    assert installer.session.headers["User-Agent"] == "ffmpeg-binaries-installer"
    assert installer.session.max_redirects == 5


@pytest.mark.parametrize(("suffix", "mode"), [(".tar.xz", "w:xz"), (".tar.gz", "w:gz"), (".tgz", "w:gz")])
@pytest.mark.skipif(sys.platform == "win32", reason="tar builds ship the POSIX binary name")
def test_install_from_tarball(tmp_path: Path, suffix: str, mode: str) -> None:
    url = f"https://example.test/{ARCHIVE_ROOT}{suffix}"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release(f"{ARCHIVE_ROOT}{suffix}")),
            url: DummyResponse(url, body=_tar_archive(mode)),
        },
    )

    binary = installer.install()

    assert binary == tmp_path / "bin" / "ffmpeg"
    assert binary.read_bytes() == b"#!fake ffmpeg"
    assert os.access(binary, os.X_OK)
    assert not (tmp_path / "bin" / f"{ARCHIVE_ROOT}{suffix}").exists()
    assert bundled_ffmpeg_path(tmp_path / "bin") == binary


def test_install_from_zip_after_redirect(tmp_path: Path) -> None:
    """The archive type is taken from the final URL."""
    final_url = f"https://objects.example.test/{ARCHIVE_ROOT}.zip"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release("win64")),
            "https://example.test/win64": DummyResponse(final_url, body=_zip_archive()),
        },
        key="win32-x64",
    )
    binary = installer.install()

    assert binary == tmp_path / "bin" / binary_filename()
    assert binary.read_bytes() == b"fake ffmpeg"


def test_unsupported_archive_is_left_for_manual_handling(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    url = "https://evermeet.cx/ffmpeg/ffmpeg-8.0.7z"
    installer = _installer(
        tmp_path,
        {API_URL: requests.ConnectionError("offline"), url: DummyResponse(url, body=b"7z archive")},
        key="darwin-arm64",
    )

    with caplog.at_level(logging.WARNING):
        assert installer.install() is None

    assert (tmp_path / "bin" / "ffmpeg.tmp").read_bytes() == b"7z archive"
    assert any("not a supported archive" in r.message for r in caplog.records)


def test_corrupt_archive_is_reported_without_raising(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    url = f"https://example.test/{ARCHIVE_ROOT}.tar.xz"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release(f"{ARCHIVE_ROOT}.tar.xz")),
            url: DummyResponse(url, body=b"junk"),
        },
    )

    with caplog.at_level(logging.ERROR):
        assert installer.install() is None

    assert any("Failed to extract" in r.message for r in caplog.records)


def test_archive_without_binary_is_reported(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("docs/README.txt", b"no binary here")
    url = "https://example.test/ffmpeg-win64.zip"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release("ffmpeg-win64.zip")),
            url: DummyResponse(url, body=buffer.getvalue()),
        },
        key="win32-x64",
    )

    with caplog.at_level(logging.WARNING):
        assert installer.install() is None

    assert any("not found after extraction" in r.message for r in caplog.records)


def test_http_error_status_raises(tmp_path: Path) -> None:
    url = f"https://example.test/{ARCHIVE_ROOT}.tar.xz"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release(f"{ARCHIVE_ROOT}.tar.xz")),
            url: DummyResponse(url, status_code=404),
        },
    )

    with pytest.raises(InstallError, match="HTTP 404"):
        installer.install()


def test_too_many_redirects_raises(tmp_path: Path) -> None:
    url = f"https://example.test/{ARCHIVE_ROOT}.tar.xz"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release(f"{ARCHIVE_ROOT}.tar.xz")),
            url: requests.TooManyRedirects("Exceeded 5 redirects."),
        },
    )

    with pytest.raises(InstallError, match="Too many redirects"):
        installer.install()


def test_existing_binary_skips_download(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {})
    installer.bin_dir.mkdir(parents=True)
    installer.binary_path.write_bytes(b"already here")

    assert installer.install() == installer.binary_path
    assert installer.session.requested == []  # type: ignore[attr-defined]


def test_move_binary_finds_nested_executable(tmp_path: Path) -> None:
    installer = _installer(tmp_path, {})
    nested = installer.bin_dir / "build" / "bin"
    nested.mkdir(parents=True)
    (nested / binary_filename()).write_bytes(b"nested")

    assert installer.move_binary() == installer.binary_path
    assert installer.binary_path.read_bytes() == b"nested"
    assert not (nested / binary_filename()).exists()


def test_forced_reinstall_keeps_binary_when_download_fails(tmp_path: Path) -> None:
    installer = _installer(
        tmp_path,
        {
            API_URL: requests.ConnectionError("offline"),
            InstallConfig().fallback_urls["linux-x64"]: requests.ConnectionError("offline"),
        },
    )
    installer.bin_dir.mkdir(parents=True)
    installer.binary_path.write_bytes(b"working")

    with pytest.raises(InstallError):
        installer.install(force=True)

    assert installer.binary_path.read_bytes() == b"working"
    assert [p.name for p in installer.bin_dir.iterdir()] == [binary_filename()]


def test_forced_reinstall_keeps_binary_when_archive_is_unusable(tmp_path: Path) -> None:
    url = "https://evermeet.cx/ffmpeg/ffmpeg-8.0.7z"
    installer = _installer(
        tmp_path,
        {API_URL: requests.ConnectionError("offline"), url: DummyResponse(url, body=b"7z archive")},
        key="darwin-arm64",
    )
    installer.bin_dir.mkdir(parents=True)
    installer.binary_path.write_bytes(b"working")

    assert installer.install(force=True) is None
    assert installer.binary_path.read_bytes() == b"working"


@pytest.mark.skipif(sys.platform == "win32", reason="tar builds ship the POSIX binary name")
def test_forced_reinstall_replaces_binary(tmp_path: Path) -> None:
    url = f"https://example.test/{ARCHIVE_ROOT}.tar.xz"
    installer = _installer(
        tmp_path,
        {
            API_URL: DummyResponse(API_URL, payload=_release(f"{ARCHIVE_ROOT}.tar.xz")),
            url: DummyResponse(url, body=_tar_archive("w:xz")),
        },
    )
    installer.bin_dir.mkdir(parents=True)
    installer.binary_path.write_bytes(b"old build")

    assert installer.install(force=True) == installer.binary_path
    assert installer.binary_path.read_bytes() == b"#!fake ffmpeg"
    assert not installer.binary_path.with_name("ffmpeg.bak").exists()
