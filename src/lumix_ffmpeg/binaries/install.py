"""Download a prebuilt ffmpeg into the package ``bin`` directory."""

from __future__ import annotations

import argparse
import logging
import platform
import re
import shutil
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
from tqdm import tqdm

from ..config import InstallConfig, get_config
from ..config.constants import BINARY_MODE, HTTP_OK
from ..core.base import InstallError
from . import DEFAULT_BIN_DIR, binary_filename

LOG = logging.getLogger(__name__)

# Second pass over the release assets when no name matcher hit
_ASSET_PATTERNS = {
    "win32-x64": re.compile(r"win.*64.*\.zip$", re.IGNORECASE),
    "linux-x64": re.compile(r"linux.*64.*\.(tar\.xz|tar\.gz|tgz)$", re.IGNORECASE),
    "darwin-arm64": re.compile(r"darwin|mac|osx|arm64", re.IGNORECASE),
}

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def platform_key() -> str:
    """Return the ``<os>-<arch>`` key used to pick a build, e.g. ``linux-x64``."""
    system = "win32" if sys.platform == "win32" else platform.system().lower()
    machine = platform.machine().lower()
    return f"{system}-{_ARCH_ALIASES.get(machine, machine)}"


def _archive_kind(url: str) -> str | None:
    """Classify a download by its final URL."""
    path = urlparse(url).path.lower()
    if path.endswith(".zip") or ".zip" in url.lower():
        return "zip"
    if path.endswith((".tar.gz", ".tgz")):
        return "tar.gz"
    if path.endswith((".tar.xz", ".xz")):
        return "tar.xz"
    return None


class BinaryInstaller:
    """
    Fetch a static ffmpeg build for the running platform.

    The download URL comes from the GitHub release API of the BtbN builds,
    falling back to a fixed per-platform URL when the API cannot be used.
    The archive is extracted into ``bin_dir`` and the ``ffmpeg`` executable
    is moved to ``bin_dir/ffmpeg`` (``ffmpeg.exe`` on Windows).
    """

    def __init__(
        self,
        config: InstallConfig | None = None,
        bin_dir: Path | None = None,
        session: requests.Session | None = None,
        key: str | None = None,
        *,
        show_progress: bool = True,
    ) -> None:
        self.config = config or get_config().install
        self.bin_dir = bin_dir or get_config().binary.bin_dir or DEFAULT_BIN_DIR
        self.key = key or platform_key()
        self.show_progress = show_progress

        self.session = session or requests.Session()
        self.session.max_redirects = self.config.max_redirects
        self.session.headers.update({"User-Agent": self.config.user_agent})

    @property
    def binary_path(self) -> Path:
        """Final location of the installed executable."""
        return self.bin_dir / binary_filename()

    def fallback_url(self) -> str | None:
        """Return the fixed download URL for this platform, if any."""
        return self.config.fallback_urls.get(self.key)

    def find_download_url(self) -> str | None:
        """Ask the release API for an asset matching this platform."""
        try:
            response = self.session.get(self.config.release_api_url, timeout=self.config.timeout)
            response.raise_for_status()
            release = response.json()
        except (requests.RequestException, ValueError) as e:
            LOG.warning("Release API lookup failed, using fallback URL: %s", e)
            return self.fallback_url()

        url = self._match_asset(release)
        if url:
            return url

        LOG.info("No matching release asset for %s, using fallback URL", self.key)
        return self.fallback_url()

    def _match_asset(self, release: Any) -> str | None:
        assets = release.get("assets") if isinstance(release, dict) else None
        if not isinstance(assets, list):
            return None

        matchers = self.config.asset_matchers.get(self.key, [])
        for asset in assets:
            name = str(asset.get("name") or "").lower()
            if any(m in name for m in matchers) and asset.get("browser_download_url"):
                return asset["browser_download_url"]

        pattern = _ASSET_PATTERNS.get(self.key)
        if pattern is None:
            return None
        for asset in assets:
            if pattern.search(str(asset.get("name") or "")) and asset.get("browser_download_url"):
                return asset["browser_download_url"]
        return None

    def install(self, *, force: bool = False) -> Path | None:
        """
        Install ffmpeg unless it is already present.

        With ``force`` the existing binary is set aside and only discarded once
        a new one is in place; it is restored when the reinstall fails.

        Returns:
            Path of the installed binary, or None when no build exists for the
            platform or the archive could not be unpacked

        Raises:
            InstallError: if the download itself fails

        """
        self.bin_dir.mkdir(parents=True, exist_ok=True)

        backup = None
        if self.binary_path.exists():
            if not force:
                LOG.info("FFmpeg already installed at %s", self.binary_path)
                return self.binary_path
            backup = self.binary_path.with_name(f"{self.binary_path.name}.bak")
            self.binary_path.replace(backup)

        installed = None
        try:
            installed = self._fetch_binary()
        finally:
            if backup is not None:
                if installed is None:
                    LOG.warning("Reinstall failed, keeping the previous FFmpeg at %s", self.binary_path)
                    backup.replace(self.binary_path)
                else:
                    backup.unlink(missing_ok=True)
        return installed

    def _fetch_binary(self) -> Path | None:
        LOG.info("Resolving download URL for %s (using GitHub Releases API)", self.key)
        url = self.find_download_url()
        if not url:
            LOG.warning("No prebuilt FFmpeg available for %s.", self.key)
            return None

        LOG.info("Downloading FFmpeg for %s from %s...", self.key, url)
        self.download_and_extract(url)

        if not self.binary_path.exists():
            LOG.warning("FFmpeg binary not available at %s after install", self.binary_path)
            return None

        try:
            self.binary_path.chmod(BINARY_MODE)
        except OSError as e:
            LOG.debug("chmod failed for %s: %s", self.binary_path, e)

        LOG.info("FFmpeg ready at %s", self.binary_path)
        return self.binary_path

    def download(self, url: str) -> tuple[Path, str]:
        """
        Stream ``url`` into ``bin_dir``.

        Returns:
            The downloaded file and the final URL after redirects

        """
        try:
            response = self.session.get(url, stream=True, timeout=self.config.timeout)
        except requests.TooManyRedirects as e:
            msg = f"Too many redirects for {url}"
            raise InstallError(msg, cause=e) from e
        except requests.RequestException as e:
            msg = f"Download failed for {url}: {e}"
            raise InstallError(msg, cause=e) from e

        with response:
            final_url = response.url or url
            if response.status_code != HTTP_OK:
                msg = f"HTTP {response.status_code}: {final_url}"
                raise InstallError(msg)

            name = Path(urlparse(final_url).path).name or "ffmpeg.download"
            target = self.bin_dir / name
            total = int(response.headers.get("content-length", 0) or 0)

            try:
                with (
                    target.open("wb") as f,
                    tqdm(
                        total=total or None,
                        desc=f"Downloading {name}",
                        unit="B",
                        unit_scale=True,
                        unit_divisor=1024,
                        disable=not self.show_progress,
                    ) as progress,
                ):
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            f.write(chunk)
                            progress.update(len(chunk))
            except requests.RequestException as e:
                msg = f"Download interrupted for {final_url}: {e}"
                raise InstallError(msg, cause=e) from e

        return target, final_url

    def download_and_extract(self, url: str) -> None:
        """Download ``url`` and unpack it, leaving unknown formats for manual handling."""
        archive, final_url = self.download(url)
        kind = _archive_kind(final_url)

        if kind is None:
            raw = archive.with_name("ffmpeg.tmp")
            archive.replace(raw)
            LOG.warning(
                "Downloaded file %s is not a supported archive (.zip, .tar.gz, .tar.xz). "
                "Please extract it manually into %s",
                raw,
                self.bin_dir,
            )
            return

        try:
            self._extract(archive, kind)
        except (zipfile.BadZipFile, tarfile.TarError, OSError, EOFError) as e:
            LOG.error("Failed to extract %s: %s", archive, e)  # noqa: TRY400
            return

        self.move_binary()
        archive.unlink(missing_ok=True)

    def _extract(self, archive: Path, kind: str) -> None:
        LOG.info("Extracting %s", archive.name)
        if kind == "zip":
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(self.bin_dir)
            return

        mode = "r:gz" if kind == "tar.gz" else "r:xz"
        with tarfile.open(archive, mode) as tf:
            if hasattr(tarfile, "data_filter"):
                tf.extractall(self.bin_dir, filter="data")
            else:
                tf.extractall(self.bin_dir)  # noqa: S202

    def _find_binary(self, directory: Path) -> Path | None:
        targets = {"ffmpeg.exe", "ffmpeg"} if sys.platform == "win32" else {"ffmpeg"}
        for entry in sorted(directory.iterdir()):
            if entry.is_file() and entry.name in targets:
                return entry
            if entry.is_dir():
                found = self._find_binary(entry)
                if found:
                    return found
        return None

    def move_binary(self) -> Path | None:
        """Locate the extracted executable and move it to :attr:`binary_path`."""
        try:
            found = self._find_binary(self.bin_dir)
        except OSError as e:
            LOG.error("Failed to search %s for ffmpeg: %s", self.bin_dir, e)  # noqa: TRY400
            return None

        if found is None:
            LOG.warning("FFmpeg binary not found after extraction.")
            return None
        if found == self.binary_path:
            return found

        try:
            found.replace(self.binary_path)
        except OSError:
            LOG.debug("Rename failed for %s, copying instead", found)
            try:
                shutil.copyfile(found, self.binary_path)
            except OSError as e:
                LOG.error("Failed to move %s to %s: %s", found, self.binary_path, e)  # noqa: TRY400
                return None

        LOG.debug("Moved %s to %s", found, self.binary_path)
        return self.binary_path


def main(argv: list[str] | None = None) -> int:
    """Install ffmpeg from the command line (``python -m lumix_ffmpeg.binaries.install``)."""
    parser = argparse.ArgumentParser(prog="lumix-ffmpeg-install", description="Download a prebuilt ffmpeg")
    parser.add_argument("--force", "-f", action="store_true", help="Reinstall even if ffmpeg is present")
    parser.add_argument("--bin-dir", type=Path, help="Directory to install into")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[ffmpeg-binaries] %(levelname)s: %(message)s")

    try:
        BinaryInstaller(bin_dir=args.bin_dir).install(force=args.force)
    except InstallError:
        LOG.exception("Failed to download FFmpeg")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
