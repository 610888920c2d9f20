# Copyright 2026 Cisco Systems, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Per-version artifact pipeline: download the Android support installer,
peel its nested archives and gather the files to publish.
"""

from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from ..config.constants import UnityDepsConstants
from .clients.http import download_file
from .exceptions import ArchiveExtractionError, DownloadError
from .extractors.archive_extractor import RAW_SUFFIX, ArchiveExtractor, ExtractionRequest
from .models import ExtractedArtifacts, Fatal, Skip, UnityVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionStep:
    """One layer of the installer chain."""

    name: str
    source_name: str
    patterns: frozenset[str] = field(default_factory=frozenset)
    recursive: bool = False
    raw: bool = False
    description: str = ""

    def request(self, work_dir: Path) -> ExtractionRequest:
        return ExtractionRequest(
            source=work_dir / self.source_name,
            destination=work_dir,
            recursive=self.recursive,
            patterns=self.patterns,
            raw=self.raw,
        )


EXTRACTION_STEPS: tuple[ExtractionStep, ...] = (
    ExtractionStep(
        name="payload",
        source_name=UnityDepsConstants.INSTALLER_FILE_NAME,
        patterns=frozenset({UnityDepsConstants.PAYLOAD_MEMBER}),
        description="Extracting the Payload Archive",
    ),
    ExtractionStep(
        name="payload-archive",
        source_name="Payload",
        raw=True,
        description="Extracting the Payload Archive Archive",
    ),
    ExtractionStep(
        name="variations",
        source_name=f"Payload{RAW_SUFFIX}",
        patterns=frozenset({UnityDepsConstants.MANAGED_PATTERN, UnityDepsConstants.NATIVE_LIBS_PATTERN}),
        recursive=True,
        description="Extracting the last one...",
    ),
)


def is_supported_version(version: UnityVersion) -> bool:
    """Versions before 5.3 never shipped the il2cpp Android variation."""
    return (version.major, version.minor) >= UnityDepsConstants.MIN_SUPPORTED_VERSION


def bundle_managed_assemblies(assemblies: list[Path]) -> io.BytesIO:
    """
    Zip *assemblies* into memory, one entry per file named by file name only.

    Returns:
        A stream positioned at the start of the archive
    """
    stream = io.BytesIO()
    with zipfile.ZipFile(stream, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for assembly in assemblies:
            zf.write(assembly, arcname=assembly.name)
    stream.seek(0)
    return stream


def find_managed_assemblies(managed_dir: Path) -> list[Path]:
    if not managed_dir.is_dir():
        return []
    return sorted(p for p in managed_dir.glob(UnityDepsConstants.MANAGED_ASSEMBLY_GLOB) if p.is_file())


def find_native_libraries(libs_dir: Path) -> dict[str, Path]:
    """Map each architecture directory under *libs_dir* to its ``libunity.so``."""
    libraries: dict[str, Path] = {}
    if not libs_dir.is_dir():
        return libraries
    for arch_dir in sorted(p for p in libs_dir.iterdir() if p.is_dir()):
        library = arch_dir / UnityDepsConstants.NATIVE_LIBRARY_NAME
        if not library.is_file():
            logger.debug("No %s for architecture %s", UnityDepsConstants.NATIVE_LIBRARY_NAME, arch_dir.name)
            continue
        libraries[arch_dir.name] = library
    return libraries


class ArtifactPipeline:
    """Produces the publishable files for one Unity version."""

    def __init__(
        self,
        client: httpx.Client,
        extractor: ArchiveExtractor | None = None,
        download_base_url: str = UnityDepsConstants.DOWNLOAD_BASE_URL,
        download_retries: int = UnityDepsConstants.DEFAULT_DOWNLOAD_RETRIES,
        retry_backoff: float = UnityDepsConstants.DEFAULT_RETRY_BACKOFF,
        steps: tuple[ExtractionStep, ...] = EXTRACTION_STEPS,
    ):
        self.client = client
        self.extractor = extractor or ArchiveExtractor()
        self.download_base_url = download_base_url
        self.download_retries = download_retries
        self.retry_backoff = retry_backoff
        self.steps = steps

    def download_url(self, version: UnityVersion) -> str:
        return UnityDepsConstants.download_url(version.id, version.short_name, self.download_base_url)

    def process(self, version: UnityVersion, work_dir: Path) -> ExtractedArtifacts | Skip | Fatal:
        """
        Download and unpack *version* inside *work_dir*.

        Args:
            version: Version to process
            work_dir: Empty scratch directory owned by the caller

        Returns:
            The extracted artifacts, a Skip when the version has no installer,
            or a Fatal when the download keeps failing at the transport level,
            an archive layer could not be read or the installer holds no
            managed assemblies
        """
        if not is_supported_version(version):
            logger.debug("Skipping %s: older than the first il2cpp Android release", version)
            return Skip(f"{version} predates {'.'.join(map(str, UnityDepsConstants.MIN_SUPPORTED_VERSION))}")

        installer = work_dir / UnityDepsConstants.INSTALLER_FILE_NAME
        logger.info("Downloading the Android Bundle")
        try:
            downloaded = download_file(
                self.client,
                self.download_url(version),
                installer,
                retries=self.download_retries,
                backoff=self.retry_backoff,
            )
        except DownloadError as e:
            logger.error("Download of %s failed: %s", version, e)
            return Fatal("download", e)
        if not downloaded:
            logger.info("No bundle found. Skipping...")
            return Skip("No bundle found")

        for step in self.steps:
            outcome = self._run_step(step, work_dir)
            if outcome is not None:
                return outcome

        managed = find_managed_assemblies(work_dir / UnityDepsConstants.MANAGED_DIR)
        if not managed:
            error = ArchiveExtractionError(
                f"Installer for {version} has no managed assemblies under {UnityDepsConstants.MANAGED_DIR.as_posix()}"
            )
            logger.error("%s", error)
            return Fatal("variations", error)
        native = find_native_libraries(work_dir / UnityDepsConstants.NATIVE_LIBS_DIR)

        logger.info("Bundling %s", UnityDepsConstants.MANAGED_ASSET_NAME)
        return ExtractedArtifacts(
            managed_assemblies=managed,
            native_libraries=native,
            managed_bundle=bundle_managed_assemblies(managed),
        )

    def _run_step(self, step: ExtractionStep, work_dir: Path) -> Fatal | None:
        request = step.request(work_dir)
        logger.info(step.description or f"Extracting {step.source_name}")
        try:
            self.extractor.run(request)
        except ArchiveExtractionError as e:
            logger.error("Extraction step '%s' failed: %s", step.name, e)
            return Fatal(step.name, e)
        finally:
            request.source.unlink(missing_ok=True)
        return None
