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
Top-level run: list catalog versions, skip the ones already released and
publish the rest one at a time.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..config.config import Config
from .catalog import VersionCatalog
from .models import Fatal, RunSummary, Skip, UnityVersion, VersionOutcome
from .pipeline import ArtifactPipeline, is_supported_version
from .publisher import PublishCoordinator

logger = logging.getLogger(__name__)


class DependencyGenerator:
    """Drives the catalog, pipeline and publisher for a whole run."""

    def __init__(
        self,
        config: Config,
        catalog: VersionCatalog,
        pipeline: ArtifactPipeline,
        publisher: PublishCoordinator,
        release_tags,
    ):
        """
        Args:
            config: Run configuration
            catalog: Source of versions
            pipeline: Per-version download and extraction
            publisher: Per-version release publishing
            release_tags: Object with ``list_release_tags()`` (normally the GitHub client)
        """
        self.config = config
        self.catalog = catalog
        self.pipeline = pipeline
        self.publisher = publisher
        self.release_tags = release_tags

    def run(self) -> RunSummary:
        """
        Process every catalog version that has no release yet.

        Returns:
            Outcome per version, in catalog order

        Raises:
            ArchiveExtractionError: When an installer cannot be unpacked and
                ``continue_on_error`` is off
            DownloadError: When an installer download keeps failing and
                ``continue_on_error`` is off
            PublishError: When a release step fails
        """
        summary = RunSummary()

        logger.info("Fetching available releases")
        versions = self.catalog.fetch(self.config.major_versions)

        logger.info("Fetching existing releases")
        existing_tags = set(self.release_tags.list_release_tags())

        for version in versions:
            if version.short_name in existing_tags:
                summary.record(version, VersionOutcome.ALREADY_PUBLISHED)
                continue

            if self.config.dry_run:
                logger.info("Would process version %s", version)
                summary.record(version, VersionOutcome.PENDING)
                continue

            outcome = self.process_version(version)
            summary.record(version, outcome)
            if outcome == VersionOutcome.PUBLISHED:
                existing_tags.add(version.short_name)

        logger.info(
            "Run complete: %d published, %d skipped, %d failed",
            len(summary.published),
            len(summary.skipped),
            len(summary.failed),
        )
        return summary

    def process_version(self, version: UnityVersion) -> VersionOutcome:
        """Download, unpack and publish one version inside its own temporary directory."""
        if not is_supported_version(version):
            logger.debug("Skipping %s: older than the first il2cpp Android release", version)
            return VersionOutcome.SKIPPED

        logger.info("Processing version %s", version)

        base_dir = self.config.work_dir
        if base_dir is not None:
            base_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="unity_deps_", dir=base_dir) as temp_dir:
            result = self.pipeline.process(version, Path(temp_dir))

            if isinstance(result, Skip):
                logger.debug("Skipped %s: %s", version, result.reason)
                return VersionOutcome.SKIPPED

            if isinstance(result, Fatal):
                if not self.config.continue_on_error:
                    raise result.error
                logger.error("Giving up on %s at step '%s': %s", version, result.stage, result.error)
                return VersionOutcome.FAILED

            self.publisher.publish(version, result.managed_bundle, result.native_libraries)
            return VersionOutcome.PUBLISHED
