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
Publishing of one version as a GitHub release.

The release is created as a draft, receives its assets one by one and is
made public only after every upload succeeded. Nothing is retried or rolled
back: a failure leaves the tag and the draft in place for manual cleanup.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Protocol

from ..config.constants import UnityDepsConstants
from .exceptions import PublishError
from .models import ReleaseAsset, ReleaseDraft, UnityVersion

logger = logging.getLogger(__name__)


class PublishState(str, Enum):
    """Progress of a release through the publish protocol."""

    NOT_STARTED = "not_started"
    TAG_CREATED = "tag_created"
    DRAFT_CREATED = "draft_created"
    ASSETS_UPLOADING = "assets_uploading"
    PUBLISHED = "published"


class ReleaseService(Protocol):
    """The subset of the GitHub client used for publishing."""

    def get_branch_sha(self, branch: str) -> str: ...

    def create_tag_reference(self, tag: str, sha: str) -> dict: ...

    def create_release(self, tag: str, name: str, body: str, draft: bool = True) -> dict: ...

    def upload_release_asset(self, upload_url: str, name: str, content_type: str, stream: BinaryIO) -> dict: ...

    def update_release(self, release_id: int, **fields) -> dict: ...


class PublishCoordinator:
    """Runs the tag, draft, upload and publish steps for one version."""

    def __init__(self, service: ReleaseService, main_branch: str, body: str = UnityDepsConstants.RELEASE_BODY):
        self.service = service
        self.main_branch = main_branch
        self.body = body
        self.state = PublishState.NOT_STARTED
        self.release: ReleaseDraft | None = None

    def publish(
        self,
        version: UnityVersion,
        managed_bundle: BinaryIO,
        native_libraries: dict[str, Path],
    ) -> str:
        """
        Publish *version* and return its tag.

        Args:
            version: Version being released
            managed_bundle: In-memory ``Managed.zip`` stream
            native_libraries: ``libunity.so`` path per architecture

        Returns:
            The created tag name

        Raises:
            PublishError: If any step fails; ``state`` tells how far it got
        """
        self.state = PublishState.NOT_STARTED
        self.release = None
        tag = version.short_name

        try:
            logger.info("Creating a new repo tag")
            sha = self.service.get_branch_sha(self.main_branch)
            self.service.create_tag_reference(tag, sha)
            self.state = PublishState.TAG_CREATED

            logger.info("Creating a new repo draft release")
            self.release = ReleaseDraft(tag=tag, name=version.short_name, body=self.body)
            created = self.service.create_release(
                tag=self.release.tag, name=self.release.name, body=self.release.body, draft=True
            )
            self.release.id = created["id"]
            self.release.upload_url = created["upload_url"]
            self.state = PublishState.DRAFT_CREATED

            self.state = PublishState.ASSETS_UPLOADING
            self._upload(
                ReleaseAsset(
                    name=UnityDepsConstants.MANAGED_ASSET_NAME,
                    content_type=UnityDepsConstants.MANAGED_ASSET_CONTENT_TYPE,
                    stream=managed_bundle,
                )
            )
            for arch, library in native_libraries.items():
                with open(library, "rb") as stream:
                    self._upload(
                        ReleaseAsset(
                            name=UnityDepsConstants.NATIVE_ASSET_TEMPLATE.format(arch=arch),
                            content_type=UnityDepsConstants.NATIVE_ASSET_CONTENT_TYPE,
                            stream=stream,
                        )
                    )

            self.service.update_release(self.release.id, draft=False)
            self.release.draft = False
            self.state = PublishState.PUBLISHED
            logger.debug("Published %s with %s", tag, ", ".join(self.release.asset_names))
        except Exception as e:
            raise PublishError(
                f"Publishing {tag} failed after reaching state '{self.state.value}': {e}",
                tag=tag,
                state=self.state,
            ) from e

        logger.info("Done.")
        return tag

    def _upload(self, asset: ReleaseAsset) -> None:
        logger.info("Uploading %s", asset.name)
        self.service.upload_release_asset(self.release.upload_url, asset.name, asset.content_type, asset.stream)
        self.release.assets.append(asset)
