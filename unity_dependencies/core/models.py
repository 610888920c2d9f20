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
Data models for catalog versions, pipeline outcomes and releases.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from .exceptions import VersionParseError

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)([A-Za-z])(\d+)$")


class BuildType(str, Enum):
    """Single-character build stream markers used in Unity version strings."""

    ALPHA = "a"
    BETA = "b"
    CHINA = "c"
    STABLE = "f"
    PATCH = "p"
    EXPERIMENTAL = "x"


@dataclass(frozen=True)
class UnityVersion:
    """A single Unity build as listed by the release catalog."""

    major: int
    minor: int
    patch: int
    build_type: str
    build_number: int
    id: str

    @property
    def short_name(self) -> str:
        """Version string used as release name, tag and download file name."""
        return f"{self.major}.{self.minor}.{self.patch}{self.build_type}{self.build_number}"

    @property
    def key(self) -> tuple[int, int, int, str]:
        """Identity used when collapsing builds to the latest one."""
        return (self.major, self.minor, self.patch, self.build_type)

    @property
    def is_stable(self) -> bool:
        return self.build_type == BuildType.STABLE.value

    def __str__(self) -> str:
        return self.short_name

    @classmethod
    def parse(cls, version: str, build_id: str) -> UnityVersion:
        """
        Parse a catalog version string such as ``2021.3.5f1``.

        Args:
            version: Version string from the catalog entry
            build_id: Build identifier taken from the deep link

        Returns:
            Parsed UnityVersion

        Raises:
            VersionParseError: If the string is not a strict version or the id is empty
        """
        if not isinstance(version, str):
            raise VersionParseError(f"Version must be a string, got {type(version).__name__}")
        match = _VERSION_PATTERN.match(version.strip())
        if match is None:
            raise VersionParseError(f"Unrecognised version string: {version!r}")
        if not build_id:
            raise VersionParseError(f"Missing build identifier for version {version!r}")

        major, minor, patch, build_type, build_number = match.groups()
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch),
            build_type=build_type,
            build_number=int(build_number),
            id=build_id,
        )

    @classmethod
    def try_parse(cls, version: str, build_id: str) -> UnityVersion | None:
        """Like :meth:`parse` but returns ``None`` instead of raising."""
        try:
            return cls.parse(version, build_id)
        except VersionParseError:
            return None


@dataclass(frozen=True)
class Skip:
    """The version has nothing to publish; move on to the next one."""

    reason: str


@dataclass(frozen=True)
class Fatal:
    """A stage failed in a way that retrying or skipping cannot fix."""

    stage: str
    error: Exception


@dataclass
class ExtractedArtifacts:
    """Files recovered from one installer, ready for publishing."""

    managed_assemblies: list[Path] = field(default_factory=list)
    native_libraries: dict[str, Path] = field(default_factory=dict)
    managed_bundle: BinaryIO | None = None


@dataclass
class ReleaseAsset:
    """A single file attached to a release."""

    name: str
    content_type: str
    stream: BinaryIO


@dataclass
class ReleaseDraft:
    """A release as it moves from draft to public."""

    tag: str
    name: str
    body: str
    draft: bool = True
    assets: list[ReleaseAsset] = field(default_factory=list)
    id: int | None = None
    upload_url: str | None = None

    @property
    def asset_names(self) -> list[str]:
        return [asset.name for asset in self.assets]


class VersionOutcome(str, Enum):
    """What happened to a catalog version during a run."""

    PUBLISHED = "published"
    SKIPPED = "skipped"
    ALREADY_PUBLISHED = "already_published"
    PENDING = "pending"
    FAILED = "failed"


@dataclass
class RunSummary:
    """Per-version outcomes of one generator run, in processing order."""

    outcomes: dict[str, VersionOutcome] = field(default_factory=dict)

    def record(self, version: UnityVersion, outcome: VersionOutcome) -> None:
        self.outcomes[version.short_name] = outcome

    def versions_with(self, outcome: VersionOutcome) -> list[str]:
        return [name for name, value in self.outcomes.items() if value == outcome]

    @property
    def published(self) -> list[str]:
        return self.versions_with(VersionOutcome.PUBLISHED)

    @property
    def skipped(self) -> list[str]:
        return self.versions_with(VersionOutcome.SKIPPED)

    @property
    def pending(self) -> list[str]:
        return self.versions_with(VersionOutcome.PENDING)

    @property
    def failed(self) -> list[str]:
        return self.versions_with(VersionOutcome.FAILED)
