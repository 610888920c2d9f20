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

"""Unity Dependencies Generator exceptions.

All exceptions inherit from UnityDependenciesError for easy catching.

Example:
    >>> from unity_dependencies.core.exceptions import PublishError
    >>>
    >>> try:
    ...     generator.run()
    ... except PublishError as e:
    ...     print(f"Release {e.tag} stopped at {e.state.value}: {e}")
"""

from __future__ import annotations

from typing import Any


class UnityDependenciesError(Exception):
    """Base exception for all Unity Dependencies Generator errors."""

    pass


class ConfigurationError(UnityDependenciesError):
    """Raised when the run cannot start.

    This indicates:
    - Missing GH_TOKEN credential
    - Invalid numeric settings in the environment
    """

    pass


class VersionParseError(UnityDependenciesError):
    """Raised when a catalog version string is not a strict ``X.Y.Z<type><build>``."""

    pass


class CatalogError(UnityDependenciesError):
    """Raised when the release catalog cannot be queried or returns an unexpected shape."""

    pass


class DownloadError(UnityDependenciesError):
    """Raised when an installer download keeps failing at the transport level."""

    pass


class ArchiveExtractionError(UnityDependenciesError):
    """Raised when an archive layer is corrupt or has an unexpected structure.

    Unlike a missing installer, this is not recoverable: it usually means the
    upstream packaging format changed.
    """

    pass


class GitHubAPIError(UnityDependenciesError):
    """Raised when the GitHub REST API answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class PublishError(UnityDependenciesError):
    """Raised when a publish step fails.

    Carries the last state the release reached so orphaned tags and draft
    releases can be cleaned up by hand.
    """

    def __init__(self, message: str, tag: str, state: Any):
        super().__init__(message)
        self.tag = tag
        self.state = state
