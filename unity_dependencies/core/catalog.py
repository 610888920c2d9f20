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
Unity release catalog queries and version deduplication.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from ..config.constants import UnityDepsConstants
from .exceptions import CatalogError
from .models import UnityVersion

logger = logging.getLogger(__name__)


def build_catalog_query(major: int, limit: int = UnityDepsConstants.CATALOG_PAGE_SIZE) -> dict[str, Any]:
    """Return the GraphQL request body listing releases of one major family."""
    return {
        "operationName": UnityDepsConstants.CATALOG_OPERATION,
        "query": UnityDepsConstants.CATALOG_QUERY,
        "variables": {
            "limit": limit,
            "version": str(major),
        },
    }


def parse_catalog_entry(node: Any) -> UnityVersion | None:
    """
    Turn one ``edges[].node`` object into a version.

    Returns ``None`` for anything that cannot be parsed: a missing or
    non-string field, a deep link without a path separator, or a version
    string that is not strict.
    """
    if not isinstance(node, dict):
        return None
    version = node.get("version")
    hub_link = node.get("unityHubDeepLink")
    if not isinstance(version, str) or not isinstance(hub_link, str):
        return None

    last_slash = hub_link.rfind("/")
    if last_slash == -1:
        return None

    return UnityVersion.try_parse(version, hub_link[last_slash + 1 :])


def merge_version(versions: list[UnityVersion], candidate: UnityVersion) -> None:
    """
    Add *candidate* to *versions*, keeping only the highest build per
    (major, minor, patch, build type).
    """
    for index, existing in enumerate(versions):
        if existing.key == candidate.key:
            if existing.build_number < candidate.build_number:
                versions[index] = candidate
            return
    versions.append(candidate)


class VersionCatalog:
    """Lists Unity releases from the catalog service."""

    def __init__(
        self,
        client: httpx.Client,
        url: str = UnityDepsConstants.CATALOG_URL,
        page_size: int = UnityDepsConstants.CATALOG_PAGE_SIZE,
        stable_only: bool = True,
        latest_only: bool = True,
    ):
        self.client = client
        self.url = url
        self.page_size = page_size
        self.stable_only = stable_only
        self.latest_only = latest_only

    def fetch(self, major_families: Iterable[int] = UnityDepsConstants.MAJOR_VERSIONS) -> list[UnityVersion]:
        """
        Query every major family and return the filtered, deduplicated versions.

        Args:
            major_families: Major version identifiers, queried in order

        Returns:
            Versions in family order, then catalog response order

        Raises:
            CatalogError: If a query fails or the response shape is unexpected
        """
        result: list[UnityVersion] = []
        for major in major_families:
            for node in self._query_family(major):
                version = parse_catalog_entry(node)
                if version is None:
                    logger.debug("Discarding unparseable catalog entry: %r", node)
                    continue

                if self.stable_only and not version.is_stable:
                    continue

                if self.latest_only:
                    merge_version(result, version)
                else:
                    result.append(version)

        logger.info("Catalog lists %d version(s)", len(result))
        return result

    def _query_family(self, major: int) -> list[Any]:
        try:
            response = self.client.post(self.url, json=build_catalog_query(major, self.page_size))
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise CatalogError(f"Release catalog query for {major} failed: {e}") from e

        try:
            edges = response.json()["data"]["getUnityReleases"]["edges"]
        except (ValueError, KeyError, TypeError) as e:
            raise CatalogError(f"Unexpected release catalog response for {major}: {e}") from e

        if not isinstance(edges, list):
            raise CatalogError(f"Unexpected release catalog response for {major}: edges is not a list")

        logger.debug("Catalog returned %d entries for %s", len(edges), major)
        return [edge.get("node") if isinstance(edge, dict) else None for edge in edges]
