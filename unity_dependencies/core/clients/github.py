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
Minimal GitHub REST client covering branches, tag references, releases and
release assets.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

import httpx

from ...config.constants import UnityDepsConstants
from ..exceptions import GitHubAPIError

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Thin wrapper around the GitHub REST API for one repository.

    All methods raise :class:`GitHubAPIError` on non-success responses and
    let transport errors from httpx propagate.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        base_url: str = UnityDepsConstants.GITHUB_API_URL,
        timeout: float = UnityDepsConstants.DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.owner = owner
        self.repo = repo
        self.session = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": UnityDepsConstants.GITHUB_API_VERSION,
                "User-Agent": UnityDepsConstants.GITHUB_USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = self.session.request(method, url, **kwargs)
        if not response.is_success:
            try:
                payload = response.json()
                message = payload.get("message", response.text) if isinstance(payload, dict) else response.text
            except ValueError:
                payload = None
                message = response.text
            raise GitHubAPIError(
                f"{method} {response.request.url} failed with status {response.status_code}: {message}",
                status_code=response.status_code,
                payload=payload,
            )
        return response

    def get_branch_sha(self, branch: str) -> str:
        """Return the sha of the commit at the tip of *branch*."""
        data = self._request("GET", f"{self.repo_path}/branches/{branch}").json()
        return data["commit"]["sha"]

    def create_tag_reference(self, tag: str, sha: str) -> dict[str, Any]:
        """Create ``refs/tags/<tag>`` pointing at *sha*."""
        return self._request(
            "POST",
            f"{self.repo_path}/git/refs",
            json={"ref": f"refs/tags/{tag}", "sha": sha},
        ).json()

    def list_release_tags(self) -> set[str]:
        """Return the tag names of every release in the repository, drafts included."""
        tags: set[str] = set()
        url: str | None = f"{self.repo_path}/releases"
        params: dict[str, Any] | None = {"per_page": 100}
        while url:
            response = self._request("GET", url, params=params)
            for release in response.json():
                tag = release.get("tag_name")
                if tag:
                    tags.add(tag)
            url = response.links.get("next", {}).get("url")
            params = None
        return tags

    def create_release(self, tag: str, name: str, body: str, draft: bool = True) -> dict[str, Any]:
        """Create a release for an existing tag."""
        return self._request(
            "POST",
            f"{self.repo_path}/releases",
            json={"tag_name": tag, "name": name, "body": body, "draft": draft},
        ).json()

    def upload_release_asset(
        self, upload_url: str, name: str, content_type: str, stream: BinaryIO
    ) -> dict[str, Any]:
        """
        Upload one asset to a release.

        Args:
            upload_url: The release's ``upload_url`` (the URI template suffix is stripped)
            name: Asset file name
            content_type: MIME type sent as ``Content-Type``
            stream: Binary file object holding the asset data, streamed as the request body

        Returns:
            The created asset as returned by GitHub
        """
        url = upload_url.split("{", 1)[0]
        return self._request(
            "POST",
            url,
            params={"name": name},
            headers={"Content-Type": content_type},
            content=stream,
        ).json()

    def update_release(self, release_id: int, **fields: Any) -> dict[str, Any]:
        """Edit release fields, e.g. ``draft=False`` to publish it."""
        return self._request("PATCH", f"{self.repo_path}/releases/{release_id}", json=fields).json()
