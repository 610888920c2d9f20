# Copyright 2026 Cisco Systems, Inc. and its affiliates
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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import gzip
import io
import tarfile
import zipfile
from pathlib import Path

import httpx
import pytest

from unity_dependencies.core.models import UnityVersion

# ---------------------------------------------------------------------------
# Archive builders
# ---------------------------------------------------------------------------

MANAGED_PREFIX = "./Variations/il2cpp/Managed"
LIBS_PREFIX = "./Variations/il2cpp/Release/Libs"

DEFAULT_PAYLOAD_FILES: dict[str, bytes] = {
    f"{MANAGED_PREFIX}/UnityEngine.dll": b"MZ-unity-engine",
    f"{MANAGED_PREFIX}/Mono.Security.dll": b"MZ-mono-security",
    f"{MANAGED_PREFIX}/UnityEngine.xml": b"<doc/>",
    f"{LIBS_PREFIX}/arm64-v8a/libunity.so": b"ELF-arm64",
    f"{LIBS_PREFIX}/armeabi-v7a/libunity.so": b"ELF-armv7",
    f"{LIBS_PREFIX}/x86/libmain.so": b"ELF-x86-main",
    "./Variations/mono/Managed/UnityEngine.dll": b"MZ-mono-variation",
    "./Data/unity default resources": b"resources",
}


def tar_bytes(files: dict[str, bytes]) -> bytes:
    """Build an uncompressed tar archive holding *files*."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.PAX_FORMAT) as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def zip_bytes(files: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def installer_bytes(payload_files: dict[str, bytes] | None = None) -> bytes:
    """Build a stand-in for the Android support ``.pkg``.

    The outer container holds ``TargetSupport.pkg.tmp/Payload``, a gzip
    stream wrapping an archive of the ``Variations`` tree, like the real
    installer does.
    """
    payload = gzip.compress(tar_bytes(payload_files if payload_files is not None else DEFAULT_PAYLOAD_FILES))
    return zip_bytes(
        {
            "Distribution": b"<installer-gui-script/>",
            "TargetSupport.pkg.tmp/Bom": b"bom",
            "TargetSupport.pkg.tmp/PackageInfo": b"<pkg-info/>",
            "TargetSupport.pkg.tmp/Payload": payload,
        }
    )


@pytest.fixture
def make_installer(tmp_path: Path):
    """Factory fixture writing a synthetic installer to disk and returning its path."""
    _counter = [0]

    def _make(payload_files: dict[str, bytes] | None = None) -> Path:
        _counter[0] += 1
        path = tmp_path / f"installer-{_counter[0]}.pkg"
        path.write_bytes(installer_bytes(payload_files))
        return path

    return _make


# ---------------------------------------------------------------------------
# Catalog helpers
# ---------------------------------------------------------------------------


def catalog_node(version: str, build_id: str = "abcdef123456", link: str | None = None) -> dict:
    """A catalog ``edges[].node`` entry."""
    return {
        "version": version,
        "entitlements": [],
        "releaseDate": "2024-01-01T00:00:00.000Z",
        "unityHubDeepLink": link if link is not None else f"unityhub://{version}/{build_id}",
        "stream": "LTS",
        "__typename": "UnityRelease",
    }


def catalog_response(nodes: list[dict]) -> dict:
    return {
        "data": {
            "getUnityReleases": {
                "totalCount": len(nodes),
                "edges": [{"node": node, "__typename": "UnityReleaseOffsetEdge"} for node in nodes],
                "__typename": "UnityReleaseOffsetConnection",
            }
        }
    }


@pytest.fixture
def make_version():
    """Factory fixture for :class:`UnityVersion` objects from a version string."""

    def _make(version: str = "2021.3.5f1", build_id: str = "abcdef123456") -> UnityVersion:
        return UnityVersion.parse(version, build_id)

    return _make


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_http():
    """Factory fixture returning an ``httpx.Client`` backed by a handler, plus its request log.

    Usage::

        client, requests = mock_http(lambda request: httpx.Response(200, json={}))
    """
    clients: list[httpx.Client] = []

    def _make(handler) -> tuple[httpx.Client, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_record), follow_redirects=True)
        clients.append(client)
        return client, seen

    yield _make

    for client in clients:
        client.close()


# ---------------------------------------------------------------------------
# GitHub fake
# ---------------------------------------------------------------------------


class FakeGitHub:
    """In-memory stand-in for :class:`GitHubClient` recording every call."""

    def __init__(self, existing_tags: set[str] | None = None, fail_on: dict[str, Exception] | None = None):
        self.existing_tags = set(existing_tags or ())
        self.fail_on = fail_on or {}
        self.calls: list[tuple] = []
        self.tags: dict[str, str] = {}
        self.releases: dict[int, dict] = {}
        self._next_id = 1

    def _maybe_fail(self, key: str) -> None:
        if key in self.fail_on:
            raise self.fail_on[key]

    def list_release_tags(self) -> set[str]:
        self.calls.append(("list_release_tags",))
        return set(self.existing_tags)

    def get_branch_sha(self, branch: str) -> str:
        self.calls.append(("get_branch_sha", branch))
        self._maybe_fail("get_branch_sha")
        return "0123456789abcdef0123456789abcdef01234567"

    def create_tag_reference(self, tag: str, sha: str) -> dict:
        self.calls.append(("create_tag_reference", tag, sha))
        self._maybe_fail("create_tag_reference")
        self.tags[tag] = sha
        return {"ref": f"refs/tags/{tag}", "object": {"sha": sha}}

    def create_release(self, tag: str, name: str, body: str, draft: bool = True) -> dict:
        self.calls.append(("create_release", tag, name, draft))
        self._maybe_fail("create_release")
        release_id = self._next_id
        self._next_id += 1
        self.releases[release_id] = {
            "id": release_id,
            "tag_name": tag,
            "name": name,
            "body": body,
            "draft": draft,
            "assets": [],
            "upload_url": f"https://uploads.github.com/repos/o/r/releases/{release_id}/assets{{?name,label}}",
        }
        return dict(self.releases[release_id])

    def upload_release_asset(self, upload_url: str, name: str, content_type: str, stream) -> dict:
        self.calls.append(("upload_release_asset", name, content_type))
        self._maybe_fail(f"upload:{name}")
        release_id = int(upload_url.split("/releases/")[1].split("/")[0])
        asset = {"name": name, "content_type": content_type, "data": stream.read()}
        self.releases[release_id]["assets"].append(asset)
        return asset

    def update_release(self, release_id: int, **fields) -> dict:
        self.calls.append(("update_release", release_id, fields))
        self._maybe_fail("update_release")
        self.releases[release_id].update(fields)
        if fields.get("draft") is False:
            self.existing_tags.add(self.releases[release_id]["tag_name"])
        return dict(self.releases[release_id])

    def release_for(self, tag: str) -> dict | None:
        for release in self.releases.values():
            if release["tag_name"] == tag:
                return release
        return None


@pytest.fixture
def fake_github():
    """Factory fixture for :class:`FakeGitHub`."""

    def _make(**kwargs) -> FakeGitHub:
        return FakeGitHub(**kwargs)

    return _make
