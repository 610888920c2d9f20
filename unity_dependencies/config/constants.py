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
Constants for the Unity Dependencies Generator.
"""

from pathlib import Path


class UnityDepsConstants:
    """Constants used throughout the generator."""

    # Unity release catalog
    CATALOG_URL = "https://services.unity.com/graphql"
    CATALOG_OPERATION = "GetRelease"
    CATALOG_PAGE_SIZE = 300
    CATALOG_QUERY = (
        "query GetRelease($limit: Int, $skip: Int, $version: String!, $stream: [UnityReleaseStream!]) {\n"
        "  getUnityReleases(\n"
        "    limit: $limit\n"
        "    skip: $skip\n"
        "    stream: $stream\n"
        "    version: $version\n"
        "    entitlements: [XLTS]\n"
        "  ) {\n"
        "    totalCount\n"
        "    edges {\n"
        "      node {\n"
        "        version\n"
        "        entitlements\n"
        "        releaseDate\n"
        "        unityHubDeepLink\n"
        "        stream\n"
        "        __typename\n"
        "      }\n"
        "      __typename\n"
        "    }\n"
        "    __typename\n"
        "  }\n"
        "}"
    )
    MAJOR_VERSIONS = (5, 2017, 2018, 2019, 2020, 2021, 2022, 2023, 6, 7)

    # Installer download
    DOWNLOAD_BASE_URL = "https://download.unity3d.com"
    DOWNLOAD_PATH_TEMPLATE = (
        "/download_unity/{id}/MacEditorTargetInstaller/UnitySetup-Android-Support-for-Editor-{version}.pkg"
    )
    DOWNLOAD_USER_AGENT = "Unity web player"
    DOWNLOAD_CHUNK_SIZE = 1024 * 1024
    INSTALLER_FILE_NAME = "mono.pkg"

    # Oldest release line that ships the il2cpp Android variation
    MIN_SUPPORTED_VERSION = (5, 3)

    # Paths inside the unpacked payload
    PAYLOAD_MEMBER = "TargetSupport.pkg.tmp/Payload"
    MANAGED_PATTERN = "./Variations/il2cpp/Managed/*"
    NATIVE_LIBS_PATTERN = "./Variations/il2cpp/Release/Libs/*"
    MANAGED_DIR = Path("Variations", "il2cpp", "Managed")
    NATIVE_LIBS_DIR = Path("Variations", "il2cpp", "Release", "Libs")
    MANAGED_ASSEMBLY_GLOB = "*.dll"
    NATIVE_LIBRARY_NAME = "libunity.so"

    # GitHub publishing
    GITHUB_API_URL = "https://api.github.com"
    GITHUB_API_VERSION = "2022-11-28"
    GITHUB_USER_AGENT = "MelonLoader.UnityDependencies"
    RELEASE_BODY = "Automatically generated and uploaded by the MelonLoader.UnityDependencies Generator"
    MANAGED_ASSET_NAME = "Managed.zip"
    MANAGED_ASSET_CONTENT_TYPE = "application/zip"
    NATIVE_ASSET_TEMPLATE = "libunity.so.{arch}"
    NATIVE_ASSET_CONTENT_TYPE = "application/octet-stream"

    # Default values
    DEFAULT_REQUEST_TIMEOUT = 60.0
    DEFAULT_DOWNLOAD_RETRIES = 3
    DEFAULT_RETRY_BACKOFF = 2.0

    # Environment variables
    ENV_GITHUB_TOKEN = "GH_TOKEN"
    ENV_CATALOG_URL = "UNITY_DEPS_CATALOG_URL"
    ENV_DOWNLOAD_BASE_URL = "UNITY_DEPS_DOWNLOAD_BASE_URL"
    ENV_REQUEST_TIMEOUT = "UNITY_DEPS_REQUEST_TIMEOUT"
    ENV_DOWNLOAD_RETRIES = "UNITY_DEPS_DOWNLOAD_RETRIES"
    ENV_WORK_DIR = "UNITY_DEPS_WORK_DIR"

    @classmethod
    def download_url(cls, build_id: str, version: str, base_url: str | None = None) -> str:
        """Build the Android support installer URL for one build."""
        base = (base_url or cls.DOWNLOAD_BASE_URL).rstrip("/")
        return base + cls.DOWNLOAD_PATH_TEMPLATE.format(id=build_id, version=version)
