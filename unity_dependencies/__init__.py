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
Unity Dependencies Generator - mirrors Unity Android il2cpp support files as GitHub releases.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``python -m unity_dependencies.cli.cli`` from importing libarchive
    and httpx before argument parsing has happened.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "UnityDepsConstants": (".config.constants", "UnityDepsConstants"),
        "UnityVersion": (".core.models", "UnityVersion"),
        "ReleaseDraft": (".core.models", "ReleaseDraft"),
        "ReleaseAsset": (".core.models", "ReleaseAsset"),
        "Skip": (".core.models", "Skip"),
        "Fatal": (".core.models", "Fatal"),
        "VersionCatalog": (".core.catalog", "VersionCatalog"),
        "ArchiveExtractor": (".core.extractors.archive_extractor", "ArchiveExtractor"),
        "ArtifactPipeline": (".core.pipeline", "ArtifactPipeline"),
        "PublishCoordinator": (".core.publisher", "PublishCoordinator"),
        "DependencyGenerator": (".core.generator", "DependencyGenerator"),
        "GitHubClient": (".core.clients.github", "GitHubClient"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Config",
    "UnityDepsConstants",
    "UnityVersion",
    "ReleaseDraft",
    "ReleaseAsset",
    "Skip",
    "Fatal",
    "VersionCatalog",
    "ArchiveExtractor",
    "ArtifactPipeline",
    "PublishCoordinator",
    "DependencyGenerator",
    "GitHubClient",
]
