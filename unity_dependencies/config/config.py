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
Configuration class for the Unity Dependencies Generator.

Values passed explicitly win; anything left at its default is read from the
environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from ..core.exceptions import ConfigurationError
from .constants import UnityDepsConstants


def _env_number(name: str, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class Config:
    """
    Configuration for a generator run.
    """

    # Target repository
    repo_owner: str = ""
    repo_name: str = ""
    main_branch: str = ""
    github_token: str | None = None

    # Catalog
    catalog_url: str = UnityDepsConstants.CATALOG_URL
    major_versions: tuple[int, ...] = UnityDepsConstants.MAJOR_VERSIONS
    stable_only: bool = True
    latest_only: bool = True

    # Downloads
    download_base_url: str = UnityDepsConstants.DOWNLOAD_BASE_URL
    request_timeout: float = UnityDepsConstants.DEFAULT_REQUEST_TIMEOUT
    download_retries: int = UnityDepsConstants.DEFAULT_DOWNLOAD_RETRIES
    retry_backoff: float = UnityDepsConstants.DEFAULT_RETRY_BACKOFF
    work_dir: Path | None = None

    # Run behaviour
    continue_on_error: bool = False
    dry_run: bool = False

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.github_token is None:
            self.github_token = os.getenv(UnityDepsConstants.ENV_GITHUB_TOKEN) or None

        if self.catalog_url == UnityDepsConstants.CATALOG_URL:
            if env_url := os.getenv(UnityDepsConstants.ENV_CATALOG_URL):
                self.catalog_url = env_url

        if self.download_base_url == UnityDepsConstants.DOWNLOAD_BASE_URL:
            if env_url := os.getenv(UnityDepsConstants.ENV_DOWNLOAD_BASE_URL):
                self.download_base_url = env_url

        if self.request_timeout == UnityDepsConstants.DEFAULT_REQUEST_TIMEOUT:
            env_timeout = _env_number(UnityDepsConstants.ENV_REQUEST_TIMEOUT, float)
            if env_timeout is not None:
                self.request_timeout = env_timeout

        if self.download_retries == UnityDepsConstants.DEFAULT_DOWNLOAD_RETRIES:
            env_retries = _env_number(UnityDepsConstants.ENV_DOWNLOAD_RETRIES, int)
            if env_retries is not None:
                self.download_retries = env_retries

        if self.work_dir is None:
            if env_dir := os.getenv(UnityDepsConstants.ENV_WORK_DIR):
                self.work_dir = Path(env_dir)
        elif not isinstance(self.work_dir, Path):
            self.work_dir = Path(self.work_dir)

        self.major_versions = tuple(int(major) for major in self.major_versions)

        if self.download_retries < 0:
            raise ConfigurationError("download_retries cannot be negative")
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

    def validate(self) -> None:
        """
        Check that everything needed to publish is present.

        Raises:
            ConfigurationError: If the repository coordinates or the token are missing
        """
        missing = [
            label
            for label, value in (
                ("repository owner", self.repo_owner),
                ("repository name", self.repo_name),
                ("main branch name", self.main_branch),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"The generator requires the following arguments: {', '.join(missing)}")
        if not self.github_token:
            raise ConfigurationError(
                f"No token provided; {UnityDepsConstants.ENV_GITHUB_TOKEN} environment variable is required."
            )

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """
        Create configuration from environment variables.

        Args:
            **overrides: Explicit values that take precedence over the environment

        Returns:
            Config instance with values from environment
        """
        return cls(**overrides)

    @classmethod
    def from_file(cls, config_file: Path, **overrides) -> "Config":
        """
        Load configuration from a .env file.

        Variables already present in the environment are not overwritten.

        Args:
            config_file: Path to .env file
            **overrides: Explicit values that take precedence over the environment

        Returns:
            Config instance
        """
        if config_file.exists():
            load_dotenv(config_file, override=False)

        return cls.from_env(**overrides)
