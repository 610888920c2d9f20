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
Tests for configuration module.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from unity_dependencies.config.config import Config
from unity_dependencies.config.constants import UnityDepsConstants
from unity_dependencies.core.exceptions import ConfigurationError


def _clean_env() -> dict[str, str]:
    return {
        k: v
        for k, v in os.environ.items()
        if not k.startswith("UNITY_DEPS_") and k != UnityDepsConstants.ENV_GITHUB_TOKEN
    }


class TestConfigInitialization:
    """Test Config class initialization."""

    def test_config_with_defaults(self):
        """Test config initialization with default values."""
        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config()

            assert config.github_token is None
            assert config.catalog_url == UnityDepsConstants.CATALOG_URL
            assert config.major_versions == UnityDepsConstants.MAJOR_VERSIONS
            assert config.stable_only
            assert config.latest_only
            assert config.download_retries == UnityDepsConstants.DEFAULT_DOWNLOAD_RETRIES
            assert config.work_dir is None
            assert not config.continue_on_error
            assert not config.dry_run

    def test_config_with_custom_values(self):
        """Test config with custom values."""
        config = Config(
            repo_owner="LavaGang",
            repo_name="MelonLoader.UnityDependencies",
            main_branch="main",
            github_token="ghp_test",
            major_versions=[2022, 6],
            download_retries=0,
            work_dir="/tmp/unity",
        )

        assert config.repo_owner == "LavaGang"
        assert config.major_versions == (2022, 6)
        assert config.download_retries == 0
        assert config.work_dir == Path("/tmp/unity")

    def test_config_from_env_variables(self):
        """Test config loading from environment variables."""
        env = _clean_env()
        env.update(
            {
                "GH_TOKEN": "ghp_from_env",
                "UNITY_DEPS_CATALOG_URL": "https://catalog.example.test/graphql",
                "UNITY_DEPS_DOWNLOAD_BASE_URL": "https://mirror.example.test",
                "UNITY_DEPS_REQUEST_TIMEOUT": "15",
                "UNITY_DEPS_DOWNLOAD_RETRIES": "5",
                "UNITY_DEPS_WORK_DIR": "/var/tmp/unity-deps",
            }
        )
        with patch.dict("os.environ", env, clear=True):
            config = Config()

            assert config.github_token == "ghp_from_env"
            assert config.catalog_url == "https://catalog.example.test/graphql"
            assert config.download_base_url == "https://mirror.example.test"
            assert config.request_timeout == 15.0
            assert config.download_retries == 5
            assert config.work_dir == Path("/var/tmp/unity-deps")

    def test_explicit_values_win_over_environment(self):
        """Explicit arguments are not replaced by environment values."""
        env = _clean_env()
        env.update({"GH_TOKEN": "ghp_from_env", "UNITY_DEPS_DOWNLOAD_RETRIES": "9"})
        with patch.dict("os.environ", env, clear=True):
            config = Config(github_token="ghp_explicit", download_retries=1)

            assert config.github_token == "ghp_explicit"
            assert config.download_retries == 1

    def test_empty_token_is_treated_as_missing(self):
        """Test that an empty GH_TOKEN counts as no token."""
        env = _clean_env()
        env["GH_TOKEN"] = ""
        with patch.dict("os.environ", env, clear=True):
            assert Config().github_token is None

    def test_invalid_numeric_environment_value(self):
        """A non-numeric value raises ConfigurationError naming the variable."""
        env = _clean_env()
        env["UNITY_DEPS_DOWNLOAD_RETRIES"] = "lots"
        with patch.dict("os.environ", env, clear=True):
            with pytest.raises(ConfigurationError, match="UNITY_DEPS_DOWNLOAD_RETRIES"):
                Config()

    def test_negative_retries_rejected(self):
        """Test that negative retries are rejected."""
        with pytest.raises(ConfigurationError, match="negative"):
            Config(download_retries=-1)

    def test_non_positive_timeout_rejected(self):
        """Test that a zero timeout is rejected."""
        with pytest.raises(ConfigurationError, match="positive"):
            Config(request_timeout=0)


class TestConfigValidation:
    """Test Config.validate."""

    def test_complete_config_passes(self):
        """Test that a complete config validates."""
        Config(repo_owner="o", repo_name="r", main_branch="main", github_token="t").validate()

    def test_missing_arguments_listed(self):
        """Every missing repository argument is named in the message."""
        config = Config(repo_owner="o", github_token="t")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "repository name" in message
        assert "main branch name" in message
        assert "repository owner" not in message

    def test_missing_token(self):
        """Test that validation requires GH_TOKEN."""
        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config(repo_owner="o", repo_name="r", main_branch="main")

            with pytest.raises(ConfigurationError, match="GH_TOKEN"):
                config.validate()


class TestConfigFromFile:
    """Test loading configuration from a .env file."""

    def test_from_file_loads_dotenv(self, tmp_path):
        """Test loading values from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("GH_TOKEN=ghp_dotenv\nUNITY_DEPS_DOWNLOAD_RETRIES=7\n")

        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config.from_file(env_file, repo_owner="o")

            assert config.github_token == "ghp_dotenv"
            assert config.download_retries == 7
            assert config.repo_owner == "o"

    def test_from_file_does_not_override_environment(self, tmp_path):
        """Test that .env values do not override the environment."""
        env_file = tmp_path / ".env"
        env_file.write_text("GH_TOKEN=ghp_dotenv\n")
        env = _clean_env()
        env["GH_TOKEN"] = "ghp_shell"

        with patch.dict("os.environ", env, clear=True):
            assert Config.from_file(env_file).github_token == "ghp_shell"

    def test_from_file_missing_file(self, tmp_path):
        """A missing .env file falls back to the environment alone."""
        with patch.dict("os.environ", _clean_env(), clear=True):
            config = Config.from_file(tmp_path / "absent.env")

            assert config.github_token is None
