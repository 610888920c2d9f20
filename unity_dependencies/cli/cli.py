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

"""Command-line interface for the Unity Dependencies Generator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.config import Config
from ..config.constants import UnityDepsConstants
from ..core.exceptions import ConfigurationError, UnityDependenciesError

logger = logging.getLogger("unity_dependencies.cli")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s" if not verbose else "%(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _load_config(args: argparse.Namespace) -> Config:
    """Build a :class:`Config` from CLI *args* and the environment."""
    overrides = {
        "repo_owner": args.repo_owner,
        "repo_name": args.repo_name,
        "main_branch": args.main_branch,
        "stable_only": not args.include_prereleases,
        "latest_only": not args.all_builds,
        "continue_on_error": args.continue_on_error,
        "dry_run": args.dry_run,
    }
    if args.major:
        overrides["major_versions"] = tuple(args.major)
    if args.work_dir:
        overrides["work_dir"] = Path(args.work_dir)

    if args.env_file:
        config = Config.from_file(Path(args.env_file), **overrides)
    else:
        config = Config.from_env(**overrides)
    config.validate()
    return config


def build_generator(config: Config):
    """Wire clients, catalog, pipeline and publisher for *config*.

    Returns:
        Tuple of (generator, clients to close when the run is over)
    """
    from ..core.catalog import VersionCatalog
    from ..core.clients.github import GitHubClient
    from ..core.clients.http import create_unity_client
    from ..core.generator import DependencyGenerator
    from ..core.pipeline import ArtifactPipeline
    from ..core.publisher import PublishCoordinator

    unity_client = create_unity_client(timeout=config.request_timeout)
    github = GitHubClient(
        config.repo_owner,
        config.repo_name,
        config.github_token or "",
        timeout=config.request_timeout,
    )

    catalog = VersionCatalog(
        unity_client,
        url=config.catalog_url,
        stable_only=config.stable_only,
        latest_only=config.latest_only,
    )
    pipeline = ArtifactPipeline(
        unity_client,
        download_base_url=config.download_base_url,
        download_retries=config.download_retries,
        retry_backoff=config.retry_backoff,
    )
    publisher = PublishCoordinator(github, config.main_branch)
    generator = DependencyGenerator(config, catalog, pipeline, publisher, release_tags=github)
    return generator, (unity_client, github)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unity-deps-generator",
        description="Publish Unity Android il2cpp managed assemblies and libunity.so builds as GitHub releases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
The GitHub token is read from the {UnityDepsConstants.ENV_GITHUB_TOKEN} environment variable.

Examples:
  unity-deps-generator LavaGang MelonLoader.UnityDependencies main
  unity-deps-generator LavaGang MelonLoader.UnityDependencies main --major 2022 --dry-run
        """,
    )
    parser.add_argument("repo_owner", help="Owner of the repository receiving the releases")
    parser.add_argument("repo_name", help="Name of the repository receiving the releases")
    parser.add_argument("main_branch", help="Branch whose tip new tags point at")
    parser.add_argument(
        "--major",
        type=int,
        action="append",
        metavar="N",
        help="Only query this major version family (repeatable, default: all known families)",
    )
    parser.add_argument("--include-prereleases", action="store_true", help="Also publish alpha/beta builds")
    parser.add_argument("--all-builds", action="store_true", help="Keep every build instead of only the latest")
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Log installers that cannot be downloaded or unpacked and move on instead of aborting",
    )
    parser.add_argument("--dry-run", action="store_true", help="List unpublished versions without processing them")
    parser.add_argument("--env-file", metavar="PATH", help="Load environment variables from a .env file")
    parser.add_argument("--work-dir", metavar="PATH", help="Parent directory for per-version temporary files")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        config = _load_config(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    generator, clients = build_generator(config)
    try:
        summary = generator.run()
    except UnityDependenciesError as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1
    finally:
        for client in clients:
            client.close()

    if config.dry_run:
        pending = summary.pending
        print(f"{len(pending)} version(s) to publish: {', '.join(pending) or 'none'}")
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
