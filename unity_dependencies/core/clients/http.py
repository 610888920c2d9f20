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
HTTP transport for the Unity catalog and installer downloads.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import httpx

from ...config.constants import UnityDepsConstants
from ..exceptions import DownloadError

logger = logging.getLogger(__name__)


def create_unity_client(timeout: float = UnityDepsConstants.DEFAULT_REQUEST_TIMEOUT, **kwargs) -> httpx.Client:
    """
    Build the client used for catalog queries and installer downloads.

    Extra keyword arguments are forwarded to :class:`httpx.Client`, which is
    how tests inject a ``transport``.
    """
    return httpx.Client(
        headers={"User-Agent": UnityDepsConstants.DOWNLOAD_USER_AGENT},
        timeout=timeout,
        follow_redirects=True,
        **kwargs,
    )


def download_file(
    client: httpx.Client,
    url: str,
    target: Path,
    retries: int = UnityDepsConstants.DEFAULT_DOWNLOAD_RETRIES,
    backoff: float = UnityDepsConstants.DEFAULT_RETRY_BACKOFF,
) -> bool:
    """
    Stream *url* into *target*.

    Args:
        client: HTTP client to use
        url: File to download
        target: Destination file, overwritten on every attempt
        retries: Extra attempts after a transport-level failure
        backoff: Seconds to wait per attempt number before retrying

    Returns:
        True when the file was written, False when the server answered with a
        non-success status (the file does not exist for this build)

    Raises:
        DownloadError: If every attempt failed at the transport level
    """
    attempts = retries + 1
    for attempt in range(1, attempts + 1):
        try:
            with client.stream("GET", url) as response:
                if not response.is_success:
                    logger.debug("GET %s returned status %d", url, response.status_code)
                    return False

                target.parent.mkdir(parents=True, exist_ok=True)
                with open(target, "wb") as f:
                    for chunk in response.iter_bytes(UnityDepsConstants.DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
            return True
        except httpx.TransportError as e:
            if attempt >= attempts:
                raise DownloadError(f"Download of {url} failed after {attempts} attempt(s): {e}") from e
            logger.warning("Download attempt %d/%d failed: %s", attempt, attempts, e)
            if backoff > 0:
                time.sleep(backoff * attempt)

    return False
