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
Single-layer archive extraction for the nested installer chain.

Each call peels exactly one container (xar ``.pkg``, a compressed payload
stream, or a cpio/tar payload) into a directory. Entries are streamed block
by block from libarchive, and members that do not match the requested
patterns are skipped without reading their data.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import libarchive

from ..exceptions import ArchiveExtractionError

logger = logging.getLogger(__name__)

RAW_SUFFIX = "~"


def normalize_member_name(name: str) -> str:
    """Strip ``./`` and ``/`` prefixes so archive names and patterns compare equal."""
    while name.startswith("./"):
        name = name[2:]
    return name.lstrip("/")


@dataclass(frozen=True)
class ExtractionRequest:
    """One extraction call: which container, where to, and which members."""

    source: Path
    destination: Path
    recursive: bool = False
    patterns: frozenset[str] = field(default_factory=frozenset)
    raw: bool = False

    def matches(self, member_name: str) -> bool:
        """Return True when *member_name* is selected by the request's patterns."""
        if not self.patterns:
            return True
        name = normalize_member_name(member_name)
        return any(fnmatch.fnmatchcase(name, normalize_member_name(pattern)) for pattern in self.patterns)


class ArchiveExtractor:
    """
    Unwraps one archive layer into a directory.

    ``recursive`` requests keep each member's directory tree below the
    destination; non-recursive requests write matching members flat, by file
    name. ``raw`` requests treat the source as a single compressed stream and
    write its decompressed content as ``<source name>~``.
    """

    def extract(
        self,
        source: Path,
        destination: Path,
        recursive: bool = False,
        patterns: Iterable[str] = (),
        *,
        raw: bool = False,
    ) -> set[Path]:
        """
        Extract *source* into *destination*.

        Args:
            source: Archive to read
            destination: Directory receiving the extracted files
            recursive: Keep member directory structure instead of flattening
            patterns: Glob patterns selecting members; empty selects everything
            raw: Decompress a single-stream payload instead of reading entries

        Returns:
            Paths of the files written

        Raises:
            ArchiveExtractionError: If the archive is corrupt or unreadable
        """
        request = ExtractionRequest(
            source=Path(source),
            destination=Path(destination),
            recursive=recursive,
            patterns=frozenset(patterns),
            raw=raw,
        )
        return self.run(request)

    def run(self, request: ExtractionRequest) -> set[Path]:
        """Execute a prepared :class:`ExtractionRequest`."""
        if not request.source.is_file():
            logger.warning("Archive %s does not exist; nothing extracted", request.source)
            return set()

        request.destination.mkdir(parents=True, exist_ok=True)

        try:
            if request.raw:
                extracted = self._extract_raw(request)
            else:
                extracted = self._extract_entries(request)
        except libarchive.ArchiveError as e:
            raise ArchiveExtractionError(f"Failed to extract {request.source.name}: {e}") from e

        if request.patterns and not extracted:
            logger.info("No members of %s matched %s", request.source.name, sorted(request.patterns))
        else:
            logger.debug("Extracted %d file(s) from %s", len(extracted), request.source.name)
        return extracted

    def _extract_raw(self, request: ExtractionRequest) -> set[Path]:
        target = request.destination / f"{request.source.name}{RAW_SUFFIX}"
        with libarchive.file_reader(str(request.source), format_name="raw") as archive:
            for entry in archive:
                self._write_entry(entry, target)
                return {target}
        return set()

    def _extract_entries(self, request: ExtractionRequest) -> set[Path]:
        extracted: set[Path] = set()
        destination_root = request.destination.resolve()

        with libarchive.file_reader(str(request.source)) as archive:
            for entry in archive:
                name = normalize_member_name(entry.pathname or "")
                if not name or entry.isdir:
                    continue
                if not request.matches(name):
                    continue
                if entry.issym or entry.islnk:
                    logger.warning("Skipping link entry %s in %s", name, request.source.name)
                    continue
                if not entry.isfile:
                    continue

                target = self._target_path(request, name)
                try:
                    target.resolve().relative_to(destination_root)
                except ValueError:
                    logger.warning("Skipping entry %s escaping %s", name, request.destination)
                    continue

                self._write_entry(entry, target)
                extracted.add(target)

        return extracted

    @staticmethod
    def _target_path(request: ExtractionRequest, name: str) -> Path:
        member = PurePosixPath(name)
        if request.recursive:
            return request.destination.joinpath(*member.parts)
        return request.destination / member.name

    @staticmethod
    def _write_entry(entry, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            for block in entry.get_blocks():
                f.write(block)
