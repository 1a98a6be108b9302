# -----------------------------------------------------------------------------
# rv - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of rv.
#
# rv is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------

from collections.abc import Callable, Iterable

from loguru import logger

from rv.core.data.diff_line import DiffLine
from rv.core.data.review_bundle import FilePatch

PathPredicate = Callable[[str], bool]


def binary_placeholder(size: int) -> str:
    return f"[BINARY DATA: {size} bytes]\n"


def decode_line(content: bytes) -> str:
    """Decode a diff line, replacing undecodable lines with a placeholder."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug(f"Undecodable diff line ({len(content)} bytes), using placeholder")
        return binary_placeholder(len(content))


class PatchReassembler:
    """
    Groups a DiffLine stream into one patch per file.

    A patch ends the moment the stream moves on to a different path. Paths
    for which `exclude` returns True are dropped entirely and reported in
    `excluded`.
    """

    def __init__(self, exclude: PathPredicate | None = None):
        self.exclude = exclude
        self.excluded: list[str] = []

    def reassemble(self, lines: Iterable[DiffLine]) -> list[FilePatch]:
        self.excluded = []
        order: list[str] = []
        texts: dict[str, str] = {}

        current_path: str | None = None
        buffer: list[str] = []

        def flush():
            if current_path is None or not buffer:
                return
            if current_path in texts:
                # the path came back after another one; keep it in one entry
                texts[current_path] += "".join(buffer)
            else:
                order.append(current_path)
                texts[current_path] = "".join(buffer)

        for line in lines:
            path = line.path
            if path != current_path:
                flush()
                buffer = []
                current_path = path

            if self.exclude is not None and self.exclude(path):
                if path not in self.excluded:
                    logger.debug(f"Excluding {path} from review")
                    self.excluded.append(path)
                continue

            buffer.append(decode_line(line.content))

        flush()

        return [FilePatch(path, texts[path]) for path in order]
