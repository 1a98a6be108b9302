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

"""
Tagged text rendering of review bundles.

Each file becomes a block opened by `<tag PATH >` and closed by `</tag>`:

    <diff src/app.py >
    ...patch...
    </diff>
    <source src/app.py >
    ...file content...
    </source>

All diff blocks come first, then all source blocks, both in the order the
files were first touched by the diff. There is no surrounding envelope.
"""

from collections.abc import Iterable

from loguru import logger

from rv.core.data.review_bundle import ReviewBundle
from rv.core.exceptions import ConfigurationError
from rv.core.file_reader.disk_file_reader import DiskFileReader
from rv.core.file_reader.protocol import FileReader

DIFF_TAG = "diff"
SOURCE_TAG = "source"
GUIDELINE_TAG = "guideline"
CONTEXT_TAG = "context"


def block(tag: str, path: str, body: str) -> str:
    return f"<{tag} {path} >\n{body}\n</{tag}>\n"


def source_unavailable(error: Exception | str) -> str:
    return f"[source unavailable: {error}]"


def read_source(reader: FileReader, path: str) -> str:
    try:
        return reader.read(path)
    except Exception as e:
        # any reader failure stays local to its block
        logger.debug(f"Could not read {path}: {e}")
        return source_unavailable(e)


def check_output_selection(include_patches: bool, include_sources: bool) -> None:
    if not include_patches and not include_sources:
        raise ConfigurationError(
            "Nothing to render: both diffs and sources are disabled",
            "Enable report_diffs or report_sources (--diffs / --sources)",
        )


def render(
    bundle: ReviewBundle,
    include_patches: bool = True,
    include_sources: bool = True,
    file_reader: FileReader | None = None,
) -> str:
    """
    Render a bundle as diff blocks followed by source blocks.

    `file_reader` defaults to reading from the bundle's repository root.
    A file that cannot be read becomes an inline placeholder instead of
    failing the render.
    """
    check_output_selection(include_patches, include_sources)
    if include_patches and bundle.patches is None:
        raise ConfigurationError(
            "Cannot render diffs: the bundle was resolved without patches"
        )

    parts: list[str] = []

    if include_patches:
        for file_patch in bundle.file_patches():
            parts.append(block(DIFF_TAG, file_patch.path, file_patch.text))

    if include_sources:
        reader = file_reader or DiskFileReader(bundle.root)
        for path in bundle.paths:
            parts.append(block(SOURCE_TAG, path, read_source(reader, path)))

    return "".join(parts)


def _render_optional(tag: str, paths: Iterable[str], reader: FileReader) -> list[str]:
    parts = []
    for path in paths:
        try:
            content = reader.read(path)
        except (OSError, UnicodeError) as e:
            logger.debug(f"Skipping {tag} file {path}: {e}")
            continue
        parts.append(block(tag, path, content))
    return parts


def render_project_context(
    guideline_files: Iterable[str],
    context_files: Iterable[str],
    file_reader: FileReader,
) -> str:
    """Guideline blocks then context blocks, skipping files that do not exist."""
    parts = _render_optional(GUIDELINE_TAG, guideline_files, file_reader)
    parts += _render_optional(CONTEXT_TAG, context_files, file_reader)
    return "".join(parts)
