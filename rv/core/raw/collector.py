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
Review bundles built from files on disk instead of from a git diff.

The bundle carries paths only; its sources are read by the serializer the
same way as for git targets.
"""

from pathlib import Path

from loguru import logger

from rv.core.data.review_bundle import FilePatch, ReviewBundle
from rv.core.data.review_target import Raw
from rv.core.exceptions import FileSystemError, ValidationError

SKIPPED_DIRS = frozenset({".git"})


def collect_files(directory: Path, recursive: bool = False) -> list[Path]:
    """Regular files in `directory` (and its subdirectories when recursive), in name order."""
    files: list[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            if not recursive or entry.name in SKIPPED_DIRS:
                continue
            if entry.is_symlink():
                logger.debug(f"Not following directory symlink {entry}")
                continue
            files.extend(collect_files(entry, recursive))
        elif entry.is_file():
            files.append(entry)
    return files


def _anchor(base: Path, target: Path) -> Path:
    """Root the bundle at `base` when the target lies under it."""
    if target.is_relative_to(base):
        return base
    return target if target.is_dir() else target.parent


def raw_bundle(
    base: Path,
    file: str | Path | None = None,
    directory: str | Path | None = None,
    recursive: bool = False,
) -> ReviewBundle:
    """
    Bundle the files named by exactly one of `file` or `directory`.

    Relative selectors are taken from `base`. The bundle has no patches, so it
    renders as sources only.
    """
    if (file is None) == (directory is None):
        raise ValidationError(
            "Raw mode needs exactly one of --file or --dir",
            "Use --file PATH for a single file or --dir PATH [--recursive] for a directory",
        )

    base = Path(base).resolve()

    if file is not None:
        path = (base / file).resolve()
        if not path.is_file():
            raise FileSystemError(f"File does not exist: {file}")
        target = Raw(str(file))
        files = [path]
    else:
        path = (base / directory).resolve()
        if not path.is_dir():
            raise FileSystemError(
                f"Directory does not exist or is not a directory: {directory}"
            )
        target = Raw(str(directory), recursive)
        files = collect_files(path, recursive)

    root = _anchor(base, path)
    logger.debug(f"Raw review of {target.describe()}: {len(files)} files under {root}")

    return ReviewBundle.from_file_patches(
        [FilePatch(f.relative_to(root).as_posix(), "") for f in files],
        root=root,
        target=target,
        include_patches=False,
    )
