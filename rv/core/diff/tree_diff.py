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
Line-level diff between two tree snapshots.

The engine asks git for a full binary patch (`diff-tree -p` between trees,
`diff-index --cached -p` when the new side is the staging area) and walks it
line by line, tagging each line with the file it belongs to. Header lines of
a file are held back until the file produces real content, so deltas that
only touch file modes never reach the caller.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from loguru import logger

from rv.core.data.diff_line import DiffLine, LineOrigin
from rv.core.data.tree_snapshot import TreeSnapshot
from rv.core.exceptions import GitError
from rv.core.object_store.object_store import ObjectStore

_DIFF_HEADER = b"diff --git "
_DEV_NULL = b"/dev/null"

_MODE_RE = re.compile(rb"^(new|deleted) file mode (\d+)")
_OLD_PATH_RE = re.compile(rb"^--- (.+?)\t?$")
_NEW_PATH_RE = re.compile(rb"^\+\+\+ (.+?)\t?$")
_RENAME_FROM_RE = re.compile(rb"^rename from (.+)$")
_RENAME_TO_RE = re.compile(rb"^rename to (.+)$")
_A_B_PATHS_RE = re.compile(rb"^diff --git (\"?a/.+?\"?) (\"?b/.+?\"?)$")
_BINARY_RE = re.compile(rb"^Binary files .* differ$")
_UNMERGED_RE = re.compile(rb"^\* Unmerged path ")

_C_ESCAPES = {
    ord("a"): 7,
    ord("b"): 8,
    ord("t"): 9,
    ord("n"): 10,
    ord("v"): 11,
    ord("f"): 12,
    ord("r"): 13,
    ord('"'): ord('"'),
    ord("\\"): ord("\\"),
}


def unquote_path(raw: bytes) -> bytes:
    """Undo git's C-style quoting of unusual path names."""
    if len(raw) < 2 or not (raw.startswith(b'"') and raw.endswith(b'"')):
        return raw
    body = raw[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        c = body[i]
        if c != ord("\\") or i + 1 >= len(body):
            out.append(c)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _C_ESCAPES:
            out.append(_C_ESCAPES[nxt])
            i += 2
        elif body[i + 1 : i + 4].isdigit():
            out.append(int(body[i + 1 : i + 4], 8))
            i += 4
        else:
            out.append(nxt)
            i += 2
    return bytes(out)


def _strip_prefix(raw: bytes, prefix: bytes) -> bytes | None:
    path = unquote_path(raw.strip())
    if path == _DEV_NULL:
        return None
    if path.startswith(prefix):
        return path[len(prefix) :]
    return path


def _split_header_paths(line: bytes) -> tuple[bytes | None, bytes | None]:
    """Old and new path from a `diff --git a/X b/Y` line."""
    rest = line[len(_DIFF_HEADER) :].rstrip(b"\r\n")
    # unquoted same-name form: "a/X b/X", which may contain spaces
    if rest.startswith(b"a/") and (len(rest) - 5) % 2 == 0:
        n = (len(rest) - 5) // 2
        if rest[2 : 2 + n] == rest[5 + n :] and rest[2 + n : 5 + n] == b" b/":
            return rest[2 : 2 + n], rest[5 + n :]
    m = _A_B_PATHS_RE.match(line.rstrip(b"\r\n"))
    if not m:
        return None, None
    return _strip_prefix(m.group(1), b"a/"), _strip_prefix(m.group(2), b"b/")


def _decode_path(path: bytes | None) -> str | None:
    if path is None:
        return None
    return path.decode("utf-8", errors="replace")


@dataclass
class _FileState:
    """Header information for the file currently being parsed."""

    old_path: bytes | None = None
    new_path: bytes | None = None
    headers: list[bytes] = field(default_factory=list)
    in_hunks: bool = False
    emitted: bool = False

    @classmethod
    def from_header(cls, line: bytes) -> "_FileState":
        old, new = _split_header_paths(line)
        return cls(old_path=old, new_path=new, headers=[line])

    def absorb(self, line: bytes) -> None:
        """Record a header line and update paths from it."""
        self.headers.append(line)
        stripped = line.rstrip(b"\r\n")

        if m := _MODE_RE.match(stripped):
            if m.group(1) == b"new":
                self.old_path = None
            else:
                self.new_path = None
        elif m := _RENAME_FROM_RE.match(stripped):
            self.old_path = unquote_path(m.group(1))
        elif m := _RENAME_TO_RE.match(stripped):
            self.new_path = unquote_path(m.group(1))
        elif m := _OLD_PATH_RE.match(stripped):
            self.old_path = _strip_prefix(m.group(1), b"a/")
        elif m := _NEW_PATH_RE.match(stripped):
            self.new_path = _strip_prefix(m.group(1), b"b/")

    def line(self, origin: LineOrigin, content: bytes) -> DiffLine:
        return DiffLine(
            old_path=_decode_path(self.old_path),
            new_path=_decode_path(self.new_path),
            origin=origin,
            content=content,
        )

    def release_headers(self) -> Iterator[DiffLine]:
        if self.emitted:
            return
        self.emitted = True
        for header in self.headers:
            yield self.line(LineOrigin.FILE_HEADER, header)

    def emit(self, origin: LineOrigin, content: bytes) -> Iterator[DiffLine]:
        """Yield one line, preceded by the held headers on the first content line."""
        if origin.is_content:
            yield from self.release_headers()
        yield self.line(origin, content)


_CONTENT_ORIGINS = {
    ord("+"): LineOrigin.ADDITION,
    ord("-"): LineOrigin.DELETION,
    ord(" "): LineOrigin.CONTEXT,
    ord("\\"): LineOrigin.EOF_NEWLINE,
}


def parse_patch_stream(patch: bytes) -> Iterator[DiffLine]:
    """Split a `git diff -p` byte stream into path-tagged DiffLines."""
    state: _FileState | None = None

    for line in patch.splitlines(keepends=True):
        if line.startswith(_DIFF_HEADER):
            if state is not None and not state.emitted:
                logger.debug(f"Skipping header-only delta: {state.headers[0]!r}")
            state = _FileState.from_header(line)
            continue

        if state is None:
            if _UNMERGED_RE.match(line):
                logger.debug(f"Skipping unmerged entry: {line!r}")
            continue

        if line.startswith(b"@@"):
            state.in_hunks = True
            yield from state.emit(LineOrigin.HUNK_HEADER, line)
        elif state.in_hunks and line[:1] and line[0] in _CONTENT_ORIGINS:
            yield from state.emit(_CONTENT_ORIGINS[line[0]], line)
        elif _BINARY_RE.match(line.rstrip(b"\r\n")):
            yield from state.emit(LineOrigin.BINARY, line)
        elif _UNMERGED_RE.match(line):
            logger.debug(f"Skipping unmerged entry: {line!r}")
            state = None
        else:
            state.absorb(line)


class TreeDiffEngine:
    """Produces DiffLines between two optional tree snapshots."""

    def __init__(self, store: ObjectStore, find_renames: bool = False):
        self.store = store
        self.find_renames = find_renames

    def _diff_args(
        self, old: TreeSnapshot | None, new: TreeSnapshot | None
    ) -> list[str]:
        if old is not None and old.is_index:
            raise ValueError("The staging area can only be the new side of a diff")

        old_tree = old.oid if old is not None else self.store.empty_tree_id()
        rename_flag = "-M" if self.find_renames else "--no-renames"
        base = ["-c", "core.quotePath=false"]

        if new is not None and new.is_index:
            return base + ["diff-index", "--cached", "-p", rename_flag, old_tree]

        new_tree = new.oid if new is not None else self.store.empty_tree_id()
        return base + ["diff-tree", "-r", "-p", rename_flag, old_tree, new_tree]

    def diff(
        self, old: TreeSnapshot | None, new: TreeSnapshot | None
    ) -> Iterator[DiffLine]:
        """
        Lazily yield the lines of the patch turning `old` into `new`.

        A missing side is the empty tree, so `diff(None, tree)` shows every
        file as added and `diff(None, None)` yields nothing.
        """
        if old is None and new is None:
            return

        args = self._diff_args(old, new)
        patch = self.store.git.run_git_binary_out(args)
        if patch is None:
            raise GitError(
                "Failed to compute diff",
                f"git {' '.join(args)} exited with an error",
            )

        yield from parse_patch_stream(patch)
