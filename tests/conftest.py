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

import subprocess
from pathlib import Path

import pytest
from loguru import logger


def git(repo: Path, *args: str, input_bytes: bytes | None = None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        input=input_bytes,
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8", errors="replace").strip()


class GitRepo:
    """A throwaway repository with helpers for building history."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args: str) -> str:
        return git(self.path, *args)

    def write(self, rel_path: str, content: str | bytes) -> Path:
        target = self.path / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_bytes(content.encode("utf-8"))
        return target

    def apply_changes(self, changes: dict) -> None:
        """
        Apply a mapping of path -> change:
            str/bytes: write content
            None: delete the file
            (old, new) tuple: rename with git mv
        """
        for rel_path, change in changes.items():
            if change is None:
                self.git("rm", "-q", rel_path)
            elif isinstance(change, tuple):
                old, new = change
                (self.path / new).parent.mkdir(parents=True, exist_ok=True)
                self.git("mv", old, new)
            else:
                self.write(rel_path, change)
                self.git("add", rel_path)

    def commit(self, message: str = "commit", changes: dict | None = None) -> str:
        if changes:
            self.apply_changes(changes)
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")

    def branch(self, name: str, start: str = "HEAD") -> None:
        self.git("branch", name, start)

    def checkout(self, name: str) -> None:
        self.git("checkout", "-q", name)


@pytest.fixture
def repo_factory(tmp_path):
    def factory(name: str = "repo", initial_branch: str = "main") -> GitRepo:
        path = tmp_path / name
        path.mkdir()
        git(path, "init", "-q", "-b", initial_branch)
        git(path, "config", "user.email", "test@example.com")
        git(path, "config", "user.name", "Test User")
        git(path, "config", "commit.gpgsign", "false")
        return GitRepo(path)

    return factory


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru's default stderr sink out of test output."""
    logger.remove()
    yield
    logger.remove()
